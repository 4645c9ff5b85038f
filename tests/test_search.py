"""
Search and move-selection tests.

Covers:
- Depth-0 base case and terminal nodes
- Alpha-beta vs exhaustive minimax (same score, never more nodes)
- Mate finding for both colors, material wins, tie-breaking
- Error paths (finished games, bad FEN, depth limits)
- Purity: boards are never modified, results are reproducible
"""

import random

import chess
import pytest

from engine import get_best_move, InvalidPosition, NoLegalMoves
from engine.constants import MATE_SCORE, MAX_DEPTH
from engine.evaluate import evaluate
from engine.search import SearchStats, best_move, format_move, minimax, search

SCHOLARS_MATE_IN_ONE = "r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 0 1"
WHITE_BACK_RANK = "6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1"
BLACK_BACK_RANK = "r5k1/5ppp/8/8/8/8/5PPP/6K1 b - - 0 1"
HANGING_WHITE_QUEEN = "4k3/8/8/8/8/8/Q5q1/4K3 b - - 0 1"
FOOLS_MATE = "rnb1kbnr/pppp1ppp/4p3/8/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"

SMALL_POSITIONS = [
    WHITE_BACK_RANK,
    BLACK_BACK_RANK,
    HANGING_WHITE_QUEEN,
    "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1",
    "8/1p4k1/p7/P1K5/8/8/8/8 w - - 0 1",
    "4k3/8/8/3pP3/3P4/8/8/4K3 w - - 0 1",
]


# ════════════════════════════════════════════════════════════════════════════
#  BASE CASES
# ════════════════════════════════════════════════════════════════════════════


class TestBaseCases:
    @pytest.mark.parametrize("fen", [chess.STARTING_FEN, SCHOLARS_MATE_IN_ONE, *SMALL_POSITIONS])
    @pytest.mark.parametrize("alpha, beta", [(-MATE_SCORE, MATE_SCORE), (-5, 5), (0, 1)])
    def test_depth_zero_is_static_eval(self, fen, alpha, beta):
        board = chess.Board(fen)
        for side in (chess.WHITE, chess.BLACK):
            assert search(board, 0, alpha, beta, side) == evaluate(board)

    @pytest.mark.parametrize("fen, expected", [(FOOLS_MATE, -MATE_SCORE), (STALEMATE, 0)])
    def test_terminal_node_ignores_depth(self, fen, expected):
        board = chess.Board(fen)
        stats = SearchStats()
        assert search(board, 3, -MATE_SCORE, MATE_SCORE, board.turn, stats) == expected
        assert stats.node_count == 1

    def test_minimax_depth_zero(self):
        board = chess.Board(WHITE_BACK_RANK)
        assert minimax(board, 0, chess.WHITE) == evaluate(board)


# ════════════════════════════════════════════════════════════════════════════
#  PRUNING EQUIVALENCE
# ════════════════════════════════════════════════════════════════════════════


def _random_positions(count: int, plies: int, seed: int) -> list[chess.Board]:
    rng = random.Random(seed)
    boards = []
    for _ in range(count):
        board = chess.Board()
        for _ply in range(plies):
            moves = list(board.legal_moves)
            if not moves:
                break
            board.push(rng.choice(moves))
        boards.append(board)
    return boards


class TestPruningEquivalence:
    @pytest.mark.parametrize("fen", SMALL_POSITIONS)
    @pytest.mark.parametrize("depth", [1, 2, 3])
    def test_small_positions(self, fen, depth):
        board = chess.Board(fen)
        ab_stats, mm_stats = SearchStats(), SearchStats()
        pruned = search(board, depth, -MATE_SCORE, MATE_SCORE, board.turn, ab_stats)
        exhaustive = minimax(board, depth, board.turn, mm_stats)
        assert pruned == exhaustive
        assert ab_stats.node_count <= mm_stats.node_count

    @pytest.mark.parametrize("depth", [1, 2])
    def test_random_middlegames(self, depth):
        for board in _random_positions(count=4, plies=12, seed=7):
            pruned = search(board, depth, -MATE_SCORE, MATE_SCORE, board.turn)
            assert pruned == minimax(board, depth, board.turn)

    def test_pruning_saves_nodes(self):
        board = chess.Board(SCHOLARS_MATE_IN_ONE)
        ab_stats, mm_stats = SearchStats(), SearchStats()
        search(board, 2, -MATE_SCORE, MATE_SCORE, board.turn, ab_stats)
        minimax(board, 2, board.turn, mm_stats)
        assert ab_stats.node_count < mm_stats.node_count

    def test_side_parameter_drives_layers(self):
        # The side argument, not board.turn, decides max vs min.
        board = chess.Board(HANGING_WHITE_QUEEN)
        as_white = search(board, 1, -MATE_SCORE, MATE_SCORE, chess.WHITE)
        assert as_white == minimax(board, 1, chess.WHITE)
        as_black = search(board, 1, -MATE_SCORE, MATE_SCORE, chess.BLACK)
        assert as_black == minimax(board, 1, chess.BLACK)
        assert as_white >= as_black


# ════════════════════════════════════════════════════════════════════════════
#  MOVE SELECTION
# ════════════════════════════════════════════════════════════════════════════


class TestBestMove:
    def test_scholars_mate(self):
        """Qxf7# is found at depth 3."""
        assert get_best_move(SCHOLARS_MATE_IN_ONE, 3) == "h5 f7"

    @pytest.mark.parametrize("depth", [0, 1, 2])
    def test_white_back_rank_mate(self, depth):
        assert get_best_move(WHITE_BACK_RANK, depth) == "a1 a8"

    @pytest.mark.parametrize("depth", [0, 1, 2])
    def test_black_back_rank_mate(self, depth):
        assert get_best_move(BLACK_BACK_RANK, depth) == "a8 a1"

    def test_mate_scores(self):
        move, score = best_move(chess.Board(WHITE_BACK_RANK), 1)
        assert move == chess.Move.from_uci("a1a8")
        assert score == MATE_SCORE
        move, score = best_move(chess.Board(BLACK_BACK_RANK), 1)
        assert move == chess.Move.from_uci("a8a1")
        assert score == -MATE_SCORE

    @pytest.mark.parametrize("depth", [0, 1])
    def test_black_minimizes(self, depth):
        move, score = best_move(chess.Board(HANGING_WHITE_QUEEN), depth)
        assert move == chess.Move.from_uci("g2a2")
        assert score == -90

    def test_tie_keeps_first_generated_move(self):
        # Bare kings in the corner: every reply scores 0.
        board = chess.Board("8/8/8/8/8/8/8/K6k w - - 0 1")
        move, score = best_move(board, 0)
        assert score == 0
        assert move == next(iter(board.legal_moves))

    @pytest.mark.parametrize("fen", [chess.STARTING_FEN, SCHOLARS_MATE_IN_ONE, *SMALL_POSITIONS])
    def test_move_is_legal(self, fen):
        board = chess.Board(fen)
        move, _ = best_move(board, 1)
        assert move in board.legal_moves

    def test_random_positions_return_legal_moves(self):
        for board in _random_positions(count=5, plies=20, seed=99):
            if board.is_checkmate() or board.is_stalemate():
                continue
            move, _ = best_move(board, 1)
            assert move in board.legal_moves

    def test_deterministic(self):
        board = chess.Board("r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4")
        assert best_move(board, 1) == best_move(board, 1)
        assert get_best_move(board.fen(), 1) == get_best_move(board.fen(), 1)

    def test_board_not_modified(self):
        board = chess.Board(SCHOLARS_MATE_IN_ONE)
        before = board.fen()
        best_move(board, 1)
        search(board, 2, -MATE_SCORE, MATE_SCORE, board.turn)
        minimax(board, 1, board.turn)
        assert board.fen() == before
        assert board.move_stack == []

    def test_stats_count_every_root_child(self):
        board = chess.Board()
        stats = SearchStats()
        best_move(board, 0, stats)
        assert stats.node_count == 20


# ════════════════════════════════════════════════════════════════════════════
#  ERRORS
# ════════════════════════════════════════════════════════════════════════════


class TestErrors:
    def test_checkmate_has_no_move(self):
        with pytest.raises(NoLegalMoves) as exc_info:
            get_best_move(FOOLS_MATE, 2)
        assert exc_info.value.status == "checkmate"

    def test_stalemate_has_no_move(self):
        with pytest.raises(NoLegalMoves) as exc_info:
            best_move(chess.Board(STALEMATE), 2)
        assert exc_info.value.status == "stalemate"

    @pytest.mark.parametrize("fen", ["", "hello", "8/8/8/8/8/8/8/8 w - - 0 1"])
    def test_invalid_fen(self, fen):
        with pytest.raises(InvalidPosition):
            get_best_move(fen, 1)

    @pytest.mark.parametrize("depth", [-1, MAX_DEPTH + 1])
    def test_depth_out_of_range(self, depth):
        with pytest.raises(ValueError):
            get_best_move(chess.STARTING_FEN, depth)


# ════════════════════════════════════════════════════════════════════════════
#  FORMATTING
# ════════════════════════════════════════════════════════════════════════════


class TestFormatMove:
    @pytest.mark.parametrize(
        "uci, expected",
        [
            ("e2e4", "e2 e4"),
            ("h5f7", "h5 f7"),
            ("e1g1", "e1 g1"),
            ("a7a8q", "a7 a8"),
            ("a7a8n", "a7 a8"),
        ],
    )
    def test_source_and_destination_only(self, uci, expected):
        assert format_move(chess.Move.from_uci(uci)) == expected

    def test_promotion_is_dropped(self):
        move_str = get_best_move("8/P6k/8/8/8/8/8/K7 w - - 0 1", 0)
        assert move_str == "a7 a8"
