"""
Search entry point: fixed-depth minimax with alpha-beta pruning.

This module defines the public interface the UCI handler and the web API
depend on. get_best_move() takes a FEN and a depth and returns the chosen
move as "<from> <to>" (e.g. "e2 e4").

Search layout:

1. best_move() enumerates the root position's legal moves and scores each
   resulting child with search(). The root enumeration itself does not consume
   depth, so a depth-3 request looks four plies ahead in total.

2. search() is classic two-sided minimax: White layers maximize, Black layers
   minimize, and scores are always from White's perspective (see evaluate.py).
   The [alpha, beta] window prunes siblings once a branch can no longer change
   the parent's choice.

3. minimax() is the same recursion with no window at all. It is far slower
   and exists as a reference: for any position and depth it must return
   exactly what search() returns. Tests and tools/bench.py rely on that.

Every root child is searched with the full (-MATE_SCORE, MATE_SCORE) window.
Threading the best-so-far score into later siblings would prune more, but is
not done here.

Positions are never mutated: each child is a fresh board produced by
rules.apply_move(), so no push/pop bookkeeping is required.

Each node computes its game status once and hands it to the evaluator.
Interior nodes still start legal-move generation twice: rules.status() stops
at the first legal move, then the move loop enumerates them all.
"""

import logging
from dataclasses import dataclass

import chess

from engine import rules
from engine.constants import MATE_SCORE, MAX_DEPTH
from engine.errors import NoLegalMoves
from engine.evaluate import evaluate_with_status

_log = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """
    Per-call instrumentation, owned by the caller.

    Pass one into search(), minimax() or best_move() to learn how much work a
    search did. The engine only ever increments it; it is never retained
    between calls.

    Attributes:
        node_count: Number of positions visited (interior nodes and leaves).
    """

    node_count: int = 0


def search(
    board: chess.Board,
    depth: int,
    alpha: int,
    beta: int,
    side_to_move: chess.Color,
    stats: SearchStats | None = None,
) -> int:
    """
    Minimax search with alpha-beta pruning.

    Args:
        board:        Position to search. Not modified.
        depth:        Remaining depth in plies. 0 means "evaluate statically".
        alpha:        Best score White is already guaranteed elsewhere.
        beta:         Best score Black is already guaranteed elsewhere.
        side_to_move: chess.WHITE for a maximizing layer, chess.BLACK for a
                      minimizing one. Ignored at leaves and terminal nodes.
        stats:        Optional node counter.

    Returns:
        Score from White's perspective. With the full (-MATE_SCORE,
        MATE_SCORE) window this is exactly minimax(board, depth, side_to_move);
        with a narrower window a result outside (alpha, beta) is only a bound.
    """
    if stats is not None:
        stats.node_count += 1

    state = rules.status(board)
    if depth == 0 or state is not rules.Status.ONGOING:
        return evaluate_with_status(board, state)

    if side_to_move == chess.WHITE:
        best = -MATE_SCORE
        running_alpha = alpha
        for move in rules.legal_moves(board):
            score = search(
                rules.apply_move(board, move), depth - 1, running_alpha, beta, chess.BLACK, stats
            )
            best = max(best, score)
            running_alpha = max(running_alpha, score)
            if beta <= running_alpha:
                break
        return best

    best = MATE_SCORE
    running_beta = beta
    for move in rules.legal_moves(board):
        score = search(
            rules.apply_move(board, move), depth - 1, alpha, running_beta, chess.WHITE, stats
        )
        best = min(best, score)
        running_beta = min(running_beta, score)
        if running_beta <= alpha:
            break
    return best


def minimax(
    board: chess.Board,
    depth: int,
    side_to_move: chess.Color,
    stats: SearchStats | None = None,
) -> int:
    """Exhaustive minimax: search() without pruning. Reference only."""
    if stats is not None:
        stats.node_count += 1

    state = rules.status(board)
    if depth == 0 or state is not rules.Status.ONGOING:
        return evaluate_with_status(board, state)

    scores = (
        minimax(rules.apply_move(board, move), depth - 1, not side_to_move, stats)
        for move in rules.legal_moves(board)
    )
    if side_to_move == chess.WHITE:
        return max(scores, default=-MATE_SCORE)
    return min(scores, default=MATE_SCORE)


def best_move(
    board: chess.Board,
    depth: int,
    stats: SearchStats | None = None,
) -> tuple[chess.Move, int]:
    """
    Pick the best legal move for the side to move.

    Each candidate is scored by searching the resulting position to `depth`
    with a fresh window. White keeps the highest score, Black the lowest.
    Ties go to the move python-chess generated first, so the result is
    reproducible for a given position.

    Args:
        board: Current position. Not modified.
        depth: Plies to search below each candidate move.
        stats: Optional node counter shared by every candidate's search.

    Returns:
        (move, score) with score from White's perspective.

    Raises:
        NoLegalMoves: The position is checkmate or stalemate.
    """
    state = rules.status(board)
    if state is not rules.Status.ONGOING:
        raise NoLegalMoves(board.fen(), state.value)

    maximizing = board.turn == chess.WHITE
    chosen: tuple[chess.Move, int] | None = None

    for move in rules.legal_moves(board):
        child = rules.apply_move(board, move)
        score = search(child, depth, -MATE_SCORE, MATE_SCORE, child.turn, stats)

        if chosen is None:
            chosen = (move, score)
        elif (maximizing and score > chosen[1]) or (not maximizing and score < chosen[1]):
            chosen = (move, score)

    if chosen is None:
        # Unreachable while status() and legal_moves() agree.
        raise NoLegalMoves(board.fen(), "no moves generated")

    return chosen


def format_move(move: chess.Move) -> str:
    """
    Format a move as "<from> <to>", e.g. "e2 e4".

    The promotion piece is not included: "e7e8q" and "e7e8n" both format as
    "e7 e8".
    """
    return f"{chess.square_name(move.from_square)} {chess.square_name(move.to_square)}"


def get_best_move(position_fen: str, depth: int) -> str:
    """
    Return the best move for the position described by `position_fen`.

    This is the stable string-in, string-out entry point. It decodes the FEN,
    runs best_move() and formats the result.

    Args:
        position_fen: Position in Forsyth-Edwards Notation.
        depth:        Plies to search below the root moves, in [0, MAX_DEPTH].

    Returns:
        The chosen move as "<from> <to>", e.g. "h5 f7".

    Raises:
        InvalidPosition: The FEN cannot be decoded into a valid position.
        NoLegalMoves:    The position is checkmate or stalemate.
        ValueError:      depth is outside [0, MAX_DEPTH].
    """
    if not 0 <= depth <= MAX_DEPTH:
        raise ValueError(f"depth must be in [0, {MAX_DEPTH}], got {depth}")

    board = rules.decode_fen(position_fen)
    stats = SearchStats()
    move, score = best_move(board, depth, stats)

    _log.debug(
        "best move %s score=%d depth=%d nodes=%d fen=%s",
        move.uci(),
        score,
        depth,
        stats.node_count,
        position_fen,
    )
    return format_move(move)
