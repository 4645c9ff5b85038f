"""
Static evaluation: material balance plus center control.

The search needs a number for every leaf it reaches. This evaluation is
deliberately simple: count material with the classical 1/3/3/5/9 values,
multiply by MATERIAL_WEIGHT so material always dominates, then add one point
for every piece standing on d4, e4, d5 or e5.

Scores are always from White's perspective. Positive means White is better,
negative means Black is better. This is the minimax convention (White
maximizes, Black minimizes), not the negamax "side to move" convention.

Terminal positions short-circuit the heuristics:
    stalemate                  -> DRAW_SCORE (0)
    checkmate, White to move   -> -MATE_SCORE
    checkmate, Black to move   -> +MATE_SCORE
"""

import chess

from engine import rules
from engine.constants import (
    CENTER_MASK,
    DRAW_SCORE,
    MATE_SCORE,
    MATERIAL_WEIGHT,
    PIECE_VALUES,
)


def material_score(board: chess.Board) -> int:
    """
    White material minus Black material, in pawn units.

    Kings are not counted. Swapping the colors of every piece on the board
    negates the result.

    Example:
        >>> material_score(chess.Board())
        0
        >>> material_score(chess.Board("4k3/8/8/8/8/8/8/R3K3 w - - 0 1"))
        5
    """
    white = sum(len(board.pieces(pt, chess.WHITE)) * v for pt, v in PIECE_VALUES.items())
    black = sum(len(board.pieces(pt, chess.BLACK)) * v for pt, v in PIECE_VALUES.items())
    return white - black


def positional_score(board: chess.Board) -> int:
    """White pieces on the four center squares minus Black pieces there."""
    white = len(chess.SquareSet(board.occupied_co[chess.WHITE] & CENTER_MASK))
    black = len(chess.SquareSet(board.occupied_co[chess.BLACK] & CENTER_MASK))
    return white - black


def evaluate(board: chess.Board) -> int:
    """
    Static evaluation of `board` from White's perspective.

    Args:
        board: The position to score. Not modified.

    Returns:
        DRAW_SCORE for stalemate, -MATE_SCORE / +MATE_SCORE when White / Black
        is checkmated, otherwise MATERIAL_WEIGHT * material + center control.
        Non-terminal scores never reach MATE_SCORE - 1 in magnitude.
    """
    return evaluate_with_status(board, rules.status(board))


def evaluate_with_status(board: chess.Board, state: rules.Status) -> int:
    """evaluate() for callers that already know the game status of `board`."""
    if state is rules.Status.STALEMATE:
        return DRAW_SCORE
    if state is rules.Status.CHECKMATE:
        # The side to move is the side that has been mated.
        return -MATE_SCORE if board.turn == chess.WHITE else MATE_SCORE

    return MATERIAL_WEIGHT * material_score(board) + positional_score(board)
