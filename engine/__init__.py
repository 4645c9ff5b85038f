"""
Chess engine package.

Fixed-depth minimax with alpha-beta pruning over a material + center-control
evaluation. Chess rules (move generation, FEN parsing, mate detection) come
from python-chess.

Modules:
    constants — Piece values, evaluation weights, mate sentinels, depth limits
    errors    — InvalidPosition and NoLegalMoves
    rules     — Adapter over python-chess: FEN decoding, status, move application
    evaluate  — Static evaluation from White's perspective
    search    — Alpha-beta search, move selection, get_best_move() entry point
"""

from engine.errors import EngineError, InvalidPosition, NoLegalMoves
from engine.search import get_best_move

__all__ = ["EngineError", "InvalidPosition", "NoLegalMoves", "get_best_move"]
