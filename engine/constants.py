"""
Engine constants: piece values, evaluation weights, score sentinels, depth limits.

All numeric constants used throughout the engine are defined here so that
the evaluation and search modules never need to introduce magic numbers.

Piece values use the classical "pawn = 1" scale rather than centipawns.
Material is multiplied by MATERIAL_WEIGHT before the positional term is
added, so one pawn always outweighs the whole center-control term.
"""

import logging
import os

import chess

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Piece values (pawn units)
# ---------------------------------------------------------------------------
# The king is deliberately absent: both sides always have exactly one, so it
# contributes nothing to the material difference.

PAWN_VALUE: int = 1
KNIGHT_VALUE: int = 3
BISHOP_VALUE: int = 3
ROOK_VALUE: int = 5
QUEEN_VALUE: int = 9

PIECE_VALUES: dict[int, int] = {
    chess.PAWN:   PAWN_VALUE,
    chess.KNIGHT: KNIGHT_VALUE,
    chess.BISHOP: BISHOP_VALUE,
    chess.ROOK:   ROOK_VALUE,
    chess.QUEEN:  QUEEN_VALUE,
}

# Starting material for one side: 8 pawns, 2 knights, 2 bishops, 2 rooks, 1 queen.
MAX_MATERIAL_PER_SIDE: int = (
    8 * PAWN_VALUE + 2 * KNIGHT_VALUE + 2 * BISHOP_VALUE + 2 * ROOK_VALUE + QUEEN_VALUE
)

# Upper bound once promotions are counted: every pawn promoted to a queen.
MAX_PROMOTED_MATERIAL: int = MAX_MATERIAL_PER_SIDE + 8 * (QUEEN_VALUE - PAWN_VALUE)

# ---------------------------------------------------------------------------
# Evaluation weights
# ---------------------------------------------------------------------------

MATERIAL_WEIGHT: int = 10

# d4, e4, d5, e5. Each occupied square moves the score by one point.
CENTER_MASK: int = chess.BB_CENTER
MAX_POSITIONAL_SCORE: int = len(chess.SquareSet(CENTER_MASK))

# ---------------------------------------------------------------------------
# Special scores
# ---------------------------------------------------------------------------
# MATE_SCORE doubles as the initial "worst possible" bound for both the
# maximizing and minimizing layers of the search.

MATE_SCORE: int = 10_000
DRAW_SCORE: int = 0

# Largest magnitude any non-terminal position can evaluate to. Must stay
# strictly below MATE_SCORE - 1 or mate scores become indistinguishable from
# ordinary evaluations.
MAX_STATIC_SCORE: int = MATERIAL_WEIGHT * MAX_PROMOTED_MATERIAL + MAX_POSITIONAL_SCORE

assert MAX_STATIC_SCORE < MATE_SCORE - 1, "evaluation weights collide with mate scores"

# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------
# The search is plain recursion, one Python frame per ply. MAX_DEPTH keeps
# the stack comfortably inside CPython's default recursion limit; in practice
# the branching factor makes anything beyond depth 5 impractically slow.

MAX_DEPTH: int = 32
DEFAULT_DEPTH: int = 3

DEPTH_ENV_VAR: str = "ENGINE_SEARCH_DEPTH"


def default_depth() -> int:
    """
    Search depth used when a host does not specify one.

    Reads ENGINE_SEARCH_DEPTH from the environment so the UCI and HTTP hosts
    can be tuned without code changes. Values that are not integers in
    [0, MAX_DEPTH] are ignored with a warning.
    """
    raw = os.environ.get(DEPTH_ENV_VAR)
    if not raw:
        return DEFAULT_DEPTH
    try:
        depth = int(raw)
    except ValueError:
        _log.warning("%s=%r is not an integer; using %d", DEPTH_ENV_VAR, raw, DEFAULT_DEPTH)
        return DEFAULT_DEPTH
    if not 0 <= depth <= MAX_DEPTH:
        _log.warning("%s=%d is outside [0, %d]; using %d", DEPTH_ENV_VAR, depth, MAX_DEPTH, DEFAULT_DEPTH)
        return DEFAULT_DEPTH
    return depth
