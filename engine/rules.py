"""
Thin adapter over python-chess: the only place the engine touches chess rules.

python-chess boards are mutable (push/pop). The search treats positions as
values instead: apply_move() hands back a fresh board and leaves its input
untouched, so sibling branches of the search tree never share state.

Game status is deliberately narrower than Board.is_game_over(). Only
checkmate and stalemate end the search; insufficient material, repetition and
the 50/75-move rules are treated as ongoing play.
"""

import enum
from typing import Iterator

import chess

from engine.errors import InvalidPosition


class Status(enum.Enum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


def decode_fen(fen: str) -> chess.Board:
    """
    Parse a FEN string into a board.

    Raises:
        InvalidPosition: The FEN is malformed, or it describes a position that
            python-chess considers impossible (missing king, pawns on the back
            rank, side not to move in check, ...).
    """
    try:
        board = chess.Board(fen)
    except ValueError as exc:
        raise InvalidPosition(fen, str(exc)) from exc

    if not board.is_valid():
        raise InvalidPosition(fen, f"illegal position ({board.status()!r})")

    return board


def status(board: chess.Board) -> Status:
    # any() stops at the first legal move, so ongoing positions are cheap.
    if any(board.generate_legal_moves()):
        return Status.ONGOING
    return Status.CHECKMATE if board.is_check() else Status.STALEMATE


def legal_moves(board: chess.Board) -> Iterator[chess.Move]:
    """Legal moves in python-chess generation order (deterministic per position)."""
    return board.generate_legal_moves()


def apply_move(board: chess.Board, move: chess.Move) -> chess.Board:
    """Return the position after `move`. `board` is not modified."""
    child = board.copy(stack=False)
    child.push(move)
    return child
