"""
Exceptions raised by the engine.

Both conditions are fatal for the call that hits them: the engine never
returns a partial or fallback move. Hosts (UCI loop, HTTP API) decide how to
surface them to the user.
"""


class EngineError(Exception):
    """Base class for all engine errors."""


class InvalidPosition(EngineError, ValueError):
    """The supplied FEN could not be decoded into a valid position."""

    def __init__(self, fen: str, reason: str) -> None:
        super().__init__(f"{reason}: {fen!r}")
        self.fen = fen
        self.reason = reason


class NoLegalMoves(EngineError):
    """Move selection was requested for a position where the game is over."""

    def __init__(self, fen: str, status: str) -> None:
        super().__init__(f"no legal moves ({status}): {fen!r}")
        self.fen = fen
        self.status = status
