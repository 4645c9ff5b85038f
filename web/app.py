"""
FastAPI web application for the chess engine.

Exposes POST /api/move, which accepts a FEN position and a search depth,
runs the fixed-depth alpha-beta search and returns the chosen move, plus
GET /api/health for liveness probes.

Architecture notes:
- Sync endpoint (not async): FastAPI runs sync handlers in a thread pool,
  which is the correct pattern for CPU-bound blocking calls like engine search.
- Stateless per request: the client sends the full FEN each time; no server-
  side board state is maintained between requests.
- Engine errors map to 400 (bad input or finished game) or 500 (anything
  unexpected, logged with traceback).
"""

import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator

from engine import rules
from engine.constants import MAX_DEPTH, default_depth
from engine.errors import InvalidPosition, NoLegalMoves
from engine.search import SearchStats, best_move, format_move

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

app = FastAPI(title="Minimax Chess", version="1.0.0")


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class MoveRequest(BaseModel):
    """
    Client request to the engine.

    Fields:
        fen:   Full FEN string representing the current board position.
        depth: Plies to search below each candidate move. Clamped to
               [0, MAX_DEPTH]; defaults to ENGINE_SEARCH_DEPTH or 3.
    """

    fen: str
    depth: int = Field(default_factory=default_depth)

    @field_validator("depth")
    @classmethod
    def clamp_depth(cls, v: int) -> int:
        """Clamp depth to a safe operating range."""
        return max(0, min(v, MAX_DEPTH))


class MoveResponse(BaseModel):
    """
    Engine response after computing the best move.

    Fields:
        move:  Best move as "<from> <to>" (e.g. "e2 e4"), promotion omitted.
        uci:   The same move in UCI notation (e.g. "e7e8q").
        fen:   Board FEN after the engine's move is applied.
        score: Evaluation from White's perspective. Positive = White is better.
        depth: Search depth used.
        nodes: Positions visited by the search.
    """

    move: str
    uci: str
    fen: str
    score: int
    depth: int
    nodes: int


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.post("/api/move", response_model=MoveResponse)
def api_move(request: MoveRequest) -> MoveResponse:
    """
    Compute the engine's best move for the given position.

    Raises:
        HTTPException 400: Malformed FEN or game already over.
        HTTPException 500: Unexpected engine failure.
    """
    try:
        board = rules.decode_fen(request.fen)
    except InvalidPosition as exc:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {exc.reason}") from exc

    stats = SearchStats()
    try:
        move, score = best_move(board, request.depth, stats)
    except NoLegalMoves as exc:
        raise HTTPException(status_code=400, detail=f"Game is already over: {exc.status}") from exc
    except Exception as exc:
        _log.exception("Engine search failed for FEN=%s", request.fen)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    _log.info(
        "Move=%s score=%d depth=%d nodes=%d fen=%s",
        move.uci(),
        score,
        request.depth,
        stats.node_count,
        request.fen[:40],
    )

    after = rules.apply_move(board, move)
    return MoveResponse(
        move=format_move(move),
        uci=move.uci(),
        fen=after.fen(),
        score=score,
        depth=request.depth,
        nodes=stats.node_count,
    )


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
