"""
HTTP host for the engine.

Provides a FastAPI REST API (web.app:app) that answers "best move for this
FEN at this depth" requests. Run with: uvicorn web.app:app
"""
