"""
UCI (Universal Chess Interface) protocol handler.

UCI is the standard text-based protocol that allows chess GUIs and testing
tools (like cutechess-cli) to communicate with chess engines. The engine
reads commands from stdin and writes responses to stdout. All output lines
must be flushed immediately; GUI programs read line by line.

Protocol overview:
    GUI → Engine: uci, isready, ucinewgame, position, go, stop, quit
    Engine → GUI: id name, id author, uciok, readyok, info, bestmove

Search control:
    This engine searches to a fixed depth and has no clock. "go depth N"
    searches N plies below the root moves; any other "go" form (movetime,
    wtime/btime, infinite) uses the default depth from ENGINE_SEARCH_DEPTH
    or engine.constants.DEFAULT_DEPTH.

Threading model:
    The search cannot be interrupted, but it still runs on a daemon thread so
    the main loop keeps reading stdin while it works. "stop" simply waits for
    the running search to finish and emit its bestmove.

Critical rule: NEVER print to stdout except for valid UCI responses.
Debug output must go to stderr.
"""

import sys
import os
import threading
import time

# ---------------------------------------------------------------------------
# Path setup: make 'engine' importable when this script is run directly
# (python interface/uci.py from the repo root).
# ---------------------------------------------------------------------------
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import chess
from engine import rules
from engine.constants import MATE_SCORE, MAX_DEPTH, default_depth
from engine.errors import EngineError
from engine.search import SearchStats, best_move


def _send(line: str) -> None:
    """
    Write a line to stdout and flush immediately.

    Args:
        line: The UCI response line to send (without trailing newline).
    """
    print(line, flush=True)


def _log(message: str) -> None:
    """
    Write a debug/error message to stderr.

    In UCI mode, stdout is reserved for valid protocol messages.

    Args:
        message: The log message (without trailing newline).
    """
    print(message, file=sys.stderr, flush=True)


def _format_score(score: int, turn: chess.Color, depth: int) -> str:
    """
    Render a White-relative engine score as a UCI "score" field.

    UCI scores are from the side to move's point of view. Mate sentinels
    become "mate N". The engine does not track mate distance, so N is the
    longest mate the search could have seen: the root move plus `depth`
    plies, counted in the mating side's moves. Negative N means the side to
    move is being mated.

    Args:
        score: Engine score, positive favoring White.
        turn:  Side to move at the root.
        depth: Depth the search ran to.

    Returns:
        "cp <n>" or "mate <n>".
    """
    own = score if turn == chess.WHITE else -score
    if abs(own) == MATE_SCORE:
        moves = (depth + 2) // 2
        return f"mate {moves if own > 0 else -moves}"
    return f"cp {own}"


class UciHandler:
    """
    Stateful handler for the UCI protocol.

    Holds the current board position and the search thread, if any. The main
    UCI loop creates one instance and dispatches commands to it.

    Attributes:
        board:         The current position, updated by "position" commands.
        search_thread: The active search thread, or None if no search is running.
    """

    def __init__(self) -> None:
        self.board: chess.Board = chess.Board()
        self.search_thread: threading.Thread | None = None

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_uci(self) -> None:
        """Identify the engine. No configurable options are advertised."""
        _send("id name Minimax-AB")
        _send("id author Chess AI Project")
        _send("uciok")

    def handle_isready(self) -> None:
        """
        Respond to the "isready" command.

        Used by GUIs as a synchronization barrier. There is no lazy
        initialization, so the reply is immediate even while searching.
        """
        _send("readyok")

    def handle_ucinewgame(self) -> None:
        """Wait out any running search and reset to the starting position."""
        self.wait_for_search()
        self.board = chess.Board()

    def handle_position(self, tokens: list[str]) -> None:
        """
        Parse and apply a "position" command.

        Command formats:
            position startpos
            position startpos moves e2e4 e7e5 ...
            position fen <FEN>
            position fen <FEN> moves e2e4 e7e5 ...

        A malformed FEN leaves the previous position in place. Replay of the
        move list stops at the first illegal move.

        Args:
            tokens: The command tokens with "position" already stripped.
        """
        if not tokens:
            return

        try:
            if tokens[0] == "startpos":
                board = chess.Board()
                move_tokens = tokens[2:] if len(tokens) > 1 and tokens[1] == "moves" else []
            elif tokens[0] == "fen":
                if "moves" in tokens:
                    moves_idx = tokens.index("moves")
                    fen = " ".join(tokens[1:moves_idx])
                    move_tokens = tokens[moves_idx + 1:]
                else:
                    fen = " ".join(tokens[1:])
                    move_tokens = []
                board = rules.decode_fen(fen)
            else:
                _log(f"uci: unknown position type: {tokens[0]}")
                return
        except ValueError as e:
            _log(f"uci: invalid position: {e}")
            return

        for uci_move in move_tokens:
            try:
                move = chess.Move.from_uci(uci_move)
            except ValueError:
                _log(f"uci: malformed move in position command: {uci_move}")
                break
            if move not in board.legal_moves:
                _log(f"uci: illegal move in position command: {uci_move}")
                break
            board.push(move)

        self.board = board

    def handle_go(self, tokens: list[str]) -> None:
        """
        Parse a "go" command and start the search in a background thread.

        Args:
            tokens: The command tokens with "go" already stripped.
        """
        # One search at a time; a new "go" waits for the previous bestmove.
        self.wait_for_search()

        depth = self._parse_go_depth(tokens)
        # The main thread may receive the next "position" command while the
        # search is still running; the copy keeps the two apart.
        board_copy = self.board.copy()

        def search_and_reply() -> None:
            """Run the search and emit the UCI info + bestmove lines."""
            try:
                stats = SearchStats()
                start = time.monotonic()
                move, score = best_move(board_copy, depth, stats)
                elapsed_ms = max(1, int((time.monotonic() - start) * 1000))
            except EngineError as e:
                # Checkmate or stalemate: UCI still requires a bestmove line.
                _log(f"uci: {e}")
                _send("bestmove (none)")
                return
            except Exception as e:
                _log(f"search error: {e}")
                _send("bestmove (none)")
                return

            nps = max(1, stats.node_count * 1000 // elapsed_ms)
            _send(
                f"info depth {depth} score {_format_score(score, board_copy.turn, depth)} "
                f"nodes {stats.node_count} nps {nps} time {elapsed_ms}"
            )
            _send(f"bestmove {move.uci()}")

        self.search_thread = threading.Thread(target=search_and_reply, daemon=True)
        self.search_thread.start()

    def handle_stop(self) -> None:
        """
        Respond to the "stop" command.

        Fixed-depth searches cannot be cut short, so this blocks until the
        running search has sent its bestmove.
        """
        self.wait_for_search()

    def handle_quit(self) -> None:
        """Exit the process. Any running search thread is a daemon and dies with it."""
        sys.exit(0)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def wait_for_search(self) -> None:
        """Block until the current search thread (if any) has finished."""
        if self.search_thread is not None and self.search_thread.is_alive():
            self.search_thread.join()
        self.search_thread = None

    def _parse_go_depth(self, tokens: list[str]) -> int:
        """
        Extract the search depth from "go" command tokens.

        "depth N" is honored (clamped to [0, MAX_DEPTH]). Time-control tokens
        are accepted and ignored.

        Args:
            tokens: The go command tokens (with "go" stripped).

        Returns:
            Depth in plies.
        """
        if "depth" in tokens:
            idx = tokens.index("depth")
            try:
                return max(0, min(int(tokens[idx + 1]), MAX_DEPTH))
            except (ValueError, IndexError):
                _log("uci: malformed depth in go command; using default")
        return default_depth()


def run_uci_loop() -> None:
    """
    Main UCI protocol loop.

    Reads lines from stdin and dispatches each command to the UciHandler.
    Runs until the "quit" command is received or stdin is closed.

    Error handling:
        Each command is wrapped in a try/except so that a bug in one
        command handler does not crash the engine. Errors are logged to
        stderr and the loop continues.
    """
    handler = UciHandler()

    for raw_line in sys.stdin:
        line = raw_line.strip()
        if not line:
            continue

        tokens = line.split()
        command = tokens[0]
        args = tokens[1:]

        try:
            if command == "uci":
                handler.handle_uci()
            elif command == "isready":
                handler.handle_isready()
            elif command == "ucinewgame":
                handler.handle_ucinewgame()
            elif command == "position":
                handler.handle_position(args)
            elif command == "go":
                handler.handle_go(args)
            elif command == "stop":
                handler.handle_stop()
            elif command == "quit":
                handler.handle_quit()
            else:
                # Unknown commands are ignored per the UCI specification.
                _log(f"uci: ignoring unknown command: {command!r}")

        except Exception as e:
            _log(f"uci: unhandled error for command {command!r}: {e}")

    # stdin closed: let a pending search finish so its bestmove is not lost.
    handler.wait_for_search()


if __name__ == "__main__":
    run_uci_loop()
