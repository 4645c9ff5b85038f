#!/usr/bin/env python3
"""
Benchmark: measure nodes visited and time per move at a fixed search depth.

Runs every position through the engine in process. With --compare, each
position is also searched by exhaustive minimax at the same depth, which
shows how much work alpha-beta pruning saves and doubles as a check that both
searches agree on the score.

Usage: python3 tools/bench.py [--depth N] [--compare]
"""
import argparse
import os
import sys
import time

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO not in sys.path:
    sys.path.insert(0, REPO)

import chess

from engine import rules
from engine.constants import MATE_SCORE
from engine.search import SearchStats, best_move, format_move, minimax

# Positions spanning opening, middlegame, tactics and endgame.
POSITIONS = [
    ("Start",        chess.STARTING_FEN),
    ("After 1.e4",   "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"),
    ("Scholar mate", "r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 0 1"),
    ("Mid-open",     "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Back rank",    "6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1"),
    ("Pawn ending",  "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
    ("Pawn race",    "8/1p4k1/p7/P1K5/8/8/8/8 w - - 0 1"),
]


def run_position(label: str, fen: str, depth: int, compare: bool) -> dict:
    """Search one position and return metrics.

    Args:
        label: Human-readable position name for display.
        fen: Position to search.
        depth: Plies below each root move.
        compare: Also run exhaustive minimax over every root move.

    Returns:
        Dict with keys: label, move, score, nodes, time_ms, minimax_nodes,
        agree (None when compare is off).
    """
    board = rules.decode_fen(fen)

    stats = SearchStats()
    t0 = time.monotonic()
    move, score = best_move(board, depth, stats)
    time_ms = int((time.monotonic() - t0) * 1000)

    minimax_nodes = 0
    agree = None
    if compare:
        ref_stats = SearchStats()
        ref_scores = []
        for root_move in rules.legal_moves(board):
            child = rules.apply_move(board, root_move)
            ref_scores.append(minimax(child, depth, child.turn, ref_stats))
        ref_score = max(ref_scores) if board.turn == chess.WHITE else min(ref_scores)
        minimax_nodes = ref_stats.node_count
        agree = ref_score == score

    return {
        "label": label,
        "move": format_move(move),
        "score": score,
        "nodes": stats.node_count,
        "time_ms": time_ms,
        "minimax_nodes": minimax_nodes,
        "agree": agree,
    }


def main() -> None:
    """Run all benchmark positions and print a summary table."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--depth", type=int, default=2)
    parser.add_argument("--compare", action="store_true")
    args = parser.parse_args()

    print(f"Minimax chess benchmark, depth {args.depth}, {sys.executable}")
    print()
    print(
        f"{'Position':<14} {'Move':<7} {'Score':>6} "
        f"{'Nodes':>10} {'Minimax':>12} {'Time(ms)':>9} {'Agree':>6}"
    )
    print("-" * 72)

    results = []
    for label, fen in POSITIONS:
        r = run_position(label, fen, args.depth, args.compare)
        results.append(r)
        score = "mate" if abs(r["score"]) == MATE_SCORE else r["score"]
        agree = "" if r["agree"] is None else ("yes" if r["agree"] else "NO")
        print(
            f"{r['label']:<14} {r['move']:<7} {score:>6} "
            f"{r['nodes']:>10,} {r['minimax_nodes']:>12,} {r['time_ms']:>9,} {agree:>6}"
        )

    avg_nodes = sum(r["nodes"] for r in results) // len(results)
    avg_time = sum(r["time_ms"] for r in results) // len(results)
    print("-" * 72)
    print(f"{'AVERAGE':<14} {'':<7} {'':>6} {avg_nodes:>10,} {'':>12} {avg_time:>9,}")


if __name__ == "__main__":
    main()
