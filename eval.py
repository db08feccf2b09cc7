#!/usr/bin/env python3
"""
Evaluate the alpha-beta engine.

Usage:
    python eval.py
    python eval.py --games 200 --seed 1
    python eval.py --nodes
"""

import sys
import argparse
import logging
from pathlib import Path

from tqdm.auto import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from tictac import (
    Board,
    Mark,
    SearchEngine,
    EvalConfig,
    NodeCounter,
    eval_vs_random,
    eval_vs_oracle,
    eval_oracle_agreement_all_states,
)


def count_opening_nodes(size: int, progress: bool):
    """Search the empty board once and report its size."""
    with tqdm(desc="Searching", unit="node", disable=not progress) as bar:
        counter = NodeCounter(bar)
        board = Board(size)
        SearchEngine(Mark.CROSS, on_ply=counter).select_and_apply_move(board)
    print(f"  Nodes:     {counter.nodes:,}")
    print(f"  Max depth: {counter.max_depth}")
    print(board)


def main():
    parser = argparse.ArgumentParser(description="Evaluate the tic-tac-toe engine")
    parser.add_argument("--games", type=int, default=EvalConfig.games, help="Number of games per match")
    parser.add_argument("--seed", type=int, default=EvalConfig.seed, help="Random seed")
    parser.add_argument("--size", type=int, default=EvalConfig.size, help="Board side length for vs Random")
    parser.add_argument("--deterministic-oracle", action="store_true", help="Oracle always plays its first optimal move")
    parser.add_argument("--nodes", action="store_true", help="Only count nodes searched from the empty board")
    parser.add_argument("--no-progress", action="store_true", help="Hide progress bars")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")

    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s: %(message)s")

    config = EvalConfig(
        seed=args.seed,
        size=args.size,
        games=args.games,
        oracle_random=not args.deterministic_oracle,
        progress=not args.no_progress,
    )

    if args.nodes:
        print(f"\n=== Opening search ({config.size}x{config.size}) ===")
        count_opening_nodes(config.size, config.progress)
        return

    print("\n=== Evaluation ===")

    # vs Random
    print(f"\nvs Random ({config.games} games, {config.size}x{config.size})...")
    w, d, l = eval_vs_random(config.games, size=config.size, seed=config.seed, progress=config.progress)
    print(f"  Wins:   {w:.2%}")
    print(f"  Draws:  {d:.2%}")
    print(f"  Losses: {l:.2%}")

    # vs Oracle
    print(f"\nvs Oracle ({config.games} games, 3x3)...")
    results = eval_vs_oracle(
        config.games, seed=config.seed, oracle_random=config.oracle_random, progress=config.progress
    )
    print(f"  Wins:   {results['engine_w']:.2%}")
    print(f"  Draws:  {results['engine_d']:.2%}")
    print(f"  Losses: {results['engine_l']:.2%}")

    # Oracle agreement
    print("\nOracle Agreement (all 3x3 states)...")
    agreement = eval_oracle_agreement_all_states(3, progress=config.progress)
    print(f"  States:      {agreement['n_states']}")
    print(f"  Move Opt:    {agreement['move_opt_acc']:.2%}")
    print(f"  Value Exact: {agreement['value_exact_acc']:.2%}")
    for board, to_move, played in agreement["_disagreements"][:5]:
        tqdm.write(f"  Disagreement: {to_move} played {board.coords(played)} on\n{board}")


if __name__ == "__main__":
    main()
