#!/usr/bin/env python3
"""
Play tic-tac-toe against the alpha-beta engine in the console.

Usage:
    python play.py
    python play.py --ai-delay 1.0
    python play.py --max-size 4 --log-level DEBUG
"""

import sys
import argparse
import logging
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from tictac import GameConfig, run


def main():
    parser = argparse.ArgumentParser(description="Play tic-tac-toe against the engine")
    parser.add_argument("--max-size", type=int, default=GameConfig.max_size, help="Largest accepted side length")
    parser.add_argument("--ai-delay", type=float, default=GameConfig.ai_delay, help="Pause before machine moves (s)")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")

    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s: %(message)s")

    config = GameConfig(max_size=args.max_size, ai_delay=args.ai_delay)
    run(config=config)


if __name__ == "__main__":
    main()
