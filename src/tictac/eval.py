"""
Evaluation functions.

Plays the engine against random and optimal opponents, and checks its
choices against the exact solver on every legal position.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
from tqdm.auto import tqdm

from .board import Board, Mark
from .oracle import flip, iter_all_legal_nonterminal_states, solve
from .search import SearchEngine


@dataclass
class EvalConfig:
    """Evaluation configuration."""

    # Random seed
    seed: int = 0

    # Board side length (exhaustive search is only tractable up to 3)
    size: int = 3

    # Games per match
    games: int = 100

    # Oracle samples uniformly among its optimal moves
    oracle_random: bool = True

    # Show progress bars
    progress: bool = True


class NodeCounter:
    """
    on_ply callback counting searched nodes.

    Optionally drives a tqdm bar, one tick per node.
    """

    def __init__(self, bar: Optional[tqdm] = None):
        self.nodes = 0
        self.max_depth = 0
        self.bar = bar

    def __call__(self, depth: int, board: Board):
        self.nodes += 1
        if depth > self.max_depth:
            self.max_depth = depth
        if self.bar is not None:
            self.bar.update(1)


def _record(results: Dict[str, int], board: Board, engine_side: Mark):
    winner = board.winner()
    if winner is None:
        results["draws"] += 1
    elif winner is engine_side:
        results["wins"] += 1
    else:
        results["losses"] += 1


def _play_out(board: Board, engine: SearchEngine, opponent_move, to_move: Mark):
    """Alternate moves until the position is terminal."""
    while board.winner() is None and not board.is_full():
        if to_move is engine.get_machine_side():
            engine.select_and_apply_move(board)
        else:
            board.set(opponent_move(board, to_move), to_move)
        to_move = to_move.other


def eval_vs_random(
    games: int = 500,
    size: int = 3,
    seed: int = 0,
    progress: bool = False,
) -> Tuple[float, float, float]:
    """
    Evaluate the engine vs a uniformly random opponent.

    The engine plays Cross in even games and Nought in odd ones.

    Returns:
        (win_rate, draw_rate, loss_rate)
    """
    rng = np.random.default_rng(seed)
    results = {"wins": 0, "draws": 0, "losses": 0}

    def random_move(board: Board, mark: Mark) -> int:
        return int(rng.choice(board.empty_positions()))

    for g in tqdm(range(games), desc="vs Random", disable=not progress):
        engine_side = Mark.CROSS if g % 2 == 0 else Mark.NOUGHT
        board = Board(size)
        _play_out(board, SearchEngine(engine_side), random_move, Mark.CROSS)
        _record(results, board, engine_side)

    if not games:
        return float("nan"), float("nan"), float("nan")
    return results["wins"] / games, results["draws"] / games, results["losses"] / games


def eval_vs_oracle(
    games: int = 100,
    seed: int = 0,
    oracle_random: bool = True,
    progress: bool = False,
) -> Dict[str, float]:
    """
    Evaluate the engine vs the exact solver on a 3x3 board.

    Args:
        oracle_random: If True, the solver samples among its optimal moves

    Returns:
        Dict with 'games', 'engine_w', 'engine_d', 'engine_l'
    """
    rng = np.random.default_rng(seed)
    results = {"wins": 0, "draws": 0, "losses": 0}

    def oracle_move(board: Board, mark: Mark) -> int:
        _, best_moves = solve(board, mark)
        if oracle_random:
            return int(rng.choice(best_moves))
        return best_moves[0]

    for g in tqdm(range(games), desc="vs Oracle", disable=not progress):
        engine_side = Mark.CROSS if g % 2 == 0 else Mark.NOUGHT
        board = Board(3)
        _play_out(board, SearchEngine(engine_side), oracle_move, Mark.CROSS)
        _record(results, board, engine_side)

    return {
        "games": games,
        "engine_w": results["wins"] / games if games else float("nan"),
        "engine_d": results["draws"] / games if games else float("nan"),
        "engine_l": results["losses"] / games if games else float("nan"),
    }


def eval_oracle_agreement_all_states(size: int = 3, progress: bool = False) -> Dict[str, object]:
    """
    Compare the engine with the exact solver on every legal non-terminal state.

    A move agrees when the position it leaves keeps the solver's value for
    the side that moved.

    Returns:
        Dict with counts and the disagreeing positions under '_disagreements'
    """
    states = list(iter_all_legal_nonterminal_states(size))
    move_ok = 0
    value_ok = 0
    disagreements: List[Tuple[Board, Mark, int]] = []

    for board, to_move in tqdm(states, desc="Oracle agreement", disable=not progress):
        expected, _ = solve(board, to_move)
        engine = SearchEngine(to_move)

        if engine.evaluate(board, to_move) == expected:
            value_ok += 1

        after = board.copy()
        engine.select_and_apply_move(after)
        reply_value, _ = solve(after, to_move.other)
        if flip(reply_value) == expected:
            move_ok += 1
        else:
            played = next(p for p in range(len(board)) if board.get(p) != after.get(p))
            disagreements.append((board, to_move, played))

    n = len(states)
    return {
        "n_states": n,
        "move_opt_acc": move_ok / n if n else float("nan"),
        "value_exact_acc": value_ok / n if n else float("nan"),
        "_disagreements": disagreements,
    }
