"""
Generalized N x N tic-tac-toe with an exhaustive alpha-beta engine.

The engine searches every continuation to a terminal position, so it plays
perfectly but is only tractable on small boards (3x3 in practice).
"""

from .board import Board, Mark
from .search import Outcome, Move, SearchEngine, apply_temporary, apply_permanent
from .oracle import solve, side_to_move, is_legal_board, iter_all_legal_nonterminal_states
from .game import GameConfig, ConsoleIO, InvalidInput, run
from .eval import (
    EvalConfig,
    NodeCounter,
    eval_vs_random,
    eval_vs_oracle,
    eval_oracle_agreement_all_states,
)

__version__ = "0.1.0"
__all__ = [
    "Board",
    "Mark",
    "Outcome",
    "Move",
    "SearchEngine",
    "apply_temporary",
    "apply_permanent",
    "solve",
    "side_to_move",
    "is_legal_board",
    "iter_all_legal_nonterminal_states",
    "GameConfig",
    "ConsoleIO",
    "InvalidInput",
    "run",
    "EvalConfig",
    "NodeCounter",
    "eval_vs_random",
    "eval_vs_oracle",
    "eval_oracle_agreement_all_states",
]
