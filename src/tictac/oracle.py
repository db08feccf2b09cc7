"""
Exact backward-induction solver with caching.

Plain minimax without pruning, used as a reference to check the
alpha-beta engine. Only practical for 3x3 boards and smaller.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from .board import Board, Mark
from .search import Outcome


# Cache: (board_key, to_move) -> (outcome, best_moves_tuple)
_SOLVE_CACHE: Dict[Tuple[Tuple[Optional[Mark], ...], Mark], Tuple[Outcome, Tuple[int, ...]]] = {}


def solve(board: Board, to_move: Mark) -> Tuple[Outcome, List[int]]:
    """
    Compute the game value and every optimal move.

    Args:
        board: Current position (not modified)
        to_move: Side to move

    Returns:
        (outcome, best_moves) where outcome is from to_move's perspective
        and best_moves lists every position achieving it (empty if terminal).
    """
    key = (board.key(), to_move)
    if key in _SOLVE_CACHE:
        v, best = _SOLVE_CACHE[key]
        return v, list(best)

    winner = board.winner()
    if winner is not None or board.is_full():
        if winner is None:
            v = Outcome.DRAW
        elif winner is to_move:
            v = Outcome.WIN
        else:
            v = Outcome.LOSS
        _SOLVE_CACHE[key] = (v, tuple())
        return v, []

    best_v: Optional[Outcome] = None
    best_moves: List[int] = []

    for pos in board.empty_positions():
        child = board.copy()
        child.set(pos, to_move)
        child_v, _ = solve(child, to_move.other)
        v_here = flip(child_v)

        if best_v is None or v_here > best_v:
            best_v = v_here
            best_moves = [pos]
        elif v_here == best_v:
            best_moves.append(pos)

    _SOLVE_CACHE[key] = (best_v, tuple(best_moves))
    return best_v, best_moves


def flip(outcome: Outcome) -> Outcome:
    return Outcome(Outcome.WIN - outcome)


def clear_cache():
    """Clear solver cache (useful for memory management)."""
    _SOLVE_CACHE.clear()


def cache_size() -> int:
    return len(_SOLVE_CACHE)


def side_to_move(board: Board) -> Mark:
    """Infer side to move from board state (Cross plays first)."""
    crosses = board.count(Mark.CROSS)
    noughts = board.count(Mark.NOUGHT)
    return Mark.CROSS if crosses == noughts else Mark.NOUGHT


def is_legal_board(board: Board) -> bool:
    """Check the position can arise from alternating play."""
    crosses = board.count(Mark.CROSS)
    noughts = board.count(Mark.NOUGHT)

    # Cross goes first
    if not (crosses == noughts or crosses == noughts + 1):
        return False

    winners = set()
    for line in board.lines():
        first = board.get(line[0])
        if first is not None and all(board.get(p) is first for p in line):
            winners.add(first)
    return len(winners) < 2


def iter_all_legal_nonterminal_states(size: int = 3) -> Iterator[Tuple[Board, Mark]]:
    """
    Iterate over all legal non-terminal positions.

    Yields:
        (board, to_move) tuples for exhaustive evaluation.
    """
    n_cells = size * size
    digit_marks = (None, Mark.CROSS, Mark.NOUGHT)
    for n in range(3 ** n_cells):
        board = Board(size)
        x = n
        for pos in range(n_cells):
            mark = digit_marks[x % 3]
            x //= 3
            if mark is not None:
                board.set(pos, mark)

        if not is_legal_board(board):
            continue
        if board.winner() is not None or board.is_full():
            continue

        yield board, side_to_move(board)
