"""
Exhaustive minimax search with alpha-beta pruning.

The engine plays one mark (the maximizing side) and searches every
continuation to a terminal position. No depth limit, no static evaluation,
no caching: alpha-beta cutoffs are the only pruning.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterator, Optional

from .board import Board, Mark

logger = logging.getLogger(__name__)

PlyCallback = Callable[[int, Board], None]


class Outcome(IntEnum):
    """Game result from the maximizing side's perspective."""
    LOSS = 0
    DRAW = 1
    WIN = 2


@dataclass(frozen=True)
class Move:
    mark: Mark
    pos: int


@contextmanager
def apply_temporary(board: Board, move: Move) -> Iterator[bool]:
    """
    Place a mark for the duration of a with-block.

    Yields True if the mark was placed, False if the cell was occupied.
    A placed mark is cleared on every exit path, breaks and exceptions
    included.
    """
    if board.set(move.pos, move.mark) is not None:
        yield False
        return
    try:
        yield True
    finally:
        board.unset(move.pos)


def apply_permanent(board: Board, move: Move) -> Optional[Mark]:
    """Commit a move. Returns None on success, else the occupying mark."""
    return board.set(move.pos, move.mark)


class SearchEngine:
    """
    Alpha-beta engine for one side.

    Args:
        machine_mark: Mark the engine plays (maximizing side)
        on_ply: Optional callback invoked as on_ply(depth, board) for every
            searched node
    """

    def __init__(self, machine_mark: Mark, on_ply: Optional[PlyCallback] = None):
        self._max_side = machine_mark
        self._min_side = machine_mark.other
        self._on_ply = on_ply

    @property
    def max_side(self) -> Mark:
        return self._max_side

    @property
    def min_side(self) -> Mark:
        return self._min_side

    def get_machine_side(self) -> Mark:
        return self._max_side

    def select_and_apply_move(self, board: Board) -> bool:
        """
        Choose the best move for the machine side and commit it to the board.

        Ties go to the first move in row-major order. When every move loses,
        the last legal move tried is played so the engine still moves.

        Returns:
            True if a mark was placed, False if the game was already decided
            or no empty cell exists.
        """
        if board.winner() is not None:
            return False

        alpha = Outcome.LOSS
        beta = Outcome.WIN

        best_outcome = Outcome.LOSS  # worst outcome
        best_move: Optional[Move] = None
        last_move: Optional[Move] = None

        for pos in range(len(board)):
            move = Move(self._max_side, pos)
            with apply_temporary(board, move) as placed:
                if not placed:
                    continue
                last_move = move
                outcome = self._minimizing(board, alpha, beta, 1)
            if outcome > best_outcome:
                best_outcome = outcome
                best_move = move
            if best_outcome >= beta:
                break
            alpha = max(alpha, best_outcome)

        chosen = best_move if best_move is not None else last_move
        if chosen is None:
            return False

        apply_permanent(board, chosen)
        logger.debug(
            "%s plays %s (expected %s)",
            self._max_side, board.coords(chosen.pos), best_outcome.name,
        )
        return True

    def evaluate(self, board: Board, to_move: Mark) -> Outcome:
        """
        Value of a position with `to_move` on move, from the machine's
        perspective. The board is left unchanged.
        """
        if to_move is self._max_side:
            return self._maximizing(board, Outcome.LOSS, Outcome.WIN, 0)
        return self._minimizing(board, Outcome.LOSS, Outcome.WIN, 0)

    def _maximizing(self, board: Board, alpha: Outcome, beta: Outcome, depth: int) -> Outcome:
        finished = self._check_finished(board, depth)
        if finished is not None:
            return finished

        best_outcome = Outcome.LOSS  # worst outcome
        for pos in range(len(board)):
            with apply_temporary(board, Move(self._max_side, pos)) as placed:
                if not placed:
                    continue
                best_outcome = max(best_outcome, self._minimizing(board, alpha, beta, depth + 1))
                if best_outcome >= beta:
                    break
            alpha = max(alpha, best_outcome)
        return best_outcome

    def _minimizing(self, board: Board, alpha: Outcome, beta: Outcome, depth: int) -> Outcome:
        finished = self._check_finished(board, depth)
        if finished is not None:
            return finished

        best_outcome = Outcome.WIN  # worst outcome
        for pos in range(len(board)):
            with apply_temporary(board, Move(self._min_side, pos)) as placed:
                if not placed:
                    continue
                best_outcome = min(best_outcome, self._maximizing(board, alpha, beta, depth + 1))
                if best_outcome <= alpha:
                    break
            beta = min(beta, best_outcome)
        return best_outcome

    def _check_finished(self, board: Board, depth: int) -> Optional[Outcome]:
        """Classify a terminal position; None if play continues."""
        if self._on_ply is not None:
            self._on_ply(depth, board)
        winner = board.winner()
        if winner is not None:
            return Outcome.WIN if winner is self._max_side else Outcome.LOSS
        if board.is_full():
            return Outcome.DRAW
        return None
