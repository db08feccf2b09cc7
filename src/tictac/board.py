"""
Board and marks for N x N tic-tac-toe.

Board representation: flat list of length size * size, row-major
  - None: empty
  - Mark.CROSS / Mark.NOUGHT: occupied

Position: linear index pos = row * size + col
"""

from enum import Enum
from typing import Iterator, List, Optional, Tuple


class Mark(Enum):
    """One of the two players' symbols."""
    CROSS = "X"
    NOUGHT = "O"

    @property
    def other(self) -> "Mark":
        return Mark.NOUGHT if self is Mark.CROSS else Mark.CROSS

    @classmethod
    def parse(cls, text: str) -> "Mark":
        """Parse 'X'/'O' (any case). Raises ValueError otherwise."""
        token = text.strip().upper()
        for mark in cls:
            if mark.value == token:
                return mark
        raise ValueError(f"Invalid side {text.strip()!r}")

    def __str__(self) -> str:
        return self.value


class Board:
    """Square grid of cells, each empty or holding exactly one mark."""

    __slots__ = ("_size", "_cells", "_lines")

    def __init__(self, size: int = 3):
        self._size = size
        self._cells: List[Optional[Mark]] = [None] * (size * size)
        self._lines = _build_lines(size)

    @property
    def size(self) -> int:
        return self._size

    @property
    def cells(self) -> Tuple[Optional[Mark], ...]:
        return tuple(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._size == other._size and self._cells == other._cells

    def __repr__(self) -> str:
        return f"Board(size={self._size}, cells={''.join(_symbol(c) for c in self._cells)!r})"

    def index(self, row: int, col: int) -> int:
        """Convert (row, col) to flat index."""
        return row * self._size + col

    def coords(self, pos: int) -> Tuple[int, int]:
        """Convert flat index to (row, col)."""
        return divmod(pos, self._size)

    def get(self, pos: int) -> Optional[Mark]:
        return self._cells[pos]

    def set(self, pos: int, mark: Mark) -> Optional[Mark]:
        """
        Place a mark on an empty cell.

        Returns:
            None if the mark was placed, otherwise the mark already
            occupying the cell (the board is left unchanged).
        """
        existing = self._cells[pos]
        if existing is not None:
            return existing
        self._cells[pos] = mark
        return None

    def unset(self, pos: int) -> None:
        """Clear a cell regardless of its content."""
        self._cells[pos] = None

    def clear(self) -> None:
        for pos in range(len(self._cells)):
            self._cells[pos] = None

    def is_full(self) -> bool:
        return all(c is not None for c in self._cells)

    def empty_positions(self) -> List[int]:
        """Return list of empty cell indices in row-major order."""
        return [i for i, c in enumerate(self._cells) if c is None]

    def lines(self) -> Tuple[Tuple[int, ...], ...]:
        """Rows, columns, main diagonal and anti-diagonal as position tuples."""
        return self._lines

    def winner(self) -> Optional[Mark]:
        """Return the mark filling any whole row, column or main diagonal."""
        cells = self._cells
        for line in self._lines:
            first = cells[line[0]]
            if first is None:
                continue
            if all(cells[p] is first for p in line):
                return first
        return None

    def copy(self) -> "Board":
        dup = Board(self._size)
        dup._cells = self._cells[:]
        return dup

    def key(self) -> Tuple[Optional[Mark], ...]:
        """Hashable snapshot of the cells."""
        return tuple(self._cells)

    def count(self, mark: Mark) -> int:
        return sum(1 for c in self._cells if c is mark)

    def __iter__(self) -> Iterator[Optional[Mark]]:
        return iter(self._cells)

    def __str__(self) -> str:
        n = self._size
        width = len(str(n - 1))
        header = " " * (width + 1) + " ".join(str(c).rjust(width) for c in range(n))
        rows = [header]
        for r in range(n):
            row = " ".join(_symbol(self._cells[r * n + c]).rjust(width) for c in range(n))
            rows.append(f"{str(r).rjust(width)} {row}")
        return "\n".join(rows)


def _symbol(cell: Optional[Mark]) -> str:
    return "." if cell is None else cell.value


def _build_lines(n: int) -> Tuple[Tuple[int, ...], ...]:
    """Build every winning line for an n x n board."""
    rows = [tuple(r * n + c for c in range(n)) for r in range(n)]
    cols = [tuple(r * n + c for r in range(n)) for c in range(n)]
    diag = tuple(i * n + i for i in range(n))
    anti = tuple(i * n + (n - 1 - i) for i in range(n))
    return tuple(rows + cols + [diag, anti])
