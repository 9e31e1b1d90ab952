"""
models/board.py
---------------
The 3x3 Tic Tac Toe grid and its cell states.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Optional

from models.exceptions import CellOccupied

BOARD_SIZE = 3


class Cell(IntEnum):
    """
    State of a single board cell.

    The integer values are the ones stored in Redis: HOST=0, GUEST=1,
    EMPTY=2. HOST and GUEST also match the player slot index that owns
    the mark.
    """
    HOST = 0
    GUEST = 1
    EMPTY = 2

    @property
    def symbol(self) -> str:
        """Glyph shown on the inline keyboard button."""
        return _SYMBOLS[self]


_SYMBOLS = {
    Cell.HOST: "❎",
    Cell.GUEST: "⭕",
    Cell.EMPTY: " ",  # Telegram rejects empty button text
}

# rows, columns, diagonals
_LINES: tuple[tuple[tuple[int, int], ...], ...] = (
    tuple(tuple((r, c) for c in range(BOARD_SIZE)) for r in range(BOARD_SIZE))
    + tuple(tuple((r, c) for r in range(BOARD_SIZE)) for c in range(BOARD_SIZE))
    + (
        tuple((i, i) for i in range(BOARD_SIZE)),
        tuple((i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE)),
    )
)


def _empty_grid() -> list[list[Cell]]:
    return [[Cell.EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]


@dataclass
class Board:
    """
    Fixed 3x3 grid of cells.

    Cells only ever go from EMPTY to a player mark, through ``place``.
    Row and column indices are 0-based here.
    """
    grid: list[list[Cell]] = field(default_factory=_empty_grid)

    def cell(self, row: int, col: int) -> Cell:
        _check_position(row, col)
        return self.grid[row][col]

    def rows(self) -> Iterator[list[Cell]]:
        return iter(self.grid)

    def place(self, row: int, col: int, mark: Cell) -> None:
        """
        Put ``mark`` on an empty cell.

        Raises:
            ValueError: If the position is off the board or the mark is EMPTY.
            CellOccupied: If the cell already holds a mark.
        """
        _check_position(row, col)
        if mark not in (Cell.HOST, Cell.GUEST):
            raise ValueError(f"Cannot place {mark!r} on the board")
        if self.grid[row][col] != Cell.EMPTY:
            raise CellOccupied(f"Cell ({row}, {col}) is already taken")
        self.grid[row][col] = mark

    def is_full(self) -> bool:
        return all(cell != Cell.EMPTY for row in self.grid for cell in row)

    def winner(self) -> Optional[Cell]:
        """Return the mark filling a whole row, column or diagonal, if any."""
        for line in _LINES:
            first = self.grid[line[0][0]][line[0][1]]
            if first == Cell.EMPTY:
                continue
            if all(self.grid[r][c] == first for r, c in line[1:]):
                return first
        return None

    def to_list(self) -> list[list[int]]:
        return [[int(cell) for cell in row] for row in self.grid]

    @classmethod
    def from_list(cls, data: list[list[int]]) -> "Board":
        """
        Rebuild a board from its stored form.

        Raises:
            ValueError: If the data is not a 3x3 grid of known cell values.
        """
        if len(data) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in data):
            raise ValueError("Board data must be a 3x3 grid")
        return cls(grid=[[Cell(value) for value in row] for row in data])


def _check_position(row: int, col: int) -> None:
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        raise ValueError(f"Position ({row}, {col}) is outside the board")
