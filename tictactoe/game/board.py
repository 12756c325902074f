"""
board.py - Immutable board value for N-in-a-row games

This module implements the Board class, a square grid of cells backed by a
read-only numpy array. Boards are values: placing a mark returns a new Board
and leaves the original untouched, so snapshots can be shared freely between
game history, the rule engine and the search tree.

It also provides the string key helpers used for memoization.
"""

import math
from typing import Iterable, List, Sequence

import numpy as np

from tictactoe.utils import (EMPTY_SYMBOL, Player, Position,
                             as_position, render_board_ascii)

_CELL_VALUES = np.array([p.value for p in Player], dtype=np.int8)


class Board:
    """
    A square N x N grid of cells.

    Each cell holds a Player value; Player.EMPTY marks an empty cell. The
    underlying grid is never writable, any attempt to assign into it raises.
    """

    __slots__ = ("_grid",)

    def __init__(self, grid):
        """
        Create a board from a square grid of Player values.

        Args:
            grid: Anything numpy can turn into a 2-D integer array (a nested
                list, another array). The data is always copied.

        Raises:
            ValueError: If the grid is not square or holds unknown cell values
        """
        array = np.array(grid, dtype=np.int8, copy=True)
        if array.ndim != 2 or array.shape[0] != array.shape[1] or array.shape[0] == 0:
            raise ValueError(f"Board grid must be square, got shape {array.shape}")
        if not np.isin(array, _CELL_VALUES).all():
            raise ValueError("Board grid contains unknown cell values")
        array.flags.writeable = False
        self._grid = array

    @classmethod
    def _wrap(cls, array: np.ndarray) -> "Board":
        # Takes ownership of an already validated array, skipping the copy
        board = cls.__new__(cls)
        array.flags.writeable = False
        board._grid = array
        return board

    @classmethod
    def empty(cls, size: int) -> "Board":
        """Create an empty size x size board."""
        if size <= 0:
            raise ValueError(f"Board size must be positive, got {size}")
        return cls._wrap(np.zeros((size, size), dtype=np.int8))

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable]) -> "Board":
        """
        Build a board from rows of cell symbols.

        Cells may be Player members, "X"/"O", or None/""/" "/"_" for empty.
        """
        values = [[Player.from_symbol(cell).value for cell in row] for row in rows]
        if len({len(row) for row in values}) > 1:
            raise ValueError("All board rows must have the same length")
        return cls(values)

    @property
    def size(self) -> int:
        return self._grid.shape[0]

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the underlying grid."""
        return self._grid

    def cell(self, position: Sequence[int]) -> Player:
        row, col = position
        return Player(int(self._grid[row, col]))

    def __getitem__(self, position: Sequence[int]) -> Player:
        return self.cell(position)

    def in_bounds(self, position: Sequence[int]) -> bool:
        row, col = position
        return 0 <= row < self.size and 0 <= col < self.size

    def with_mark(self, position: Sequence[int], player: Player) -> "Board":
        """
        Return a new board with the cell at position set to player.

        No legality checks are made here; see RuleEngine.apply_move.
        """
        row, col = position
        grid = self._grid.copy()
        grid[row, col] = player.value
        return Board._wrap(grid)

    def empty_positions(self) -> List[Position]:
        """All empty cells in row-major order."""
        return [Position(int(r), int(c)) for r, c in np.argwhere(self._grid == Player.EMPTY.value)]

    def is_full(self) -> bool:
        return not (self._grid == Player.EMPTY.value).any()

    def count(self, player: Player) -> int:
        return int(np.count_nonzero(self._grid == player.value))

    def to_rows(self) -> List[List[Player]]:
        return [[Player(value) for value in row] for row in self._grid.tolist()]

    def to_lists(self) -> List[List[int]]:
        """Plain nested lists of cell values, for tight loops."""
        return self._grid.tolist()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid.shape == other._grid.shape and bool(np.array_equal(self._grid, other._grid))

    def __hash__(self) -> int:
        return hash((self.size, self._grid.tobytes()))

    def __repr__(self) -> str:
        return f"Board({board_to_key(self)!r})"

    def render(self) -> str:
        return render_board_ascii(self._grid)

    def __str__(self) -> str:
        return self.render()


def board_to_key(board: Board) -> str:
    """
    Flatten a board into one character per cell, row-major.

    Empty cells become the placeholder "_", e.g. "X_O_X____" for a 3x3 board.
    """
    return "".join(Player(value).symbol for value in board.grid.ravel().tolist())


def key_from_string(key: str) -> Board:
    """
    Rebuild a board from a key produced by board_to_key.

    Raises:
        ValueError: If the key length is not a perfect square or it contains
            characters other than "X", "O" and the empty placeholder
    """
    size = math.isqrt(len(key))
    if size == 0 or size * size != len(key):
        raise ValueError(f"Board key length {len(key)} is not a square number")

    values = []
    for char in key:
        if char not in ("X", "O", EMPTY_SYMBOL):
            raise ValueError(f"Invalid character {char!r} in board key")
        values.append(Player.from_symbol(char).value)

    return Board._wrap(np.array(values, dtype=np.int8).reshape(size, size))


def position_to_key(position: Sequence[int]) -> str:
    """Format a position as "row,col"."""
    row, col = as_position(position)
    return f"{row},{col}"


def position_from_key(key: str) -> Position:
    """
    Parse a "row,col" key back into a Position.

    Raises:
        ValueError: If the key is not two comma-separated integers
    """
    parts = key.split(",")
    if len(parts) != 2:
        raise ValueError(f"Position key must look like 'row,col', got {key!r}")
    return Position(int(parts[0]), int(parts[1]))
