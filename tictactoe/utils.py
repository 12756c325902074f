"""
utils.py - Constants, enumerations and helpers shared across the tictactoe package

This module holds the game-wide configuration (board sizes, win lengths, score
weights, AI timings) together with the small value types used by both the rule
engine and the decision agent.
"""

from enum import Enum
from typing import Dict, List, NamedTuple, Sequence, Tuple

import numpy as np

# Board configuration
BOARD_SIZES = (3, 4, 5)
DEFAULT_BOARD_SIZE = 3

# Run length needed to win on each board size (5x5 needs 4 in a row)
WIN_LENGTHS: Dict[int, int] = {
    3: 3,
    4: 4,
    5: 4,
}

# Placeholder used for empty cells in keys and ASCII output
EMPTY_SYMBOL = "_"

# Evaluation weights
WIN_SCORE = 10
NEAR_WIN_SCORE = 5      # WinLength-1 marks, one empty
BUILDING_SCORE = 2      # WinLength-2 marks, two empty
PRESENCE_SCORE = 1      # any other unblocked occupancy
CENTER_BONUS = 0.3

# Move ordering weights
CENTER_DISTANCE_WEIGHT = 0.1
SMALL_BOARD_CORNER_BONUS = 0.2

# AI settings
SEARCH_DEPTH = 5
EASY_SMART_PROBABILITY = 0.5


class Player(Enum):
    """Enumeration representing players and cell states."""
    EMPTY = 0
    X = 1
    O = 2

    def other(self) -> "Player":
        """Get the other player."""
        if self == Player.X:
            return Player.O
        elif self == Player.O:
            return Player.X
        return Player.EMPTY

    @property
    def symbol(self) -> str:
        """Single character used for keys and rendering."""
        if self == Player.EMPTY:
            return EMPTY_SYMBOL
        return self.name

    @classmethod
    def from_symbol(cls, symbol) -> "Player":
        """
        Parse a cell symbol.

        Accepts a Player, "X"/"O" (any case), or None, "", " " and the empty
        placeholder for an empty cell.

        Raises:
            ValueError: If the symbol is not recognised
        """
        if isinstance(symbol, Player):
            return symbol
        if symbol is None:
            return cls.EMPTY
        text = str(symbol).strip().upper()
        if text in ("", EMPTY_SYMBOL, "."):
            return cls.EMPTY
        if text in ("X", "O"):
            return cls[text]
        raise ValueError(f"Unknown cell symbol: {symbol!r}")

    def __str__(self):
        return self.symbol


class Difficulty(Enum):
    """AI difficulty tiers."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value) -> "Difficulty":
        """Accept either a Difficulty or its (case-insensitive) string value."""
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown difficulty: {value!r}") from None


class LineKind(Enum):
    """Orientation of a winning line."""
    ROW = "row"
    COLUMN = "column"
    DIAGONAL = "diagonal"


class Position(NamedTuple):
    """A (row, col) cell coordinate, 0-indexed."""
    row: int
    col: int


# Simulated thinking time per difficulty, in seconds (min, max)
THINKING_TIMES: Dict[Difficulty, Tuple[float, float]] = {
    Difficulty.EASY: (0.3, 0.8),
    Difficulty.MEDIUM: (0.5, 1.2),
    Difficulty.HARD: (0.8, 1.8),
}


def win_length_for(board_size: int) -> int:
    """
    Get the run length required to win on a board.

    Args:
        board_size: Side length of the square board

    Returns:
        The number of marks in a row needed to win

    Raises:
        ValueError: If the board size is not supported
    """
    try:
        return WIN_LENGTHS[board_size]
    except KeyError:
        raise ValueError(
            f"Unsupported board size {board_size}; expected one of {BOARD_SIZES}"
        ) from None


def as_position(value: Sequence[int]) -> Position:
    """Coerce a (row, col) pair into a Position."""
    if isinstance(value, Position):
        return value
    row, col = value
    return Position(int(row), int(col))


def corner_positions(board_size: int) -> List[Position]:
    """Corners in strategic preference order."""
    last = board_size - 1
    return [
        Position(0, 0),
        Position(0, last),
        Position(last, 0),
        Position(last, last),
    ]


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render a board grid as ASCII art with row and column numbers.

    Args:
        grid: Square grid of Player values

    Returns:
        ASCII representation of the board
    """
    size = grid.shape[0]
    result = ["   " + " ".join(str(col) for col in range(size))]
    result.append("  +" + "-" * (size * 2 - 1) + "+")

    for row in range(size):
        cells = []
        for col in range(size):
            cell = Player(int(grid[row, col]))
            cells.append(" " if cell == Player.EMPTY else cell.symbol)
        result.append(f"{row} |" + " ".join(cells) + "|")

    result.append("  +" + "-" * (size * 2 - 1) + "+")
    return "\n".join(result)
