"""
errors.py - Exceptions raised when a move cannot be applied
"""

from typing import Optional

from tictactoe.utils import Position


class MoveError(Exception):
    """Base class for rejected moves."""

    def __init__(self, message: str, position: Optional[Position] = None):
        super().__init__(message)
        self.position = position


class IllegalMoveError(MoveError):
    """The target cell is occupied or the game is already decided."""


class OutOfBoundsError(MoveError):
    """The position lies outside the board."""
