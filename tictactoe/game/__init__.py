"""
tictactoe.game - Core game mechanics

This package contains the immutable board value, the rule engine, the move
errors, and the session that tracks turns and scores across rounds.
"""

from tictactoe.game.board import (Board, board_to_key, key_from_string,
                                  position_from_key, position_to_key)
from tictactoe.game.errors import IllegalMoveError, MoveError, OutOfBoundsError
from tictactoe.game.rules import RuleEngine, WinCondition
from tictactoe.game.session import GameSession, GameStatus, Move

__all__ = [
    'Board', 'board_to_key', 'key_from_string', 'position_to_key', 'position_from_key',
    'MoveError', 'IllegalMoveError', 'OutOfBoundsError',
    'RuleEngine', 'WinCondition',
    'GameSession', 'GameStatus', 'Move',
]
