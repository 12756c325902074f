"""
tictactoe.interfaces - User interfaces for the game

This package contains the terminal interface that drives a GameSession.
"""

# Don't import anything here to avoid circular imports
__all__ = []
