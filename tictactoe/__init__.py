"""
tictactoe - N-in-a-row game engine with a tiered AI opponent

This package provides a rule engine for square boards of side 3, 4 and 5
(3, 4 and 4 in a row to win), a decision agent with Easy, Medium and Hard
difficulty, and a small session layer plus terminal interface that drive
them.
"""

# Version number
__version__ = '0.1.0'
