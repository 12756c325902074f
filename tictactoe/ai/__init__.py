"""
tictactoe.ai - Computer opponent

This package provides the difficulty-tiered DecisionAgent and the bounded
minimax search it uses on Hard.
"""

from tictactoe.ai.agent import AgentState, DecisionAgent
from tictactoe.ai.minimax import MinimaxSearch, TranspositionTable

__all__ = ['AgentState', 'DecisionAgent', 'MinimaxSearch', 'TranspositionTable']
