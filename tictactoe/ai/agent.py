"""
agent.py - Difficulty-tiered decision agent

This module provides the DecisionAgent class that picks moves for the
computer player. Every tier looks for an immediate win or block first:

- Easy: half of the time tries win/block, otherwise plays a random empty cell
- Medium: win, block, then center, corners, first free cell
- Hard: win, block, then a depth-bounded minimax search

select_move() waits for a short, difficulty-dependent "thinking" pause before
answering. The pause is cosmetic; choose_move() makes the same decision
without it.
"""

import asyncio
import random
import time
from dataclasses import dataclass, replace
from typing import Optional

from tictactoe.ai.minimax import MinimaxSearch
from tictactoe.debug import debug
from tictactoe.game.board import Board
from tictactoe.game.errors import IllegalMoveError
from tictactoe.game.rules import RuleEngine
from tictactoe.utils import (DEFAULT_BOARD_SIZE, EASY_SMART_PROBABILITY, SEARCH_DEPTH,
                             THINKING_TIMES, Difficulty, Player, Position,
                             corner_positions)


@dataclass(frozen=True)
class AgentState:
    """Read-only snapshot of the agent's bookkeeping."""
    is_thinking: bool = False
    last_move: Optional[Position] = None
    move_count: int = 0
    thinking_time: float = 0.0  # seconds spent in the last select_move


class DecisionAgent:
    """
    Computer opponent for one side of the board.

    The agent never changes the board it is given; it only returns the
    position it wants to play. The caller applies it with RuleEngine.apply_move.
    """

    def __init__(self, board_size: int = DEFAULT_BOARD_SIZE,
                 difficulty=Difficulty.MEDIUM,
                 player: Player = Player.O,
                 rng: Optional[random.Random] = None,
                 think: bool = True,
                 search_depth: int = SEARCH_DEPTH,
                 delay_rng: Optional[random.Random] = None):
        """
        Initialize the agent.

        Args:
            board_size: Side length of the board being played
            difficulty: Difficulty tier (enum or "easy"/"medium"/"hard")
            player: The mark this agent plays
            rng: Random source for Easy moves; pass a seeded random.Random
                for reproducible play
            think: Whether select_move pauses before answering
            search_depth: Plies searched below each Hard candidate move
            delay_rng: Random source for the thinking pause, kept apart from
                rng so the pause never shifts the moves drawn from it
        """
        if player == Player.EMPTY:
            raise ValueError("Agent must play X or O")

        self.engine = RuleEngine(board_size)
        self.difficulty = Difficulty.parse(difficulty)
        self.player = player
        self.opponent = player.other()
        self.rng = rng if rng is not None else random.Random()
        self.delay_rng = delay_rng if delay_rng is not None else random.Random()
        self.think = think
        self.search = MinimaxSearch(self.engine, player, depth=search_depth)
        self._state = AgentState()

    @property
    def board_size(self) -> int:
        return self.engine.board_size

    async def select_move(self, board: Board) -> Position:
        """
        Choose a move, after the thinking pause.

        Args:
            board: Current board; must have an empty cell and no winner

        Returns:
            The position to play

        Raises:
            IllegalMoveError: If the board is already decided
        """
        self._check_playable(board)

        self._state = replace(self._state, is_thinking=True)
        started = time.perf_counter()

        try:
            if self.think:
                await asyncio.sleep(self.thinking_delay())

            move = self.choose_move(board)

            self._state = replace(
                self._state,
                last_move=move,
                move_count=self._state.move_count + 1,
                thinking_time=time.perf_counter() - started,
            )
            return move
        finally:
            self._state = replace(self._state, is_thinking=False)

    def choose_move(self, board: Board) -> Position:
        """
        Decide on a move immediately, without the thinking pause.

        Raises:
            IllegalMoveError: If the board is already decided
        """
        self._check_playable(board)

        if self.difficulty == Difficulty.EASY:
            move = self._easy_move(board)
        elif self.difficulty == Difficulty.HARD:
            move = self._hard_move(board)
        else:
            move = self._medium_move(board)

        debug.info(f"{self.player} ({self.difficulty.value}) plays {tuple(move)}", "agent")
        return move

    def thinking_delay(self) -> float:
        """Random pause length in seconds for the current difficulty."""
        low, high = THINKING_TIMES[self.difficulty]
        return self.delay_rng.uniform(low, high)

    def _check_playable(self, board: Board) -> None:
        if self.engine.check_win(board) is not None:
            raise IllegalMoveError("The game on this board is already won")
        if self.engine.is_board_full(board):
            raise IllegalMoveError("The board is full")

    # Difficulty tiers

    def _easy_move(self, board: Board) -> Position:
        if self.rng.random() < EASY_SMART_PROBABILITY:
            smart = self.find_winning_move(board) or self.find_blocking_move(board)
            if smart is not None:
                debug.debug(f"easy agent found tactical move {tuple(smart)}", "agent")
                return smart

        return self.rng.choice(self.engine.empty_positions(board))

    def _medium_move(self, board: Board) -> Position:
        winning = self.find_winning_move(board)
        if winning is not None:
            return winning

        blocking = self.find_blocking_move(board)
        if blocking is not None:
            return blocking

        return self.strategic_move(board)

    def _hard_move(self, board: Board) -> Position:
        winning = self.find_winning_move(board)
        if winning is not None:
            return winning

        blocking = self.find_blocking_move(board)
        if blocking is not None:
            return blocking

        return self.search.best_move(board)

    # Tactics

    def _completing_move(self, board: Board, player: Player) -> Optional[Position]:
        for move in self.engine.empty_positions(board):
            if self.engine.check_win(self.engine.apply_move(board, move, player)) is not None:
                return move
        return None

    def find_winning_move(self, board: Board) -> Optional[Position]:
        """First empty cell (row-major) that wins the game for this agent."""
        return self._completing_move(board, self.player)

    def find_blocking_move(self, board: Board) -> Optional[Position]:
        """First empty cell (row-major) the opponent would win with."""
        return self._completing_move(board, self.opponent)

    def strategic_move(self, board: Board) -> Position:
        """Center, then corners in order, then the first empty cell."""
        if self.engine.is_valid_move(board, self.engine.center):
            return self.engine.center

        for corner in corner_positions(self.board_size):
            if self.engine.is_valid_move(board, corner):
                return corner

        return self.engine.empty_positions(board)[0]

    # State

    def get_state(self) -> AgentState:
        return self._state

    def set_difficulty(self, difficulty) -> None:
        self.difficulty = Difficulty.parse(difficulty)
        debug.debug(f"difficulty set to {self.difficulty.value}", "agent")

    def reset(self) -> None:
        """Forget the last move, move count and timing."""
        self._state = AgentState()
