"""
session.py - Game state management for a series of rounds

This module provides the GameSession class, the authoritative holder of the
board and turn state. It validates and applies moves through the RuleEngine,
records the move history, detects the end of a round, keeps the running
score, and serializes human and AI turns.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from tictactoe.debug import debug
from tictactoe.game.board import Board
from tictactoe.game.errors import IllegalMoveError
from tictactoe.game.rules import RuleEngine, WinCondition
from tictactoe.utils import DEFAULT_BOARD_SIZE, Difficulty, Player, Position, as_position

if TYPE_CHECKING:
    from tictactoe.ai.agent import DecisionAgent


class GameStatus(Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class Move:
    """One accepted move."""
    position: Position
    player: Player
    move_number: int
    timestamp: float


class GameSession:
    """
    A sequence of rounds between X and O on one board size.

    X moves first in every round. Scores and the draw count carry over from
    round to round until reset() is called.
    """

    def __init__(self, board_size: int = DEFAULT_BOARD_SIZE,
                 engine: Optional[RuleEngine] = None):
        self.engine = engine if engine is not None else RuleEngine(board_size)
        self.scores: Dict[Player, int] = {Player.X: 0, Player.O: 0}
        self.draws = 0
        self.round = 1
        self._ai_pending = False
        self._start_round()

    def _start_round(self) -> None:
        self.board = self.engine.create_empty_board()
        self.current_player = Player.X
        self.status = GameStatus.PLAYING
        self.winner: Optional[Player] = None
        self.win_condition: Optional[WinCondition] = None
        self.history: List[Move] = []
        self._snapshots: List[Board] = [self.board]
        self.started_at = time.time()
        self.ended_at: Optional[float] = None

    @property
    def board_size(self) -> int:
        return self.engine.board_size

    @property
    def ai_pending(self) -> bool:
        return self._ai_pending

    def make_move(self, position: Sequence[int]) -> Board:
        """
        Play the current player's mark at position.

        Args:
            position: Target cell

        Returns:
            The board after the move

        Raises:
            IllegalMoveError: If the round is not in progress, an AI move is
                pending, or the cell is occupied
            OutOfBoundsError: If the position is off the board
        """
        self._check_not_pending()
        return self._apply(position)

    def _apply(self, position: Sequence[int]) -> Board:
        if self.status == GameStatus.FINISHED:
            raise IllegalMoveError("The round is already over")
        if self.status == GameStatus.PAUSED:
            raise IllegalMoveError("The game is paused")

        position = as_position(position)
        player = self.current_player
        self.board = self.engine.apply_move(self.board, position, player)
        self._snapshots.append(self.board)
        self.history.append(Move(
            position=position,
            player=player,
            move_number=len(self.history) + 1,
            timestamp=time.time(),
        ))
        debug.debug(f"move {len(self.history)}: {player} at {tuple(position)}", "session")

        self.win_condition = self.engine.check_win(self.board)
        if self.win_condition is not None:
            self.winner = self.win_condition.player
            self.scores[self.winner] += 1
            self._finish()
            debug.info(f"round {self.round}: {self.winner} wins along a "
                       f"{self.win_condition.line_kind.value}", "session")
        elif self.engine.is_board_full(self.board):
            self.draws += 1
            self._finish()
            debug.info(f"round {self.round}: draw", "session")
        else:
            self.current_player = player.other()

        return self.board

    def _finish(self) -> None:
        self.status = GameStatus.FINISHED
        self.ended_at = time.time()

    async def play_ai_turn(self, agent: "DecisionAgent") -> Position:
        """
        Let an agent make the current move.

        Human moves are refused until the agent has answered.

        Raises:
            IllegalMoveError: If it is not the agent's turn, the round is not
                in progress, or another AI move is pending
        """
        if self._ai_pending:
            raise IllegalMoveError("An AI move is already pending")
        if self.status != GameStatus.PLAYING:
            raise IllegalMoveError(f"Cannot play while the game is {self.status.value}")
        if agent.player != self.current_player:
            raise IllegalMoveError(f"It is {self.current_player}'s turn, not {agent.player}'s")

        self._ai_pending = True
        try:
            move = await agent.select_move(self.board)
        finally:
            self._ai_pending = False

        self.make_move(move)
        return move

    def undo_move(self) -> bool:
        """
        Take back the last move of the current round.

        A win or draw produced by that move is removed from the score.

        Returns:
            True if a move was undone, False if there was nothing to undo
        """
        self._check_not_pending()
        if not self.history:
            debug.debug("No moves to undo", "session")
            return False

        last = self.history.pop()
        self._snapshots.pop()
        self.board = self._snapshots[-1]

        if self.status == GameStatus.FINISHED:
            if self.winner is not None:
                self.scores[self.winner] -= 1
            else:
                self.draws -= 1
            self.status = GameStatus.PLAYING
            self.ended_at = None

        self.winner = None
        self.win_condition = None
        self.current_player = last.player
        debug.debug(f"undid {last.player} at {tuple(last.position)}", "session")
        return True

    def _check_not_pending(self) -> None:
        if self._ai_pending:
            raise IllegalMoveError("Waiting for the AI to move")

    def new_round(self) -> None:
        """Start the next round, keeping the scores."""
        self._check_not_pending()
        self.round += 1
        self._start_round()
        debug.debug(f"starting round {self.round}", "session")

    def reset(self) -> None:
        """Clear scores and start over from round 1."""
        self._check_not_pending()
        self.scores = {Player.X: 0, Player.O: 0}
        self.draws = 0
        self.round = 1
        self._start_round()

    def pause(self) -> None:
        self._check_not_pending()
        if self.status == GameStatus.PLAYING:
            self.status = GameStatus.PAUSED

    def resume(self) -> None:
        if self.status == GameStatus.PAUSED:
            self.status = GameStatus.PLAYING

    def is_game_over(self) -> bool:
        return self.status == GameStatus.FINISHED

    def is_draw(self) -> bool:
        return self.is_game_over() and self.winner is None

    def duration(self) -> float:
        """Seconds since the round started (or until it ended)."""
        end = self.ended_at if self.ended_at is not None else time.time()
        return end - self.started_at

    def suggest_move(self, difficulty=Difficulty.MEDIUM) -> Position:
        """
        Suggest a move for the player on turn.

        Raises:
            IllegalMoveError: If the round is over
        """
        from tictactoe.ai.agent import DecisionAgent

        if self.is_game_over():
            raise IllegalMoveError("The round is already over")
        advisor = DecisionAgent(self.board_size, difficulty, self.current_player, think=False)
        return advisor.choose_move(self.board)

    def render(self) -> str:
        return self.board.render()
