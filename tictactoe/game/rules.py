"""
rules.py - Rule engine for N-in-a-row games on square boards

This module provides the RuleEngine class. It validates and applies moves,
detects wins along rows, columns and every diagonal long enough to hold a
winning run, scores positions for the AI, and orders candidate moves. The
engine keeps no game history: every operation takes an explicit Board.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from tictactoe.debug import debug
from tictactoe.game.board import (Board, board_to_key, key_from_string,
                                  position_from_key, position_to_key)
from tictactoe.game.errors import IllegalMoveError, OutOfBoundsError
from tictactoe.utils import (BUILDING_SCORE, CENTER_BONUS, CENTER_DISTANCE_WEIGHT,
                             DEFAULT_BOARD_SIZE, NEAR_WIN_SCORE, PRESENCE_SCORE,
                             SMALL_BOARD_CORNER_BONUS, WIN_SCORE, LineKind, Player,
                             Position, as_position, corner_positions, win_length_for)

EMPTY = Player.EMPTY.value

# A line to scan: its cells in walking order and its orientation
Line = Tuple[Tuple[Position, ...], LineKind]


@dataclass(frozen=True)
class WinCondition:
    """A completed run: who made it, which cells, and its orientation."""
    player: Player
    positions: Tuple[Position, ...]
    line_kind: LineKind


class RuleEngine:
    """
    Rules for a square board of side 3, 4 or 5.

    The run length needed to win is derived from the board size when the
    engine is built (3 -> 3, 4 -> 4, 5 -> 4).
    """

    def __init__(self, board_size: int = DEFAULT_BOARD_SIZE):
        """
        Initialize the engine.

        Args:
            board_size: Side length of the board

        Raises:
            ValueError: If the board size is not supported
        """
        self.board_size = board_size
        self.win_length = win_length_for(board_size)
        self._scan_lines = self._build_scan_lines()
        self._windows = self._build_windows()
        center = board_size // 2
        self.center = Position(center, center)
        self._corners = frozenset(corner_positions(board_size))
        debug.debug(f"RuleEngine ready: {board_size}x{board_size}, "
                    f"win length {self.win_length}, {len(self._scan_lines)} scan lines", "engine")

    # Line construction

    def _walk(self, start: Position, step: Tuple[int, int]) -> Tuple[Position, ...]:
        cells = []
        row, col = start
        while self.is_valid_position((row, col)):
            cells.append(Position(row, col))
            row += step[0]
            col += step[1]
        return tuple(cells)

    def _build_scan_lines(self) -> List[Line]:
        """Lines in the order check_win scans them."""
        size = self.board_size
        lines: List[Line] = []

        for row in range(size):
            lines.append((self._walk(Position(row, 0), (0, 1)), LineKind.ROW))

        for col in range(size):
            lines.append((self._walk(Position(0, col), (1, 0)), LineKind.COLUMN))

        # Top-left to bottom-right: top-row starts, then left-column starts
        for offset in range(size - self.win_length + 1):
            lines.append((self._walk(Position(0, offset), (1, 1)), LineKind.DIAGONAL))
            if offset > 0:
                lines.append((self._walk(Position(offset, 0), (1, 1)), LineKind.DIAGONAL))

        # Top-right to bottom-left: top-row starts, then right-column starts
        for offset in range(size - self.win_length + 1):
            lines.append((self._walk(Position(0, size - 1 - offset), (1, -1)), LineKind.DIAGONAL))
            if offset > 0:
                lines.append((self._walk(Position(offset, size - 1), (1, -1)), LineKind.DIAGONAL))

        return lines

    def _build_windows(self) -> List[Tuple[Position, ...]]:
        """Every run of exactly win_length consecutive cells in any direction."""
        windows = []
        for cells, _ in self._scan_lines:
            for start in range(len(cells) - self.win_length + 1):
                windows.append(cells[start:start + self.win_length])
        return windows

    # Board and move basics

    def create_empty_board(self) -> Board:
        return Board.empty(self.board_size)

    def is_valid_position(self, position: Sequence[int]) -> bool:
        row, col = position
        return 0 <= row < self.board_size and 0 <= col < self.board_size

    def is_valid_move(self, board: Board, position: Sequence[int]) -> bool:
        """True if the position is on the board and the cell is empty."""
        if not self.is_valid_position(position):
            return False
        return board.cell(position) == Player.EMPTY

    def apply_move(self, board: Board, position: Sequence[int], player: Player) -> Board:
        """
        Place a mark and return the resulting board.

        The input board is left unchanged.

        Args:
            board: The current board
            position: Target cell
            player: Player placing the mark (X or O)

        Returns:
            A new Board with the mark placed

        Raises:
            OutOfBoundsError: If the position is outside the board
            IllegalMoveError: If the cell is already occupied
            ValueError: If player is EMPTY or the board size does not match
        """
        self._check_board(board)
        if player == Player.EMPTY:
            raise ValueError("Cannot place an EMPTY mark")

        position = as_position(position)
        if not self.is_valid_position(position):
            raise OutOfBoundsError(
                f"Position {tuple(position)} is outside the {self.board_size}x{self.board_size} board",
                position,
            )

        occupant = board.cell(position)
        if occupant != Player.EMPTY:
            raise IllegalMoveError(f"Cell {tuple(position)} is already occupied by {occupant}", position)

        debug.trace(f"{player} plays {tuple(position)}", "engine")
        return board.with_mark(position, player)

    def is_board_full(self, board: Board) -> bool:
        return board.is_full()

    def empty_positions(self, board: Board) -> List[Position]:
        return board.empty_positions()

    @staticmethod
    def opponent(player: Player) -> Player:
        return player.other()

    def _check_board(self, board: Board) -> None:
        if board.size != self.board_size:
            raise ValueError(
                f"Board is {board.size}x{board.size} but the engine plays {self.board_size}x{self.board_size}"
            )

    # Win detection

    def check_win(self, board: Board) -> Optional[WinCondition]:
        """
        Find a winning run on the board.

        Lines are scanned rows first, then columns, then diagonals (the
        top-left to bottom-right family before the top-right to bottom-left
        one). The first line holding win_length equal marks in a row wins the
        scan, even if other lines are complete too.

        Returns:
            The WinCondition found, or None
        """
        self._check_board(board)
        grid = board.to_lists()

        for cells, kind in self._scan_lines:
            win = self._check_line(grid, cells, kind)
            if win is not None:
                return win

        return None

    def _check_line(self, grid: List[List[int]], cells: Tuple[Position, ...],
                    kind: LineKind) -> Optional[WinCondition]:
        owner = EMPTY
        streak: List[Position] = []

        for position in cells:
            value = grid[position.row][position.col]

            if value == EMPTY:
                owner = EMPTY
                streak = []
            elif value == owner:
                streak.append(position)
            else:
                owner = value
                streak = [position]

            if owner != EMPTY and len(streak) >= self.win_length:
                return WinCondition(
                    player=Player(owner),
                    positions=tuple(streak[-self.win_length:]),
                    line_kind=kind,
                )

        return None

    # Heuristics

    def evaluate(self, board: Board, player: Player) -> float:
        """
        Score a position from one player's point of view.

        Terminal positions score +10 (player has won), -10 (opponent has won)
        or 0 (full board). Otherwise each window of win_length cells free of
        the opponent scores 5 when one move from completion, 2 when two moves
        away, and 1 for any other presence; the opponent's windows are scored
        the same way and subtracted. Holding the center is worth 0.3.

        Args:
            board: Board to score
            player: Perspective player

        Returns:
            The heuristic score
        """
        win = self.check_win(board)
        if win is not None:
            return WIN_SCORE if win.player == player else -WIN_SCORE

        if board.is_full():
            return 0

        opponent = player.other()
        grid = board.to_lists()

        score = float(self._line_potential(grid, player) - self._line_potential(grid, opponent))

        if self.board_size >= 3:
            center = grid[self.center.row][self.center.col]
            if center == player.value:
                score += CENTER_BONUS
            elif center == opponent.value:
                score -= CENTER_BONUS

        return score

    def _line_potential(self, grid: List[List[int]], player: Player) -> int:
        mine = player.value
        total = 0

        for window in self._windows:
            own = blocked = 0
            for row, col in window:
                value = grid[row][col]
                if value == mine:
                    own += 1
                elif value != EMPTY:
                    blocked += 1

            if blocked or own == 0:
                continue

            empty = self.win_length - own
            if own == self.win_length - 1 and empty == 1:
                total += NEAR_WIN_SCORE
            elif own == self.win_length - 2 and empty == 2:
                total += BUILDING_SCORE
            else:
                total += PRESENCE_SCORE

        return total

    def move_score(self, position: Sequence[int]) -> float:
        """
        Static desirability of a cell: closeness to the center, plus a bonus
        for corners on the 3x3 board.
        """
        row, col = position
        distance = abs(row - self.center.row) + abs(col - self.center.col)
        score = (self.board_size - distance) * CENTER_DISTANCE_WEIGHT

        if self.board_size == 3 and (row, col) in self._corners:
            score += SMALL_BOARD_CORNER_BONUS

        return score

    def ordered_moves(self, board: Board) -> List[Position]:
        """Empty positions, most promising first (ties keep row-major order)."""
        return sorted(board.empty_positions(), key=self.move_score, reverse=True)

    # Key helpers

    @staticmethod
    def board_to_key(board: Board) -> str:
        return board_to_key(board)

    @staticmethod
    def key_from_string(key: str) -> Board:
        return key_from_string(key)

    @staticmethod
    def position_to_key(position: Sequence[int]) -> str:
        return position_to_key(position)

    @staticmethod
    def position_from_key(key: str) -> Position:
        return position_from_key(key)
