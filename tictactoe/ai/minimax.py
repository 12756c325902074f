"""
minimax.py - Depth-bounded minimax search for N-in-a-row games

This module provides the MinimaxSearch class used by the Hard difficulty.

The search is plain minimax without pruning:
1. A won position scores 10 - depth for the searching player and depth - 10
   for the opponent, where depth is the remaining search depth
2. A full board or an exhausted depth scores 0
3. Children are generated in row-major order and the first best move wins ties

Because the depth is fixed (5 plies below each candidate move) the search is
complete on a 3x3 board but only an approximation on 4x4 and 5x5 boards.
Subtrees are memoized in a transposition table keyed by the board key, the
remaining depth and the side to move, which only affects speed.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from tictactoe.debug import debug
from tictactoe.game.board import Board, board_to_key
from tictactoe.game.rules import RuleEngine
from tictactoe.utils import SEARCH_DEPTH, WIN_SCORE, Player, Position


@dataclass
class TTStats:
    hits: int = 0
    stores: int = 0


class TranspositionTable:
    """Exact-depth cache of minimax scores."""

    def __init__(self) -> None:
        self._d: Dict[Tuple[str, int, bool], float] = {}
        self.stats = TTStats()

    def get(self, key: str, depth: int, maximizing: bool) -> Optional[float]:
        score = self._d.get((key, depth, maximizing))
        if score is not None:
            self.stats.hits += 1
        return score

    def put(self, key: str, depth: int, maximizing: bool, score: float) -> None:
        self._d[(key, depth, maximizing)] = score
        self.stats.stores += 1

    def clear(self) -> None:
        self._d.clear()
        self.stats = TTStats()

    def __len__(self) -> int:
        return len(self._d)


class MinimaxSearch:
    """
    Fixed-depth minimax for one player.

    Scores are always from the point of view of the player the search was
    built for, whichever side is to move.
    """

    def __init__(self, engine: RuleEngine, player: Player,
                 depth: int = SEARCH_DEPTH, use_cache: bool = True):
        """
        Initialize the search.

        Args:
            engine: Rule engine for the board size being played
            player: The player whose moves are maximized
            depth: Plies searched below each candidate move
            use_cache: Memoize subtree scores during a search
        """
        if player == Player.EMPTY:
            raise ValueError("Search player must be X or O")
        self.engine = engine
        self.player = player
        self.opponent = player.other()
        self.depth = depth
        self.use_cache = use_cache
        self.table = TranspositionTable()
        self.nodes_evaluated = 0

    def best_move(self, board: Board) -> Position:
        """
        Pick the empty cell with the highest minimax score.

        Args:
            board: Position to move from, with at least one empty cell

        Returns:
            The chosen position (first one on ties)
        """
        moves = self.engine.empty_positions(board)
        if not moves:
            raise ValueError("No empty cells to search")

        self.nodes_evaluated = 0
        self.table.clear()

        best_score = -math.inf
        best_move = moves[0]

        with debug.timed("minimax", "search"):
            for move in moves:
                child = self.engine.apply_move(board, move, self.player)
                score = self.minimax(child, self.depth, False)
                debug.trace(f"candidate {tuple(move)} scores {score}", "search")

                if score > best_score:
                    best_score = score
                    best_move = move

        debug.debug(f"best move {tuple(best_move)} (score {best_score}, "
                    f"{self.nodes_evaluated} nodes, {self.table.stats.hits} cache hits)", "search")
        return best_move

    def minimax(self, board: Board, depth: int, maximizing: bool) -> float:
        """
        Score a position.

        Args:
            board: Position to score
            depth: Remaining depth
            maximizing: True if the search player is to move

        Returns:
            The minimax score for the search player
        """
        self.nodes_evaluated += 1

        key = None
        if self.use_cache:
            key = board_to_key(board)
            cached = self.table.get(key, depth, maximizing)
            if cached is not None:
                return cached

        score = self._search(board, depth, maximizing)

        if key is not None:
            self.table.put(key, depth, maximizing, score)
        return score

    def _search(self, board: Board, depth: int, maximizing: bool) -> float:
        win = self.engine.check_win(board)
        if win is not None:
            if win.player == self.player:
                return WIN_SCORE - depth
            return depth - WIN_SCORE

        if depth == 0 or board.is_full():
            return 0

        # Children come from empty_positions, so the unchecked placement is safe
        mover = self.player if maximizing else self.opponent
        scores = (
            self.minimax(board.with_mark(move, mover), depth - 1, not maximizing)
            for move in board.empty_positions()
        )
        return max(scores) if maximizing else min(scores)
