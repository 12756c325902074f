import random

import pytest

from tictactoe.game.board import Board
from tictactoe.game.rules import RuleEngine


def board_from(*rows: str) -> Board:
    """Build a board from strings such as "X_O", one per row."""
    return Board.from_rows([list(row) for row in rows])


class ScriptedRandom(random.Random):
    """Random source returning scripted values; choice() picks the last item."""

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)

    def random(self):
        return self.values.pop(0)

    def choice(self, seq):
        return seq[-1]


@pytest.fixture
def engine3():
    return RuleEngine(3)


@pytest.fixture
def engine4():
    return RuleEngine(4)


@pytest.fixture
def engine5():
    return RuleEngine(5)
