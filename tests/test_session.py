import asyncio

import pytest

from tictactoe.ai.agent import DecisionAgent
from tictactoe.game.errors import IllegalMoveError, OutOfBoundsError
from tictactoe.game.session import GameSession, GameStatus
from tictactoe.utils import Difficulty, LineKind, Player, Position

X_WINS_TOP_ROW = [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)]
DRAW = [(0, 0), (0, 1), (0, 2), (1, 1), (1, 0), (1, 2), (2, 1), (2, 0), (2, 2)]


def play(session, moves):
    for move in moves:
        session.make_move(move)


class SlowAgent:
    """Agent stand-in that answers only once released."""

    player = Player.O

    def __init__(self, move):
        self.move = move
        self.release = asyncio.Event()

    async def select_move(self, board):
        await self.release.wait()
        return self.move


def test_players_alternate_and_history_is_recorded():
    session = GameSession()
    play(session, [(0, 0), (1, 1)])

    assert session.current_player == Player.X
    assert [(m.player, m.position, m.move_number) for m in session.history] == [
        (Player.X, Position(0, 0), 1),
        (Player.O, Position(1, 1), 2),
    ]
    assert session.board[1, 1] == Player.O


def test_win_updates_score_and_ends_round():
    session = GameSession()
    play(session, X_WINS_TOP_ROW)

    assert session.is_game_over()
    assert session.status == GameStatus.FINISHED
    assert session.winner == Player.X
    assert session.win_condition.line_kind == LineKind.ROW
    assert session.scores == {Player.X: 1, Player.O: 0}
    assert session.ended_at is not None

    with pytest.raises(IllegalMoveError):
        session.make_move((2, 2))


def test_full_board_is_a_draw():
    session = GameSession()
    play(session, DRAW)

    assert session.is_draw()
    assert session.draws == 1
    assert session.scores == {Player.X: 0, Player.O: 0}


def test_undo_reverts_board_turn_and_score():
    session = GameSession()
    play(session, X_WINS_TOP_ROW)

    assert session.undo_move() is True
    assert session.status == GameStatus.PLAYING
    assert session.scores[Player.X] == 0
    assert session.winner is None
    assert session.current_player == Player.X
    assert session.board[0, 2] == Player.EMPTY
    assert len(session.history) == 4


def test_undo_reverts_draw():
    session = GameSession()
    play(session, DRAW)

    session.undo_move()
    assert session.draws == 0
    assert not session.is_game_over()


def test_undo_with_no_history():
    assert GameSession().undo_move() is False


def test_new_round_keeps_scores_and_reset_clears_them():
    session = GameSession()
    play(session, X_WINS_TOP_ROW)

    session.new_round()
    assert session.round == 2
    assert session.scores[Player.X] == 1
    assert session.current_player == Player.X
    assert session.history == []
    assert session.board.count(Player.EMPTY) == 9

    session.reset()
    assert session.round == 1
    assert session.scores == {Player.X: 0, Player.O: 0}
    assert session.draws == 0


def test_paused_game_refuses_moves():
    session = GameSession()
    session.pause()
    assert session.status == GameStatus.PAUSED

    with pytest.raises(IllegalMoveError):
        session.make_move((0, 0))

    session.resume()
    session.make_move((0, 0))
    assert session.board[0, 0] == Player.X


def test_pause_does_not_reopen_finished_round():
    session = GameSession()
    play(session, X_WINS_TOP_ROW)
    session.pause()
    session.resume()
    assert session.status == GameStatus.FINISHED


def test_out_of_bounds_move_leaves_state_alone():
    session = GameSession()
    with pytest.raises(OutOfBoundsError):
        session.make_move((3, 3))
    assert session.history == []
    assert session.current_player == Player.X


def test_occupied_cell_is_rejected():
    session = GameSession()
    session.make_move((1, 1))
    with pytest.raises(IllegalMoveError):
        session.make_move((1, 1))
    assert session.current_player == Player.O


def test_ai_turn_plays_for_the_agent():
    session = GameSession()
    agent = DecisionAgent(3, Difficulty.MEDIUM, Player.O, think=False)

    session.make_move((0, 0))
    move = asyncio.run(session.play_ai_turn(agent))

    assert move == Position(1, 1)
    assert session.board[1, 1] == Player.O
    assert session.current_player == Player.X
    assert not session.ai_pending


def test_ai_turn_out_of_turn_is_rejected():
    session = GameSession()
    agent = DecisionAgent(3, Difficulty.MEDIUM, Player.O, think=False)
    with pytest.raises(IllegalMoveError):
        asyncio.run(session.play_ai_turn(agent))


def test_human_moves_wait_for_pending_ai_move():
    session = GameSession()
    session.make_move((0, 0))

    async def scenario():
        agent = SlowAgent(Position(2, 2))
        task = asyncio.ensure_future(session.play_ai_turn(agent))
        await asyncio.sleep(0)

        assert session.ai_pending
        with pytest.raises(IllegalMoveError):
            session.make_move((1, 1))
        with pytest.raises(IllegalMoveError):
            session.undo_move()
        with pytest.raises(IllegalMoveError):
            await session.play_ai_turn(agent)

        agent.release.set()
        return await task

    move = asyncio.run(scenario())

    assert move == Position(2, 2)
    assert not session.ai_pending
    assert session.board[2, 2] == Player.O
    assert session.board[1, 1] == Player.EMPTY


def test_round_controls_wait_for_pending_ai_move():
    session = GameSession()
    session.make_move((0, 0))

    async def scenario():
        agent = SlowAgent(Position(2, 2))
        task = asyncio.ensure_future(session.play_ai_turn(agent))
        await asyncio.sleep(0)

        for control in (session.new_round, session.reset, session.pause):
            with pytest.raises(IllegalMoveError):
                control()

        agent.release.set()
        return await task

    asyncio.run(scenario())

    assert session.round == 1
    assert session.status == GameStatus.PLAYING
    assert [(m.player, m.position) for m in session.history] == [
        (Player.X, Position(0, 0)),
        (Player.O, Position(2, 2)),
    ]


def test_suggest_move_blocks_threat():
    session = GameSession()
    play(session, [(0, 0), (2, 2), (0, 1)])
    assert session.suggest_move() == Position(0, 2)


def test_suggest_move_after_round_end():
    session = GameSession()
    play(session, X_WINS_TOP_ROW)
    with pytest.raises(IllegalMoveError):
        session.suggest_move()


def test_larger_board_session():
    session = GameSession(5)
    # X builds four down column 0 while O plays column 4
    play(session, [(0, 0), (0, 4), (1, 0), (1, 4), (2, 0), (2, 4), (3, 0)])
    assert session.winner == Player.X
    assert session.win_condition.positions == tuple(Position(r, 0) for r in range(4))
