import logging

import pytest

from tictactoe.interfaces.cli import HINT, QUIT, UNDO, SimpleCLI, main, parse_move
from tictactoe.utils import Position


def scripted_input(*answers):
    answers = list(answers)

    def fake_input(prompt=""):
        return answers.pop(0)

    return fake_input


@pytest.mark.parametrize("text,expected", [
    ("1,2", Position(1, 2)),
    (" 0 3 ", Position(0, 3)),
    ("2, 1", Position(2, 1)),
    ("q", QUIT),
    ("U", UNDO),
    ("h", HINT),
    ("", None),
    ("1", None),
    ("a,b", None),
    ("1,2,3", None),
])
def test_parse_move(text, expected):
    assert parse_move(text) == expected


def test_analyze_reports_choices(capsys):
    assert SimpleCLI().run(["analyze", "--position", "XX_OO____"]) == 0

    out = capsys.readouterr().out
    assert "Medium choice for X: 0,2" in out
    assert "Hard choice for X: 0,2" in out


def test_analyze_reports_win(capsys):
    assert main(["analyze", "--position", "XXXOO____"]) == 0
    assert "Win for X along a row: (0,0), (0,1), (0,2)" in capsys.readouterr().out


def test_analyze_rejects_bad_position(capsys):
    assert SimpleCLI().run(["analyze", "--position", "XX_OO"]) == 1
    assert "Error parsing position" in capsys.readouterr().out


def test_play_move_then_quit(capsys):
    cli = SimpleCLI(input_func=scripted_input("1,1", "q"))
    assert cli.run(["play", "--no-delay", "--seed", "7"]) == 0

    out = capsys.readouterr().out
    assert "Computer plays" in out
    assert "Quitting game." in out


def test_play_reports_bad_input(capsys):
    cli = SimpleCLI(input_func=scripted_input("nonsense", "5,5", "h", "q"))
    assert cli.run(["play", "--no-delay"]) == 0

    out = capsys.readouterr().out
    assert "Invalid input" in out
    assert "Invalid move" in out
    assert "Hint: try 1,1" in out


def test_play_undo_takes_back_both_moves(capsys):
    cli = SimpleCLI(input_func=scripted_input("0,0", "u", "q"))
    assert cli.run(["play", "--no-delay", "--difficulty", "hard"]) == 0
    assert "Move undone." in capsys.readouterr().out


def test_watch_plays_requested_rounds(capsys):
    assert SimpleCLI().run(["watch", "--rounds", "2", "--seed", "1"]) == 0

    out = capsys.readouterr().out
    assert "Round 1:" in out
    assert "Round 2:" in out


def test_benchmark_runs(capsys):
    assert SimpleCLI().run(["benchmark", "--size", "3", "--iterations", "5"]) == 0
    assert "check_win x5" in capsys.readouterr().out


def test_missing_command(capsys):
    assert SimpleCLI().run([]) == 1


@pytest.mark.parametrize("argv", [
    ["benchmark", "--iterations", "0"],
    ["benchmark", "--iterations", "-3"],
    ["watch", "--rounds", "0"],
])
def test_counts_must_be_positive(argv, capsys):
    with pytest.raises(SystemExit):
        SimpleCLI().run(argv)
    assert "must be a positive integer" in capsys.readouterr().err


def test_two_player_game(capsys):
    cli = SimpleCLI(input_func=scripted_input("0,0", "1,0", "0,1", "1,1", "0,2", "n"))
    assert cli.run(["play", "--two-player"]) == 0

    out = capsys.readouterr().out
    assert "Computer" not in out
    assert "Player X wins!" in out
    assert "X 1 - O 0" in out


def test_two_player_undo_takes_back_one_move(capsys):
    cli = SimpleCLI(input_func=scripted_input("0,0", "1,1", "u", "q"))
    assert cli.run(["play", "--two-player"]) == 0
    assert capsys.readouterr().out.count("Move undone.") == 1


def test_hard_on_larger_board_warns(caplog):
    caplog.set_level(logging.WARNING, logger="tictactoe")
    # X wins at once, so neither tier needs to search
    assert SimpleCLI().run(["analyze", "--position", "XXX_OOO_________"]) == 0
    assert any("without pruning" in record.getMessage() for record in caplog.records)


def test_hard_on_small_board_does_not_warn(caplog):
    caplog.set_level(logging.WARNING, logger="tictactoe")
    assert SimpleCLI().run(["analyze", "--position", "XX_OO____"]) == 0
    assert not any("without pruning" in record.getMessage() for record in caplog.records)
