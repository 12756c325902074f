"""
cli.py - Command-line interface for the tictactoe engine

This module provides a terminal front-end that plays the role of the game
orchestrator: it owns a GameSession, reads human moves, asks a DecisionAgent
for the computer's moves, and prints the board. It can also let two agents
play each other, analyze a position given as a board key, and benchmark the
engine.
"""

import argparse
import asyncio
import random
import sys
from typing import List, Optional, Union

from tictactoe.ai.agent import DecisionAgent
from tictactoe.debug import debug, DebugLevel
from tictactoe.game.board import Board, key_from_string
from tictactoe.game.errors import MoveError
from tictactoe.game.rules import RuleEngine
from tictactoe.game.session import GameSession
from tictactoe.utils import (BOARD_SIZES, DEFAULT_BOARD_SIZE, SEARCH_DEPTH, Difficulty,
                             Player, Position)

# Commands accepted at the move prompt
QUIT, UNDO, RESTART, HINT = "quit", "undo", "restart", "hint"
COMMANDS = {"q": QUIT, "u": UNDO, "r": RESTART, "h": HINT}

DIFFICULTY_CHOICES = [d.value for d in Difficulty]


def parse_move(text: str) -> Union[Position, str, None]:
    """
    Parse a line typed at the move prompt.

    Args:
        text: "row,col", "row col", or one of q/u/r/h

    Returns:
        A Position, a command name, or None if the input is not understood
    """
    text = text.strip().lower()
    if text in COMMANDS:
        return COMMANDS[text]

    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        return None
    try:
        return Position(int(parts[0]), int(parts[1]))
    except ValueError:
        return None


def positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def format_scores(session: GameSession) -> str:
    return (f"Round {session.round} | X {session.scores[Player.X]} - "
            f"O {session.scores[Player.O]} | draws {session.draws}")


class SimpleCLI:
    """Command-line interface for playing and inspecting games."""

    def __init__(self, input_func=input):
        self.args: Optional[argparse.Namespace] = None
        self._input = input_func

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='N-in-a-row tic-tac-toe CLI')
        parser.add_argument('--debug', action='store_true', help='Enable debug logging')
        parser.add_argument('--debug-level', default='warning',
                            choices=[level.name.lower() for level in DebugLevel],
                            help='Logging level')
        parser.add_argument('--log-file', default=None, help='Also write logs to this file')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play against the computer')
        play_parser.add_argument('--size', type=int, choices=BOARD_SIZES, default=DEFAULT_BOARD_SIZE,
                                 help='Board side length')
        play_parser.add_argument('--difficulty', choices=DIFFICULTY_CHOICES, default='medium',
                                 help='Computer difficulty')
        play_parser.add_argument('--ai-first', action='store_true',
                                 help='Computer plays X and moves first')
        play_parser.add_argument('--no-delay', action='store_true',
                                 help='Skip the computer thinking pause')
        play_parser.add_argument('--seed', type=int, default=None, help='Random seed')
        play_parser.add_argument('--two-player', action='store_true',
                                 help='Two humans take turns at the same terminal')

        watch_parser = subparsers.add_parser('watch', help='Watch two computer players')
        watch_parser.add_argument('--size', type=int, choices=BOARD_SIZES, default=DEFAULT_BOARD_SIZE)
        watch_parser.add_argument('--x-difficulty', choices=DIFFICULTY_CHOICES, default='medium')
        watch_parser.add_argument('--o-difficulty', choices=DIFFICULTY_CHOICES, default='hard')
        watch_parser.add_argument('--rounds', type=positive_int, default=1, help='Number of rounds')
        watch_parser.add_argument('--delay', action='store_true',
                                  help='Keep the thinking pause between moves')
        watch_parser.add_argument('--seed', type=int, default=None)

        analyze_parser = subparsers.add_parser('analyze', help='Analyze a board position')
        analyze_parser.add_argument('--position', required=True,
                                    help='Board key, one character per cell (X, O or _), row by row')

        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark the engine')
        benchmark_parser.add_argument('--size', type=int, choices=BOARD_SIZES, default=DEFAULT_BOARD_SIZE)
        benchmark_parser.add_argument('--iterations', type=positive_int, default=1000,
                                      help='Number of iterations')

        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments and configure logging."""
        self.args = self.build_parser().parse_args(argv)

        if self.args.debug:
            debug.configure(level=DebugLevel.DEBUG)
        else:
            debug.set_from_string(self.args.debug_level)
        if self.args.log_file:
            debug.configure(log_file=self.args.log_file)

        return self.args

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the command selected on the command line."""
        if self.args is None:
            self.parse_args(argv)

        debug.debug(f"Running command: {self.args.command}", "cli")

        if self.args.command == 'play':
            return asyncio.run(self.play_game())
        elif self.args.command == 'watch':
            return asyncio.run(self.watch_games())
        elif self.args.command == 'analyze':
            return self.analyze_position()
        elif self.args.command == 'benchmark':
            return self.benchmark()

        print("Please specify a command. Use --help for options.")
        return 1

    # Interactive play

    async def play_game(self) -> int:
        """Play rounds against the computer, or hotseat with --two-player, until quit."""
        args = self.args
        session = GameSession(args.size)

        if args.two_player:
            agent = None
            ai_player = human = None
        else:
            ai_player = Player.X if args.ai_first else Player.O
            agent = DecisionAgent(args.size, args.difficulty, ai_player,
                                  rng=random.Random(args.seed), think=not args.no_delay)
            human = ai_player.other()
            self._warn_slow_search(args.size, agent.difficulty)

        win_length = session.engine.win_length
        if human is None:
            print(f"New {args.size}x{args.size} two-player game, {win_length} in a row wins. X starts.")
        else:
            print(f"New {args.size}x{args.size} game, {win_length} in a row wins. You are {human}.")
        print("Enter moves as 'row,col'. Commands: q quit, u undo, r new round, h hint.")

        while True:
            print()
            print(session.render())

            if session.is_game_over():
                self._announce_result(session, human)
                answer = self._input("Play another round? [y/N]: ").strip().lower()
                if answer != 'y':
                    return 0
                session.new_round()
                continue

            if agent is not None and session.current_player == ai_player:
                print("Computer is thinking...")
                move = await session.play_ai_turn(agent)
                print(f"Computer plays {move.row},{move.col}")
                continue

            prompt = f"Your move ({human}): " if human else f"Player {session.current_player} move: "
            choice = parse_move(self._input(prompt))
            if choice is None:
                print("Invalid input. Enter 'row,col' or a command.")
            elif choice == QUIT:
                print("Quitting game.")
                return 0
            elif choice == UNDO:
                self._undo_turn(session, human)
            elif choice == RESTART:
                session.new_round()
                print("New round started.")
            elif choice == HINT:
                hint = session.suggest_move()
                print(f"Hint: try {hint.row},{hint.col}")
            else:
                try:
                    session.make_move(choice)
                except MoveError as e:
                    print(f"Invalid move: {e}")

    def _undo_turn(self, session: GameSession, human: Optional[Player]) -> None:
        undone = session.undo_move()
        # Against the computer, take back its reply as well so it is the human's turn again
        while undone and human is not None and session.current_player != human and session.history:
            undone = session.undo_move()
        print("Move undone." if undone else "No moves to undo.")

    def _announce_result(self, session: GameSession, human: Optional[Player]) -> None:
        if session.winner is None:
            print("It's a draw!")
        elif human is None:
            print(f"Player {session.winner} wins!")
        elif session.winner == human:
            print("You win! Congratulations!")
        else:
            print("Computer wins! Better luck next time.")
        print(format_scores(session))

    @staticmethod
    def _warn_slow_search(size: int, difficulty: Difficulty) -> None:
        if difficulty == Difficulty.HARD and size > DEFAULT_BOARD_SIZE:
            debug.warning(f"Hard searches {SEARCH_DEPTH} plies without pruning; "
                          f"moves on a {size}x{size} board can take a long time", "cli")

    # Agent vs agent

    async def watch_games(self) -> int:
        args = self.args
        rng = random.Random(args.seed)
        session = GameSession(args.size)
        agents = {
            Player.X: DecisionAgent(args.size, args.x_difficulty, Player.X, rng=rng, think=args.delay),
            Player.O: DecisionAgent(args.size, args.o_difficulty, Player.O, rng=rng, think=args.delay),
        }
        for agent in agents.values():
            self._warn_slow_search(args.size, agent.difficulty)

        for round_number in range(args.rounds):
            if round_number:
                session.new_round()

            while not session.is_game_over():
                move = await session.play_ai_turn(agents[session.current_player])
                print(f"{session.history[-1].player} plays {move.row},{move.col}")
                print(session.render())

            result = "draw" if session.winner is None else f"{session.winner} wins"
            print(f"Round {session.round}: {result}")
            print(format_scores(session))

        return 0

    # Analysis

    def analyze_position(self) -> int:
        try:
            board = key_from_string(self.args.position)
            engine = RuleEngine(board.size)
        except ValueError as e:
            print(f"Error parsing position: {e}")
            return 1

        print("Loaded position:")
        print(board.render())
        self._describe(engine, board)
        return 0

    def _describe(self, engine: RuleEngine, board: Board) -> None:
        win = engine.check_win(board)
        if win is not None:
            cells = ", ".join(f"({p.row},{p.col})" for p in win.positions)
            print(f"Win for {win.player} along a {win.line_kind.value}: {cells}")
            return

        if engine.is_board_full(board):
            print("Board is full: draw")
            return

        print(f"Empty cells: {len(engine.empty_positions(board))}")
        for player in (Player.X, Player.O):
            print(f"Evaluation for {player}: {engine.evaluate(board, player):+.1f}")

        ordered = ", ".join(f"({p.row},{p.col})" for p in engine.ordered_moves(board))
        print(f"Ordered moves: {ordered}")

        to_move = Player.X if board.count(Player.X) <= board.count(Player.O) else Player.O
        self._warn_slow_search(board.size, Difficulty.HARD)
        for difficulty in (Difficulty.MEDIUM, Difficulty.HARD):
            agent = DecisionAgent(board.size, difficulty, to_move, think=False)
            move = agent.choose_move(board)
            print(f"{difficulty.value.capitalize()} choice for {to_move}: {move.row},{move.col}")

    # Benchmark

    def benchmark(self) -> int:
        """Time the engine's hot paths."""
        iterations = self.args.iterations
        engine = RuleEngine(self.args.size)
        rng = random.Random(0)

        # A half-filled board without a winner
        board = engine.create_empty_board()
        player = Player.X
        for move in rng.sample(engine.empty_positions(board), engine.board_size ** 2 // 2):
            candidate = engine.apply_move(board, move, player)
            if engine.check_win(candidate) is None:
                board = candidate
                player = player.other()

        print(board.render())

        debug.start_timer("check_win")
        for _ in range(iterations):
            engine.check_win(board)
        elapsed = debug.end_timer("check_win")
        print(f"check_win x{iterations}: {elapsed:.6f} seconds total, "
              f"{elapsed / iterations * 1000:.6f} ms per check")

        debug.start_timer("evaluate")
        for _ in range(iterations):
            engine.evaluate(board, Player.X)
        elapsed = debug.end_timer("evaluate")
        print(f"evaluate x{iterations}: {elapsed:.6f} seconds total, "
              f"{elapsed / iterations * 1000:.6f} ms per evaluation")

        agent = DecisionAgent(engine.board_size, Difficulty.HARD, player, think=False)
        debug.start_timer("hard_move")
        move = agent.choose_move(board)
        elapsed = debug.end_timer("hard_move")
        print(f"Hard move {move.row},{move.col} in {elapsed:.6f} seconds "
              f"({agent.search.nodes_evaluated} nodes searched)")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
