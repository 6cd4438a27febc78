#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--difficulty NAME | --width W --height H --mines M] [--seed N]
    python main.py demo [--games N] [--delay S]
"""
import argparse
import logging
import random
import sys
from pathlib import Path

# Add src to path so the script runs from a checkout
sys.path.insert(0, str(Path(__file__).parent / "src"))

from minesweeper import BoardConfig, ConsoleSession, GameEngine

from demo import demo


def board_config(args: argparse.Namespace) -> BoardConfig:
    """Build the board configuration from command-line options."""
    config = BoardConfig.from_difficulty(args.difficulty)
    return BoardConfig(
        args.width if args.width is not None else config.width,
        args.height if args.height is not None else config.height,
        args.mines if args.mines is not None else config.num_mines,
    )


def play(args: argparse.Namespace) -> None:
    """Play an interactive game in the terminal."""
    config = board_config(args)
    rng = random.Random(args.seed) if args.seed is not None else None
    engine = GameEngine(config, rng=rng)

    print(f"Board: {config.width}x{config.height} with {config.num_mines} mines")
    ConsoleSession(engine).run()


def run_demo(args: argparse.Namespace) -> None:
    """Watch random play."""
    demo(
        delay=args.delay,
        games=args.games,
        config=board_config(args),
        seed=args.seed,
    )


def add_board_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--difficulty",
        choices=["beginner", "intermediate", "expert"],
        default="beginner",
        help="Preset board size and mine count",
    )
    parser.add_argument("--width", type=int, help="Columns (9-30)")
    parser.add_argument("--height", type=int, help="Rows (9-24)")
    parser.add_argument("--mines", type=int, help="Mine count")
    parser.add_argument("--seed", type=int, help="Random seed")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(description="Minesweeper")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostic logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    add_board_arguments(play_parser)

    demo_parser = subparsers.add_parser("demo", help="Watch random play")
    add_board_arguments(demo_parser)
    demo_parser.add_argument(
        "--games", type=int, default=5, help="Number of games"
    )
    demo_parser.add_argument(
        "--delay", type=float, default=0.3, help="Delay between moves"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command == "play":
        play(args)
    elif args.command == "demo":
        run_demo(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
