"""
Minesweeper game package.

Provides the game-state engine (board model, deferred mine placement,
flood open, flags and chords, win/loss) plus a text renderer, a console
input layer and a Gymnasium environment built on it.
"""
from .tile import Tile, MINE
from .board import Board, BoardConfig, BEGINNER, INTERMEDIATE, EXPERT
from .engine import GameEngine, GameEvent, Face, Phase, TICK_INTERVAL
from .timer import PeriodicTimer
from .render import render_text, format_counter
from .console import ConsoleSession
from .environment import MinesweeperEnv, make_vec_env

__all__ = [
    "Tile",
    "MINE",
    "Board",
    "BoardConfig",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "GameEngine",
    "GameEvent",
    "Face",
    "Phase",
    "TICK_INTERVAL",
    "PeriodicTimer",
    "render_text",
    "format_counter",
    "ConsoleSession",
    "MinesweeperEnv",
    "make_vec_env",
]
