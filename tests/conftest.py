"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import Board, BoardConfig, GameEngine, Tile


# ============================================================================
# Test Doubles
# ============================================================================

class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTimer:
    """Timer that only ticks when fire() is called."""

    instances: List["FakeTimer"] = []

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False
        FakeTimer.instances.append(self)

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.callback()


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board()


@pytest.fixture
def corner_board() -> Board:
    """9x9 board with 10 mines packed into the bottom-right corner."""
    board = Board(BoardConfig(9, 9, 10))
    board.place_mines(CORNER_MINES)
    return board


# Bottom-right corner: rows 7-8 mined from x=5, plus (7, 6) and (8, 6).
# Every safe tile is reachable from (0, 0) through blanks.
CORNER_MINES = [
    (5, 7), (6, 7), (7, 7), (8, 7),
    (5, 8), (6, 8), (7, 8), (8, 8),
    (7, 6), (8, 6),
]

# Column x=4 fully mined plus (8, 8): splits the board in two halves.
WALL_MINES = [(4, y) for y in range(9)] + [(8, 8)]

# (1, 1) has value 2 from (1, 0) and (1, 2); no blank tile near it.
# The bottom row keeps the total at 10.
CHORD_MINES = [(1, 0), (1, 2)] + [(x, 8) for x in range(1, 9)]


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_timers():
    """Collect the FakeTimer instances created during a test."""
    FakeTimer.instances = []
    yield FakeTimer.instances
    FakeTimer.instances = []


@pytest.fixture
def engine(clock: FakeClock, fake_timers) -> GameEngine:
    """Beginner engine with a fake clock and timer; mines not placed."""
    return GameEngine(BoardConfig(9, 9, 10), clock=clock, timer_factory=FakeTimer)


@pytest.fixture
def make_engine(clock: FakeClock, fake_timers):
    """Factory for engines with an explicit mine layout."""
    def factory(
        mines: Sequence[Tuple[int, int]],
        width: int = 9,
        height: int = 9,
    ) -> GameEngine:
        game = GameEngine(
            BoardConfig(width, height, len(mines)),
            clock=clock,
            timer_factory=FakeTimer,
        )
        game.board.place_mines(mines)
        return game
    return factory


@pytest.fixture
def corner_engine(make_engine) -> GameEngine:
    """Beginner engine with CORNER_MINES laid out."""
    return make_engine(CORNER_MINES)


def click(game: GameEngine, x: int, y: int) -> None:
    """Primary click on a tile."""
    game.pointer_enter_tile(x, y)
    game.primary_press()
    game.primary_release()


def right_click(game: GameEngine, x: int, y: int) -> None:
    game.pointer_enter_tile(x, y)
    game.secondary_press()


def middle_click(game: GameEngine, x: int, y: int) -> None:
    game.pointer_enter_tile(x, y)
    game.auxiliary_press()
    game.auxiliary_release()


def tile_at(game: GameEngine, x: int, y: int) -> Tile:
    return game.board.get_tile(x, y)
