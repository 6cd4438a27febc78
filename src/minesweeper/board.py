"""
Board module for Minesweeper.

Implements the mine field: tile storage, deferred mine placement,
adjacency counting and the aggregate counters a renderer displays.
"""
import logging
import random
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .tile import MINE, Tile

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MIN_WIDTH = 9
MAX_WIDTH = 30
MIN_HEIGHT = 9
MAX_HEIGHT = 24
MIN_MINES = 1


def clamp(value: int, low: int, high: int) -> int:
    """Clamp value into the closed range [low, high]."""
    return min(max(value, low), high)


@dataclass
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Out-of-range values are clamped rather than rejected, so any
    integers produce a playable board.

    Attributes:
        width: Number of columns, clamped to [9, 30].
        height: Number of rows, clamped to [9, 24].
        num_mines: Total mines, clamped to [1, (width-1)*(height-1)].
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Normalize configuration after initialization."""
        self._normalize()

    def _normalize(self) -> None:
        """Clamp each field to its valid range."""
        self.width = clamp(int(self.width), MIN_WIDTH, MAX_WIDTH)
        self.height = clamp(int(self.height), MIN_HEIGHT, MAX_HEIGHT)
        self.num_mines = clamp(int(self.num_mines), MIN_MINES, self.max_mines)

    @property
    def max_mines(self) -> int:
        """Largest mine count that still leaves a safe first click."""
        return (self.width - 1) * (self.height - 1)

    @classmethod
    def from_difficulty(cls, name: str) -> "BoardConfig":
        """
        Get a copy of a named preset.

        Args:
            name: One of "beginner", "intermediate" or "expert".

        Returns:
            A new BoardConfig with the preset's parameters.
        """
        try:
            preset = DIFFICULTIES[name.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown difficulty {name!r} "
                f"(choose from {', '.join(DIFFICULTIES)})"
            ) from None
        return cls(preset.width, preset.height, preset.num_mines)


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(30, 16, 99)

DIFFICULTIES = {
    "beginner": BEGINNER,
    "intermediate": INTERMEDIATE,
    "expert": EXPERT,
}


# ============================================================================
# Board Class
# ============================================================================

class Board:
    """
    Minesweeper mine field.

    Owns the width x height grid of tiles in row-major order plus
    the mines-remaining and opened-cell counters. Mines are not placed
    until generate_mines() or place_mines() is called.
    """

    def __init__(self, config: Optional[BoardConfig] = None) -> None:
        """
        Create an empty board.

        Args:
            config: Board parameters (default: 9x9 with 10 mines).
        """
        self.config = config or BoardConfig()
        self.mines_remaining = self.config.num_mines
        self.opened_count = 0
        self._mines_placed = False
        self._tiles = [
            Tile(index % self.width, index // self.width)
            for index in range(self.width * self.height)
        ]

    @classmethod
    def create(cls, width: int, height: int, mine_count: int) -> "Board":
        """Create a board from raw parameters, clamping each one."""
        return cls(BoardConfig(width, height, mine_count))

    # ========================================================================
    # Dimensions and Lookup (Low-level)
    # ========================================================================

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def num_mines(self) -> int:
        return self.config.num_mines

    @property
    def safe_cell_count(self) -> int:
        """Number of tiles that must be opened to win."""
        return self.width * self.height - self.num_mines

    @property
    def mines_placed(self) -> bool:
        """Check if mines have been laid out on this board."""
        return self._mines_placed

    @property
    def tiles(self) -> List[Tile]:
        """All tiles in row-major order."""
        return self._tiles

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def index(self, x: int, y: int) -> int:
        """Flattened index of position (x, y)."""
        return x + y * self.width

    def is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        """Get tile at position, or None if invalid."""
        if not self.is_valid_position(x, y):
            return None
        return self._tiles[self.index(x, y)]

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def iter_neighbors(self, tile: Tile) -> Iterator[Tile]:
        """
        Yield the in-bounds tiles of the 8-neighborhood.

        Scans the 3x3 box around the tile row by row, skipping the
        center, so the order is stable for a given board.
        """
        for y in range(tile.y - 1, tile.y + 2):
            for x in range(tile.x - 1, tile.x + 2):
                if (x, y) == (tile.x, tile.y):
                    continue
                if self.is_valid_position(x, y):
                    yield self._tiles[self.index(x, y)]

    def for_each_neighbor(self, tile: Tile, fn: Callable[[Tile], None]) -> None:
        """Apply fn to every in-bounds neighbor of tile."""
        for neighbor in self.iter_neighbors(tile):
            fn(neighbor)

    def count_adjacent_mines(self, tile: Tile) -> int:
        """Count mines adjacent to a tile."""
        return sum(1 for neighbor in self.iter_neighbors(tile) if neighbor.is_mine)

    def count_adjacent_flags(self, tile: Tile) -> int:
        """Count flagged tiles adjacent to a tile."""
        return sum(1 for neighbor in self.iter_neighbors(tile) if neighbor.flagged)

    # ========================================================================
    # Mine Placement (Mid-level)
    # ========================================================================

    def generate_mines(
        self,
        exclude_x: int,
        exclude_y: int,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Place mines uniformly at random, keeping one cell mine-free.

        Uses rejection sampling: a draw that hits an existing mine or
        the excluded cell is retried. The mine count is bounded well
        below the cell count, so this always terminates.

        Args:
            exclude_x: Column of the cell to keep mine-free.
            exclude_y: Row of the cell to keep mine-free.
            rng: Random source (default: a freshly seeded Random).
        """
        self._check_not_placed()
        rng = rng or random.Random()
        excluded = self.index(exclude_x, exclude_y)
        total = self.width * self.height

        placed = 0
        while placed < self.num_mines:
            index = rng.randrange(total)
            if index == excluded or self._tiles[index].is_mine:
                continue
            self._tiles[index].value = MINE
            placed += 1

        self._finish_placement()
        logger.debug(
            "Generated %d mines on %dx%d board, excluding (%d, %d)",
            self.num_mines, self.width, self.height, exclude_x, exclude_y,
        )

    def place_mines(self, positions: Iterable[Tuple[int, int]]) -> None:
        """
        Lay out mines at explicit positions.

        Counts as this board's one mine placement, so a later first
        reveal will not generate again.

        Args:
            positions: (x, y) pairs, exactly num_mines distinct cells.
        """
        self._check_not_placed()
        positions = list(positions)
        if len(set(positions)) != len(positions):
            raise ValueError("Duplicate mine positions")
        if len(positions) != self.num_mines:
            raise ValueError(
                f"Expected {self.num_mines} mine positions, got {len(positions)}"
            )
        for x, y in positions:
            if not self.is_valid_position(x, y):
                raise ValueError(f"Mine position ({x}, {y}) is off the board")

        for x, y in positions:
            self._tiles[self.index(x, y)].value = MINE
        self._finish_placement()

    def _check_not_placed(self) -> None:
        if self._mines_placed:
            raise ValueError("Mines have already been placed on this board")

    def _finish_placement(self) -> None:
        """Calculate adjacent mine counts for every mineless tile."""
        for tile in self._tiles:
            if not tile.is_mine:
                tile.value = self.count_adjacent_mines(tile)
        self._mines_placed = True

    # ========================================================================
    # Tile Mutations (Mid-level)
    # ========================================================================

    def mark_opened(self, tile: Tile) -> bool:
        """
        Open a tile and update the opened-cell counter.

        Returns:
            True if the tile was opened, False if it was not clickable.
        """
        if not tile.open():
            return False
        if not tile.is_mine:
            self.opened_count += 1
        return True

    def toggle_flag(self, tile: Tile) -> bool:
        """
        Toggle a flag and update the mines-remaining counter.

        The counter is not clamped: over-flagging drives it negative.

        Returns:
            True if the flag was toggled, False if the tile is opened.
        """
        if not tile.toggle_flag():
            return False
        self.mines_remaining += -1 if tile.flagged else 1
        return True

    def reveal_for_loss(self) -> None:
        """Open every unflagged mine and every wrongly flagged tile."""
        for tile in self._tiles:
            if tile.is_mine != tile.flagged:
                tile.opened = True

    def flag_remaining_mines(self) -> None:
        """Flag every unflagged mine and zero the counter."""
        for tile in self._tiles:
            if tile.is_mine and not tile.flagged:
                tile.flagged = True
        self.mines_remaining = 0

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array indexed [y, x].

        Returns:
            2D int8 array of Tile.to_observation() codes.
        """
        obs = np.array(
            [tile.to_observation() for tile in self._tiles], dtype=np.int8
        )
        return obs.reshape(self.height, self.width)

    def get_clickable_tiles(self) -> List[Tile]:
        """Get tiles that can still be opened or flagged."""
        return [tile for tile in self._tiles if tile.is_clickable]
