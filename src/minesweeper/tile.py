"""
Tile module for Minesweeper.

Represents a single grid position: its mine/number value and
whether it has been opened, flagged or detonated.
"""
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

MINE = -1

# Observation codes (see Tile.to_observation)
OBS_HIDDEN = -1
OBS_FLAGGED = -2
OBS_MINE = 9
OBS_DETONATED = 10
OBS_WRONG_FLAG = 11


# ============================================================================
# Tile Data Class
# ============================================================================

@dataclass(eq=False)
class Tile:
    """
    A single cell of the mine field.

    Tiles compare by identity so they can be held in sets and used
    as focus references.

    Attributes:
        x: Column index.
        y: Row index.
        value: MINE (-1) or the number of adjacent mines (0-8).
        opened: Whether the tile has been opened.
        flagged: Whether the player has flagged the tile.
        detonated: True only for the mine whose opening lost the game.
    """

    x: int
    y: int
    value: int = 0
    opened: bool = False
    flagged: bool = False
    detonated: bool = False

    @property
    def is_mine(self) -> bool:
        """Check if tile holds a mine."""
        return self.value == MINE

    @property
    def is_clickable(self) -> bool:
        """A tile can be opened or flagged only while closed and unflagged."""
        return not self.opened and not self.flagged

    def open(self) -> bool:
        """
        Open this tile.

        Returns:
            True if the tile was opened, False if it was already
            opened or is flagged.
        """
        if not self.is_clickable:
            return False
        self.opened = True
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle the flag on this tile.

        Returns:
            True if the flag was toggled, False if the tile is opened.
        """
        if self.opened:
            return False
        self.flagged = not self.flagged
        return True

    def to_observation(self) -> int:
        """
        Convert tile to a single observation code.

        Returns:
            -1: Hidden tile
            -2: Flagged tile
            0-8: Opened tile with adjacent mine count
            9: Opened mine
            10: The detonated mine
            11: Wrong flag revealed after a loss
        """
        if self.opened and self.flagged:
            return OBS_WRONG_FLAG
        if self.flagged:
            return OBS_FLAGGED
        if not self.opened:
            return OBS_HIDDEN
        if self.detonated:
            return OBS_DETONATED
        if self.is_mine:
            return OBS_MINE
        return self.value
