"""
Game engine for Minesweeper.

Owns a Board plus the session state (phase, clock, focused tile and
pointer buttons) and is the only thing that mutates either. An input
layer feeds it discrete intents; renderers subscribe and read state
back after every visible change.
"""
import functools
import logging
import random
import threading
import time
from enum import Enum, auto
from typing import Callable, List, Optional

from .board import Board, BoardConfig
from .tile import Tile
from .timer import PeriodicTimer

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

TICK_INTERVAL = 0.1


class Phase(Enum):
    """Coarse game lifecycle state."""

    IDLE = "idle"
    # Mines are not placed until the first reveal; the two names are
    # the same state.
    AWAITING_FIRST_REVEAL = "idle"
    RUNNING = "running"
    WON = "won"
    LOST = "lost"


class Face(Enum):
    """Status indicator shown above the board."""

    NORMAL = auto()
    PRESSING = auto()
    LOST = auto()
    WON = auto()


class GameEvent(Enum):
    """Kinds of state change reported to observers."""

    NEW_GAME = auto()
    PREVIEW = auto()
    BOARD = auto()
    TIME = auto()


Observer = Callable[[GameEvent, "GameEngine"], None]
TimerFactory = Callable[[float, Callable[[], None]], PeriodicTimer]


def _serialized(method):
    """Run an engine method under the engine's lock."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


# ============================================================================
# Game Engine
# ============================================================================

class GameEngine:
    """
    Minesweeper session.

    All mutation happens inside the intent handlers, each of which runs
    to completion under a single re-entrant lock. A flood open started
    by one intent therefore finishes before the next intent is seen.
    """

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        timer_factory: Optional[TimerFactory] = PeriodicTimer,
    ) -> None:
        """
        Create an engine and start a first game.

        Args:
            config: Board parameters (default: 9x9 with 10 mines).
            rng: Random source for mine placement.
            clock: Returns the current time in seconds.
            timer_factory: Builds the display tick source; None disables
                periodic ticks.
        """
        self._lock = threading.RLock()
        self._rng = rng or random.Random()
        self._clock = clock
        self._timer_factory = timer_factory
        self._timer: Optional[PeriodicTimer] = None
        self._observers: List[Observer] = []
        self._game_id = 0
        self.new_game_from(config or BoardConfig())

    # ========================================================================
    # Observers
    # ========================================================================

    def subscribe(self, callback: Observer) -> None:
        """Register a callback for state changes."""
        self._observers.append(callback)

    def unsubscribe(self, callback: Observer) -> None:
        """Remove a registered callback; unknown callbacks are ignored."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, event: GameEvent) -> None:
        for callback in list(self._observers):
            callback(event, self)

    # ========================================================================
    # Game Lifecycle
    # ========================================================================

    def new_game(self, width: int, height: int, mines: int) -> None:
        """Start a new game; out-of-range parameters are clamped."""
        self.new_game_from(BoardConfig(width, height, mines))

    @_serialized
    def new_game_from(self, config: BoardConfig) -> None:
        """Start a new game from a configuration or preset."""
        self._stop_timer()
        self._game_id += 1
        self.board = Board(BoardConfig(config.width, config.height, config.num_mines))
        self._phase = Phase.IDLE
        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None
        self._focus: Optional[Tile] = None
        self._chord_anchor: Optional[Tile] = None
        self._primary_down = False
        self._auxiliary_down = False
        logger.debug(
            "New game %d: %dx%d with %d mines",
            self._game_id, self.board.width, self.board.height,
            self.board.num_mines,
        )
        self._notify(GameEvent.NEW_GAME)

    def restart(self) -> None:
        """Start a new game with the current board parameters."""
        self.new_game_from(self.board.config)

    def _start(self, tile: Tile) -> None:
        """Place mines around the first revealed tile and start the clock."""
        if not self.board.mines_placed:
            self.board.generate_mines(tile.x, tile.y, self._rng)
        self._started_at = self._clock()
        self._set_phase(Phase.RUNNING)
        if self._timer_factory is not None:
            self._timer = self._timer_factory(
                TICK_INTERVAL, functools.partial(self._on_tick, self._game_id)
            )
            self._timer.start()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _finish(self, phase: Phase) -> None:
        self._stop_timer()
        self._finished_at = self._clock()
        self._set_phase(phase)
        logger.info(
            "Game %s after %.1f seconds", phase.value, self.elapsed_seconds
        )

    def _set_phase(self, phase: Phase) -> None:
        logger.debug("Phase %s -> %s", self._phase.value, phase.value)
        self._phase = phase

    @_serialized
    def _on_tick(self, game_id: int) -> None:
        # Ticks from an earlier game, or after the clock stopped, are stale.
        if game_id != self._game_id or self._phase is not Phase.RUNNING:
            return
        self._notify(GameEvent.TIME)

    # ========================================================================
    # Board Actions
    # ========================================================================

    @_serialized
    def open_tile(self, tile: Tile) -> bool:
        """
        Open a tile, flooding outward from blank tiles.

        The first successful call of a game places the mines (never on
        this tile) and starts the clock.

        Returns:
            True if any tile was opened.
        """
        opened = self._reveal([tile])
        if opened:
            self._notify(GameEvent.BOARD)
        return opened

    def _reveal(self, seeds: List[Tile]) -> bool:
        """
        Open the seed tiles and flood through zero-valued tiles.

        Works from an explicit stack. The clickability guard in
        Board.mark_opened means no tile is ever opened twice, and
        expansion continues only through tiles with value 0.
        """
        if self.is_over:
            return False
        seeds = [tile for tile in seeds if tile.is_clickable]
        if not seeds:
            return False
        if self._phase is Phase.IDLE:
            self._start(seeds[0])

        opened_any = False
        stack = list(reversed(seeds))
        while stack and not self.is_over:
            tile = stack.pop()
            if not self.board.mark_opened(tile):
                continue
            opened_any = True
            if tile.is_mine:
                self._lose(tile)
                continue
            self._check_win()
            if tile.value == 0:
                stack.extend(reversed(list(self.board.iter_neighbors(tile))))
        return opened_any

    def _lose(self, tile: Tile) -> None:
        tile.detonated = True
        self.board.reveal_for_loss()
        self._finish(Phase.LOST)

    def _check_win(self) -> None:
        if self.board.opened_count == self.board.safe_cell_count:
            self.board.flag_remaining_mines()
            self._finish(Phase.WON)

    @_serialized
    def toggle_flag(self, tile: Tile) -> bool:
        """
        Toggle the flag on a closed tile.

        Returns:
            True if the flag changed.
        """
        if self.is_over or not self.board.toggle_flag(tile):
            return False
        self._notify(GameEvent.BOARD)
        return True

    @_serialized
    def chord(self, tile: Tile) -> bool:
        """
        Open every closed, unflagged neighbor of an opened number
        whose adjacent flag count matches its value.

        Returns:
            True if any tile was opened.
        """
        opened = self._chord(tile)
        if opened:
            self._notify(GameEvent.BOARD)
        return opened

    def _chord(self, tile: Tile) -> bool:
        if self._phase is not Phase.RUNNING:
            return False
        if not tile.opened or tile.is_mine or tile.value == 0:
            return False
        if self.board.count_adjacent_flags(tile) != tile.value:
            return False
        return self._reveal(list(self.board.iter_neighbors(tile)))

    # ========================================================================
    # Input Intents
    # ========================================================================

    @_serialized
    def pointer_enter_tile(self, x: int, y: int) -> None:
        """Move focus to the tile at (x, y); off-board means no focus."""
        if self.is_over:
            return
        self._set_focus(self.board.get_tile(x, y))

    @_serialized
    def pointer_leave_board(self) -> None:
        if self.is_over:
            return
        self._set_focus(None)

    def _set_focus(self, tile: Optional[Tile]) -> None:
        if tile is self._focus:
            return
        self._focus = tile
        if self._chord_anchor is not None and tile is not self._chord_anchor:
            logger.debug(
                "Chord on (%d, %d) cancelled: pointer left the tile",
                self._chord_anchor.x, self._chord_anchor.y,
            )
            self._chord_anchor = None
        self._notify(GameEvent.PREVIEW)

    @_serialized
    def primary_press(self) -> None:
        self._primary_down = True
        if self.is_over or self._focus is None:
            return
        self._notify(GameEvent.PREVIEW)

    @_serialized
    def primary_release(self) -> None:
        """Open the focused tile."""
        self._primary_down = False
        if self.is_over or self._focus is None:
            return
        if self._reveal([self._focus]):
            self._notify(GameEvent.BOARD)
        else:
            self._notify(GameEvent.PREVIEW)

    @_serialized
    def secondary_press(self) -> None:
        """Toggle the flag on the focused tile."""
        if self.is_over or self._focus is None:
            return
        if self.board.toggle_flag(self._focus):
            self._notify(GameEvent.BOARD)

    @_serialized
    def auxiliary_press(self) -> None:
        """Arm a chord on the focused tile; only the preview changes."""
        self._auxiliary_down = True
        if self.is_over or self._focus is None:
            return
        self._chord_anchor = self._focus
        self._notify(GameEvent.PREVIEW)

    @_serialized
    def auxiliary_release(self) -> None:
        """Chord the tile armed by auxiliary_press, if still focused."""
        self._auxiliary_down = False
        anchor, self._chord_anchor = self._chord_anchor, None
        if self.is_over or anchor is None:
            return
        if self._chord(anchor):
            self._notify(GameEvent.BOARD)
        else:
            self._notify(GameEvent.PREVIEW)

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_over(self) -> bool:
        """Check if the game has been won or lost."""
        return self._phase in (Phase.WON, Phase.LOST)

    @property
    def focus(self) -> Optional[Tile]:
        return self._focus

    @property
    def primary_down(self) -> bool:
        return self._primary_down

    @property
    def auxiliary_down(self) -> bool:
        return self._auxiliary_down

    @property
    def started_at(self) -> Optional[float]:
        return self._started_at

    @property
    def mines_remaining(self) -> int:
        return self.board.mines_remaining

    @property
    def elapsed_seconds(self) -> float:
        """Seconds since the first reveal, frozen once the game ends."""
        if self._started_at is None:
            return 0.0
        end = self._finished_at if self._finished_at is not None else self._clock()
        return end - self._started_at

    @property
    def face(self) -> Face:
        if self._phase is Phase.LOST:
            return Face.LOST
        if self._phase is Phase.WON:
            return Face.WON
        if self._focus is not None and (self._primary_down or self._auxiliary_down):
            return Face.PRESSING
        return Face.NORMAL

    def pressed_tiles(self) -> List[Tile]:
        """
        Get the tiles a renderer should draw as held down.

        Primary press previews the focused tile; auxiliary press
        previews the chord anchor and its neighbors. Nothing here
        mutates the board.
        """
        if self.is_over or self._focus is None:
            return []
        pressed = []
        if self._auxiliary_down and self._chord_anchor is self._focus:
            pressed.append(self._focus)
            pressed.extend(self.board.iter_neighbors(self._focus))
        elif self._primary_down:
            pressed.append(self._focus)
        return [tile for tile in pressed if tile.is_clickable]
