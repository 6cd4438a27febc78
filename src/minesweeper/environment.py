"""
Gymnasium environment wrapper for Minesweeper.

Drives a GameEngine through the same pointer intents an interactive
player produces, so headless play follows the exact game rules.
"""
import random
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import BoardConfig
from .engine import GameEngine, Phase
from .render import render_text
from .tile import OBS_HIDDEN, OBS_WRONG_FLAG


# ============================================================================
# Constants
# ============================================================================

REVEAL = 0
FLAG = 1
CHORD = 2
GESTURES = (REVEAL, FLAG, CHORD)

REWARD_SAFE = 1.0
REWARD_WIN = 10.0
REWARD_LOSS = -10.0
REWARD_INVALID = -0.1


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D int8 array of Tile.to_observation() codes, indexed [y, x].

    Actions:
        Discrete action space of size 3 * width * height.
        action // cells selects the gesture (0 reveal, 1 flag, 2 chord)
        and action % cells the tile at (i % width, i // width).

    Rewards:
        - +1 for opening safe cells
        - +10 for winning the game
        - -10 for hitting a mine
        - 0 for toggling a flag
        - -0.1 for an action that changes nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.render_mode = render_mode
        self.engine = GameEngine(self.config, timer_factory=None)
        self._cells = self.config.width * self.config.height

        self.observation_space = spaces.Box(
            low=-2,
            high=OBS_WRONG_FLAG,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(len(GESTURES) * self._cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        rng = random.Random(int(self.np_random.integers(2 ** 32)))
        self.engine = GameEngine(self.config, rng=rng, timer_factory=None)
        self._steps = 0

        return self.engine.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: gesture * cells + y * width + x.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        gesture, x, y = self.decode_action(action)
        self._steps += 1

        reward = self._perform(gesture, x, y)

        observation = self.engine.board.get_observation()
        terminated = self.engine.is_over
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def decode_action(self, action: int) -> Tuple[int, int, int]:
        """Convert flat action index to (gesture, x, y)."""
        gesture, index = divmod(int(action), self._cells)
        return gesture, index % self.config.width, index // self.config.width

    def encode_action(self, gesture: int, x: int, y: int) -> int:
        """Convert (gesture, x, y) to a flat action index."""
        return gesture * self._cells + y * self.config.width + x

    def _perform(self, gesture: int, x: int, y: int) -> float:
        """
        Send the pointer intents for a gesture and score the result.

        Returns:
            Reward value.
        """
        engine = self.engine
        if engine.is_over:
            return REWARD_INVALID

        engine.pointer_enter_tile(x, y)
        if gesture == FLAG:
            before = engine.mines_remaining
            engine.secondary_press()
            return 0.0 if engine.mines_remaining != before else REWARD_INVALID

        opened_before = engine.board.opened_count
        if gesture == REVEAL:
            engine.primary_press()
            engine.primary_release()
        else:
            engine.auxiliary_press()
            engine.auxiliary_release()

        if engine.phase is Phase.LOST:
            return REWARD_LOSS
        if engine.phase is Phase.WON:
            return REWARD_WIN
        if engine.board.opened_count > opened_before:
            return REWARD_SAFE
        return REWARD_INVALID

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        board = self.engine.board
        return {
            "steps": self._steps,
            "revealed": board.opened_count,
            "total_safe": board.safe_cell_count,
            "mines_remaining": board.mines_remaining,
            "game_state": self.engine.phase.name,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return render_text(self.engine)
        if self.render_mode == "human":
            print(render_text(self.engine))
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that can change the game.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if self.engine.is_over:
            return mask

        board = self.engine.board
        obs = board.get_observation().flatten()
        mask[REVEAL * self._cells:(REVEAL + 1) * self._cells] = obs == OBS_HIDDEN
        for tile in board:
            index = board.index(tile.x, tile.y)
            mask[FLAG * self._cells + index] = not tile.opened
            mask[CHORD * self._cells + index] = self._can_chord(tile)
        return mask

    def _can_chord(self, tile) -> bool:
        board = self.engine.board
        if self.engine.phase is not Phase.RUNNING:
            return False
        if not tile.opened or tile.is_mine or tile.value == 0:
            return False
        if board.count_adjacent_flags(tile) != tile.value:
            return False
        return any(n.is_clickable for n in board.iter_neighbors(tile))


# ============================================================================
# Vectorized Environment Factory
# ============================================================================

def make_vec_env(
    n_envs: int = 4,
    config: Optional[BoardConfig] = None,
) -> gym.vector.VectorEnv:
    """
    Create vectorized environment for parallel play.

    Args:
        n_envs: Number of parallel environments.
        config: Board configuration.

    Returns:
        Vectorized environment.
    """
    def make_env() -> MinesweeperEnv:
        return MinesweeperEnv(config=config)

    return gym.vector.SyncVectorEnv([make_env for _ in range(n_envs)])
