#!/usr/bin/env python3
"""Watch a random clicker play Minesweeper."""
import time
import os
import sys
from pathlib import Path
from typing import Optional

import numpy as np

# Add src to path so the script runs from a checkout
sys.path.insert(0, str(Path(__file__).parent / "src"))

from minesweeper import BoardConfig, MinesweeperEnv


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(
    delay: float = 0.3,
    games: int = 5,
    config: Optional[BoardConfig] = None,
    seed: Optional[int] = None,
):
    """Run demo games, revealing a random hidden tile each move."""
    config = config or BoardConfig()
    env = MinesweeperEnv(config=config, render_mode="ansi")
    rng = np.random.default_rng(seed)
    cells = config.width * config.height

    print(f"Board: {config.width}x{config.height} with {config.num_mines} mines")
    wins = 0

    for game in range(games):
        env.reset(seed=None if seed is None else seed + game)

        clear_screen()
        print(f"=== Game {game + 1}/{games} ===")
        print(f"Wins so far: {wins}\n")
        print(env.render())
        time.sleep(delay)

        done = False
        step = 0

        while not done:
            # Reveals only: the first `cells` actions
            valid = np.flatnonzero(env.get_action_mask()[:cells])
            action = int(rng.choice(valid))
            _, x, y = env.decode_action(action)

            _, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            step += 1

            clear_screen()
            print(f"=== Game {game + 1}/{games} | Step {step} ===")
            print(f"Wins so far: {wins}")
            print(f"Last move: ({x}, {y})\n")
            print(env.render())

            if done:
                if info.get("game_state") == "WON":
                    wins += 1
                    print("\n*** WIN! ***")
                else:
                    print("\n*** LOST (hit mine) ***")

            time.sleep(delay)

        time.sleep(1.0)  # Pause between games

    print(f"\n=== Final: {wins}/{games} wins ({100*wins/games:.0f}%) ===")
