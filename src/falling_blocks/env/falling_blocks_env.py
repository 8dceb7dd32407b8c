from __future__ import annotations

import dataclasses
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import (
    COLOR_RGB,
    Color,
    Command,
    GameConfig,
    GameSession,
    HighScoreStore,
    MemoryHighScoreStore,
    Phase,
)


# Discrete action index -> session command; None only lets gravity act.
ACTIONS: Tuple[Optional[Command], ...] = (
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
    Command.ROTATE_CW,
    Command.SOFT_DROP,
    Command.HARD_DROP,
    None,
)


class FallingBlocksEnv(gym.Env):
    """Each step applies one player command followed by one gravity step."""

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10000, store: Optional[HighScoreStore] = None) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.store = store if store is not None else MemoryHighScoreStore()
        self.session = GameSession(self.config, store=self.store)
        self._steps = 0

        n = len(Color)
        self.observation_space = spaces.Box(
            low=-n, high=n, shape=(self.config.height, self.config.width), dtype=np.int8
        )
        self.action_space = spaces.Discrete(len(ACTIONS))

    def _get_info(self) -> Dict[str, Any]:
        state = self.session.state
        return {
            "score": state.score,
            "lines": state.lines,
            "level": state.level,
            "high_score": state.high_score,
            "next_kind": int(self.session.next_kind),
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        # Piece order follows the env seed so episodes are reproducible.
        config = dataclasses.replace(self.config, random_seed=int(self.np_random.integers(0, 2**31 - 1)))
        self.session = GameSession(config, store=self.store)
        self.session.start()
        self._steps = 0
        return self.session.snapshot(), self._get_info()

    def step(self, action: int):
        command = ACTIONS[int(action)]
        score_before = self.session.state.score
        if command is not None:
            self.session.post(command)
        self.session.post(Command.GRAVITY)
        self._steps += 1

        terminated = self.session.phase is Phase.GAME_OVER
        truncated = self._steps >= self.max_episode_steps
        reward = float(self.session.state.score - score_before)
        return self.session.snapshot(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self.session.snapshot()
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        img[:, :] = (30, 30, 36)
        for y in range(h):
            for x in range(w):
                v = int(grid[y, x])
                if v:
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = COLOR_RGB[Color(abs(v))]
        return img

    def close(self) -> None:
        pass
