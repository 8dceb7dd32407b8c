from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, Optional

import pygame

from falling_blocks.game import Command, GameConfig, GameSession, JsonHighScoreStore
from falling_blocks.game.clock import TickCallback
from .renderer import Renderer, window_size

logger = logging.getLogger(__name__)

GRAVITY_EVENT = pygame.USEREVENT + 1

KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_UP: Command.ROTATE_CW,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_SPACE: Command.HARD_DROP,
    pygame.K_p: Command.TOGGLE_PAUSE,
    pygame.K_r: Command.RESET,
    pygame.K_RETURN: Command.RESET,
}


class PygameTimer:
    """Gravity timer backed by a repeating pygame user event."""

    def __init__(self, event_type: int = GRAVITY_EVENT) -> None:
        self.event_type = event_type
        self._callback: Optional[TickCallback] = None

    def start(self, period_ms: int, callback: TickCallback) -> None:
        self._callback = callback
        pygame.time.set_timer(self.event_type, int(period_ms))

    def cancel(self) -> None:
        pygame.time.set_timer(self.event_type, 0)
        # Drop ticks that were queued before the timer stopped.
        pygame.event.clear(self.event_type)
        self._callback = None

    def handle(self, event: pygame.event.Event) -> bool:
        if event.type != self.event_type:
            return False
        if self._callback is not None:
            self._callback()
        return True


def default_high_score_path() -> Path:
    return Path.home() / ".falling_blocks" / "high_score.json"


def run(config: Optional[GameConfig] = None, high_score_file: Optional[Path] = None, cell_size: int = 28) -> None:
    config = config or GameConfig()
    pygame.init()
    try:
        clock = pygame.time.Clock()
        screen = pygame.display.set_mode(window_size(config.width, config.height, cell_size))
        pygame.display.set_caption("Falling Blocks")

        timer = PygameTimer()
        session = GameSession(
            config,
            store=JsonHighScoreStore(high_score_file or default_high_score_path()),
            renderer=Renderer(screen, cell_size=cell_size),
            timer=timer,
        )
        logger.info("high score %d", session.state.high_score)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif timer.handle(event):
                    continue
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        command = KEY_TO_COMMAND.get(event.key)
                        if command is not None:
                            session.post(command)
            clock.tick(60)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--high-score-file", type=Path, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--soft-drop-locks", action="store_true")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s - %(levelname)s - %(message)s")
    config = GameConfig(random_seed=args.seed, soft_drop_locks=args.soft_drop_locks)
    run(config, args.high_score_file, args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
