from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Deque, Optional, Protocol

import numpy as np

from .clock import GameClock, ManualTimer, Timer
from .controller import PieceController
from .grid import Board
from .pieces import ActivePiece, PieceKind
from .rules import ScoringRules
from .storage import HighScoreStore, MemoryHighScoreStore

logger = logging.getLogger(__name__)


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE_CW = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    TOGGLE_PAUSE = 5
    RESET = 6
    GRAVITY = 7


class Phase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0
    # Blocked soft drop is a no-op unless this is set, in which case it lands.
    soft_drop_locks: bool = False


@dataclass
class SessionState:
    score: int = 0
    lines: int = 0
    level: int = 1
    high_score: int = 0
    phase: Phase = Phase.IDLE


class Renderer(Protocol):
    def render(
        self,
        board: Board,
        active: Optional[ActivePiece],
        next_kind: PieceKind,
        state: SessionState,
    ) -> None: ...


class NullRenderer:
    def render(self, board, active, next_kind, state) -> None:
        pass


_MOVES = {
    Command.MOVE_LEFT: (-1, 0),
    Command.MOVE_RIGHT: (1, 0),
}


class GameSession:
    """Falling-block game state machine.

    Every command goes through `post`, which applies commands one at a time
    in arrival order. Commands posted while another one is being applied
    (for instance a gravity tick fired from inside a clock restart) wait in
    the queue, so no transition sees a half-updated board or score.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        store: Optional[HighScoreStore] = None,
        renderer: Optional[Renderer] = None,
        timer: Optional[Timer] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.store = store if store is not None else MemoryHighScoreStore()
        self.renderer = renderer or NullRenderer()
        self.rng = random.Random(self.config.random_seed)
        self.board = Board(self.config.width, self.config.height)
        self.controller = PieceController(self.config.width, self.rng, self.config.spawn_y)
        self.clock = GameClock(timer or ManualTimer(), self._on_tick, self.rules)
        self.state = SessionState(high_score=self._load_high_score())
        self.active: Optional[ActivePiece] = None
        self.next_kind: PieceKind = self.controller.random_kind()
        self._queue: Deque[Command] = deque()
        self._dispatching = False
        self._render()

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def start(self) -> None:
        if self.state.phase is Phase.IDLE:
            self.post(Command.TOGGLE_PAUSE)

    def post(self, command: Command) -> None:
        self._queue.append(Command(command))
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._queue:
                if self._apply(self._queue.popleft()):
                    self._render()
        except BaseException:
            # Commands queued behind a failed one are not replayed later.
            self._queue.clear()
            raise
        finally:
            self._dispatching = False

    def _on_tick(self) -> None:
        self.post(Command.GRAVITY)

    def _apply(self, command: Command) -> bool:
        if command is Command.RESET:
            self._reset()
            return True
        phase = self.state.phase
        if phase is Phase.GAME_OVER:
            logger.debug("ignoring %s after game over", command.name)
            return False
        if command is Command.TOGGLE_PAUSE:
            if phase is Phase.RUNNING:
                self._pause()
            else:
                self._resume()
            return True
        if phase is not Phase.RUNNING or self.active is None:
            logger.debug("ignoring %s while %s", command.name, phase.value)
            return False

        if command in _MOVES:
            dx, dy = _MOVES[command]
            result = self.controller.move(self.active, dx, dy, self.board)
            self.active = result.piece
            return result.accepted
        if command is Command.ROTATE_CW:
            result = self.controller.rotate(self.active, self.board)
            self.active = result.piece
            return result.accepted
        if command is Command.HARD_DROP:
            target = self.controller.hard_drop_target(self.active, self.board)
            if target == self.active.y:
                return False
            self.active = self.active.moved(0, target - self.active.y)
            return True
        if command is Command.SOFT_DROP:
            return self._step_down(lock_when_blocked=self.config.soft_drop_locks)
        return self._step_down(lock_when_blocked=True)

    def _resume(self) -> None:
        self.state.phase = Phase.RUNNING
        if self.active is None:
            if not self._spawn_next():
                return
        self.clock.start(self.state.level)
        logger.info("running at level %d", self.state.level)

    def _pause(self) -> None:
        self.clock.stop()
        self.state.phase = Phase.PAUSED
        logger.info("paused")

    def _reset(self) -> None:
        self.clock.stop()
        self.board.reset()
        self.state = SessionState(high_score=self.state.high_score)
        self.active = None
        self.next_kind = self.controller.random_kind()
        logger.info("session reset")

    def _step_down(self, lock_when_blocked: bool) -> bool:
        assert self.active is not None
        result = self.controller.move(self.active, 0, 1, self.board)
        if result.accepted:
            self.active = result.piece
            return True
        if not lock_when_blocked:
            return False
        self._land()
        return True

    def _land(self) -> None:
        assert self.active is not None
        self.board.merge(self.active)
        self.active = None
        rows = self.board.scan_full_rows()
        self.board.clear_rows(rows)
        cleared = len(rows)
        if cleared:
            self.state.score += self.rules.score_for_lines(cleared)
            self.state.lines += cleared
            level = self.rules.level_for_lines(self.state.lines)
            if level != self.state.level:
                self.state.level = level
                logger.info("level %d reached", level)
                self.clock.start(level)
        self._spawn_next()

    def _spawn_next(self) -> bool:
        piece = self.controller.spawn(self.next_kind)
        if not self.controller.fits(piece, self.board):
            self._game_over()
            return False
        self.active = piece
        self.next_kind = self.controller.random_kind()
        return True

    def _game_over(self) -> None:
        self.clock.stop()
        self.active = None
        self.state.phase = Phase.GAME_OVER
        logger.info("game over: score=%d lines=%d", self.state.score, self.state.lines)
        if self.state.score > self.state.high_score:
            self.state.high_score = self.state.score
            try:
                self.store.set(self.state.high_score)
            except Exception:
                logger.warning("could not persist high score %d", self.state.high_score, exc_info=True)

    def _load_high_score(self) -> int:
        try:
            return max(0, int(self.store.get()))
        except Exception:
            logger.warning("high score store unavailable, starting from 0", exc_info=True)
            return 0

    def _render(self) -> None:
        self.renderer.render(self.board, self.active, self.next_kind, self.state)

    def snapshot(self) -> np.ndarray:
        return self.board.snapshot(overlay=self.active)
