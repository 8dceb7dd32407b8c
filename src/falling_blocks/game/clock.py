from __future__ import annotations

from typing import Callable, Optional, Protocol

from .rules import ScoringRules


TickCallback = Callable[[], None]


class Timer(Protocol):
    def start(self, period_ms: int, callback: TickCallback) -> None: ...

    def cancel(self) -> None: ...


class ManualTimer:
    """Timer driven by explicit `advance` calls instead of wall-clock time."""

    def __init__(self) -> None:
        self.period_ms: Optional[int] = None
        self.starts = 0
        self._callback: Optional[TickCallback] = None
        self._elapsed = 0

    @property
    def active(self) -> bool:
        return self.period_ms is not None

    def start(self, period_ms: int, callback: TickCallback) -> None:
        self.period_ms = int(period_ms)
        self._callback = callback
        self._elapsed = 0
        self.starts += 1

    def cancel(self) -> None:
        self.period_ms = None
        self._callback = None
        self._elapsed = 0

    def advance(self, ms: int) -> int:
        fired = 0
        while self.period_ms is not None and ms > 0:
            step = min(ms, self.period_ms - self._elapsed)
            self._elapsed += step
            ms -= step
            if self._elapsed >= self.period_ms:
                self._elapsed = 0
                fired += 1
                # The callback may restart or cancel this timer.
                assert self._callback is not None
                self._callback()
        return fired


class GameClock:
    """Gravity clock whose period follows the current level."""

    def __init__(self, timer: Timer, on_tick: TickCallback, rules: Optional[ScoringRules] = None) -> None:
        self.timer = timer
        self.on_tick = on_tick
        self.rules = rules or ScoringRules()
        self._period_ms: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._period_ms is not None

    @property
    def period_ms(self) -> Optional[int]:
        return self._period_ms

    def start(self, level: int) -> None:
        self.stop()
        self._period_ms = self.rules.gravity_interval_ms(level)
        self.timer.start(self._period_ms, self._tick)

    def stop(self) -> None:
        if self._period_ms is None:
            return
        self.timer.cancel()
        self._period_ms = None

    def _tick(self) -> None:
        if self._period_ms is not None:
            self.on_tick()
