from __future__ import annotations

import threading
import time
from typing import Any, Callable, Optional, Protocol

from .scoring import seconds_remaining


class TimerHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


class RoundClock:
    """Cancelable countdown for one round.

    Ticks roughly every ``interval_sec`` with the seconds left, then fires
    ``on_expire`` once when nothing is left. Remaining time is always derived
    from the wall clock, so late ticks do not drift the countdown.
    No callback runs after ``cancel()``.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        duration_sec: int,
        on_tick: Callable[["RoundClock", int], None],
        on_expire: Callable[["RoundClock"], None],
        *,
        interval_sec: float = 1.0,
        time_fn: Callable[[], float] = time.time,
        lock: Optional[Any] = None,
    ) -> None:
        self._scheduler = scheduler
        self.duration_sec = duration_sec
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._interval_sec = interval_sec
        self._time_fn = time_fn
        # Shared with the owning room so ticks never interleave with its handlers.
        self._lock = lock if lock is not None else threading.RLock()
        self._handle: Optional[TimerHandle] = None
        self.started_at: Optional[float] = None
        self.running = False

    def start(self) -> None:
        self.cancel()
        self.started_at = self._time_fn()
        self.running = True
        self._schedule()

    def remaining(self) -> int:
        if self.started_at is None:
            return self.duration_sec
        return seconds_remaining(self.duration_sec, self.started_at, self._time_fn())

    def cancel(self) -> None:
        self.running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(self._interval_sec, self._tick)

    def _tick(self) -> None:
        with self._lock:
            if not self.running:
                return
            self._handle = None

            remaining = self.remaining()
            if remaining <= 0:
                self.running = False
                self._on_expire(self)
                return

            self._on_tick(self, remaining)
            # on_tick may have canceled us.
            if self.running:
                self._schedule()
