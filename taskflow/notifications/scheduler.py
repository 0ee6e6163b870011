"""Named repeating reminder timers with sleep/wake handling.

Each timer runs its callback immediately on creation and then every interval. While the
system is suspended ticks are skipped; on resume every timer whose interval elapsed while
asleep runs exactly once (missed ticks are coalesced, never replayed).

Callbacks run one at a time: immediate and catch-up runs on the caller's thread wait
for any tick running on the backend's worker, and vice versa.
"""

import logging
import threading
import time
from typing import Callable, Dict, List

from pydantic import BaseModel

from taskflow.notifications.timers import TimerBackend

logger = logging.getLogger(__name__)


class TimerInfo(BaseModel):
    key: str
    interval_seconds: float
    last_run: float


class SchedulerStatus(BaseModel):
    sleeping: bool
    timers: List[TimerInfo]


class _Timer:
    __slots__ = ("key", "interval_seconds", "callback", "last_run")

    def __init__(self, key: str, interval_seconds: float, callback: Callable[[], None], last_run: float):
        self.key = key
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.last_run = last_run


class NotificationScheduler:
    """Keeps named timers on a backend and tracks when each last ran."""

    def __init__(self, backend: TimerBackend, clock: Callable[[], float] = time.time):
        self.backend = backend
        self.clock = clock
        self.sleeping = False
        self._timers: Dict[str, _Timer] = {}
        self._lock = threading.RLock()
        # Held for every callback run, whichever thread starts it
        self._run_lock = threading.Lock()

    def create(self, key: str, interval_seconds: float, callback: Callable[[], None]) -> None:
        """(Re)create the timer `key`, running it once right away unless asleep."""
        if interval_seconds <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval_seconds}")
        with self._lock:
            self.clear(key)
            timer = _Timer(key, interval_seconds, callback, self.clock())
            self._timers[key] = timer
            self.backend.schedule(key, interval_seconds, lambda: self._tick(key))
            sleeping = self.sleeping
        logger.debug(f"Created timer {key} every {interval_seconds}s")
        if not sleeping:
            self._run(timer)

    def _tick(self, key: str) -> None:
        with self._lock:
            timer = self._timers.get(key)
            if timer is None or self.sleeping:
                return
        self._run(timer)

    def _run(self, timer: _Timer) -> None:
        with self._run_lock:
            with self._lock:
                timer.last_run = self.clock()
            try:
                timer.callback()
            except Exception:
                logger.exception(f"Notification timer {timer.key} failed")

    def clear(self, key: str) -> bool:
        with self._lock:
            timer = self._timers.pop(key, None)
            if timer is None:
                return False
            self.backend.cancel(key)
            return True

    def clear_all(self) -> None:
        with self._lock:
            for key in list(self._timers):
                self.clear(key)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._timers)

    def suspend(self) -> None:
        with self._lock:
            self.sleeping = True
        logger.info("System suspended; reminders paused")

    def resume(self) -> int:
        with self._lock:
            self.sleeping = False
        logger.info("System resumed; catching up on reminders")
        return self.catch_up()

    def catch_up(self) -> int:
        """Run each timer whose interval has fully elapsed since it last ran, once."""
        now = self.clock()
        with self._lock:
            due = [t for t in self._timers.values() if now - t.last_run >= t.interval_seconds]
        for timer in due:
            self._run(timer)
        if due:
            logger.debug(f"Caught up {len(due)} timer(s)")
        return len(due)

    def status(self) -> SchedulerStatus:
        with self._lock:
            return SchedulerStatus(
                sleeping=self.sleeping,
                timers=[
                    TimerInfo(key=t.key, interval_seconds=t.interval_seconds, last_run=t.last_run)
                    for t in self._timers.values()
                ],
            )

    def shutdown(self) -> None:
        self.clear_all()
        self.backend.shutdown()
