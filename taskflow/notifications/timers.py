"""Timer backends driving the notification scheduler."""

import logging
from abc import ABC, abstractmethod
from typing import Callable

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


class TimerBackend(ABC):
    """Runs a callback repeatedly every `interval_seconds` under a key."""

    @abstractmethod
    def schedule(self, key: str, interval_seconds: float, callback: Callable[[], None]) -> None:
        ...

    @abstractmethod
    def cancel(self, key: str) -> None:
        ...

    def shutdown(self) -> None:
        ...


class APSchedulerTimerBackend(TimerBackend):
    """BackgroundScheduler with a single worker, so backend ticks run one at a time."""

    def __init__(self, scheduler: BackgroundScheduler = None):
        self.scheduler = scheduler or BackgroundScheduler(
            executors={"default": ThreadPoolExecutor(1)},
            job_defaults={"coalesce": True, "max_instances": 1},
        )

    def _ensure_started(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Notification timer scheduler started")

    def schedule(self, key: str, interval_seconds: float, callback: Callable[[], None]) -> None:
        self._ensure_started()
        self.scheduler.add_job(
            callback,
            IntervalTrigger(seconds=interval_seconds),
            id=key,
            replace_existing=True,
        )

    def cancel(self, key: str) -> None:
        try:
            self.scheduler.remove_job(key)
        except JobLookupError:
            pass

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Notification timer scheduler stopped")
