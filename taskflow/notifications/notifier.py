"""Notification delivery."""

import logging
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime
from typing import Deque, List

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    title: str
    body: str
    sent_at: datetime = Field(default_factory=datetime.now)


class Notifier(ABC):
    @abstractmethod
    def notify(self, title: str, body: str) -> None:
        ...


class LogNotifier(Notifier):
    """Writes notifications to the log and keeps the most recent ones."""

    def __init__(self, history_size: int = 50):
        self._history: Deque[Notification] = deque(maxlen=history_size)

    def notify(self, title: str, body: str) -> None:
        self._history.append(Notification(title=title, body=body))
        logger.info(f"Notification: {title}\n{body}")

    @property
    def history(self) -> List[Notification]:
        return list(self._history)
