"""Notification settings persisted to a JSON file."""

import logging
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from taskflow.models.notification import NotificationSettings

logger = logging.getLogger(__name__)


class NotificationSettingsStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> NotificationSettings:
        """Stored settings, or empty settings when the file is missing or unreadable."""
        if not self.path.exists():
            return NotificationSettings()
        try:
            return NotificationSettings.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load notification settings from {self.path}: {type(e).__name__}: {str(e)}")
            return NotificationSettings()

    def save(self, settings: NotificationSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
