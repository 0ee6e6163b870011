"""Notification configuration models for taskflow."""

from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field

from taskflow.models.section import SectionId


class IntervalUnit(str, Enum):
    MINUTES = "minutes"
    HOURS = "hours"

    @property
    def seconds(self) -> int:
        return _UNIT_SECONDS[self]


_UNIT_SECONDS = {
    IntervalUnit.MINUTES: 60,
    IntervalUnit.HOURS: 3600,
}


class CategoryNotificationConfig(BaseModel):
    """Per-category override; takes priority over its section when enabled."""

    enabled: bool = False
    interval: int = Field(30, ge=1, description="Every N units")
    unit: IntervalUnit = IntervalUnit.MINUTES

    @property
    def interval_seconds(self) -> int:
        return self.interval * self.unit.seconds


class SectionNotificationConfig(CategoryNotificationConfig):
    """Section-level reminder settings with optional category overrides."""

    categories: Dict[str, CategoryNotificationConfig] = Field(default_factory=dict)

    def has_category_override(self, category: str) -> bool:
        """Whether `category` has its own enabled reminder."""
        override = self.categories.get(category)
        return override is not None and override.enabled


class NotificationSettings(BaseModel):
    """Full settings object; saving it rebuilds every reminder timer."""

    sections: Dict[SectionId, SectionNotificationConfig] = Field(default_factory=dict)
