"""Notification service: turns notification settings into reminder timers.

Timer keys are `<section>` for section reminders, `<section>-<category>` for category
overrides and `recurring-status` for the periodic recurring task sweep.
"""

import logging
from typing import Callable, List, Optional

from pydantic import BaseModel

from taskflow.engine.due_tasks import (
    DueItem,
    category_notification_title,
    due_today_title,
    find_due_items_for_category,
    find_due_items_for_section,
    format_notification_body,
    section_notification_title,
)
from taskflow.models.notification import NotificationSettings
from taskflow.models.section import SectionId
from taskflow.notifications.notifier import Notifier
from taskflow.notifications.scheduler import NotificationScheduler, TimerInfo
from taskflow.notifications.settings_store import NotificationSettingsStore
from taskflow.services.task_manager import TaskManager

logger = logging.getLogger(__name__)

STATUS_SWEEP_KEY = "recurring-status"


def section_timer_key(section_id: SectionId) -> str:
    return SectionId(section_id).value


def category_timer_key(section_id: SectionId, category: str) -> str:
    return f"{SectionId(section_id).value}-{category}"


class NotificationStatus(BaseModel):
    sleeping: bool
    timers: List[TimerInfo]
    settings: NotificationSettings


class NotificationService:
    """Owns the reminder timers and sends due-task notifications."""

    def __init__(
        self,
        task_manager: TaskManager,
        scheduler: NotificationScheduler,
        notifier: Notifier,
        settings_store: NotificationSettingsStore,
        status_sweep_seconds: Optional[float] = None,
    ):
        self.task_manager = task_manager
        self.scheduler = scheduler
        self.notifier = notifier
        self.settings_store = settings_store
        self.status_sweep_seconds = status_sweep_seconds
        self.settings = NotificationSettings()

    def start(self) -> None:
        """Load saved settings, build the timers and announce what is due today."""
        self.task_manager.refresh_recurring_statuses()
        self.settings = self.settings_store.load()
        self._rebuild()
        self.check_due_tasks_now()

    def get_settings(self) -> NotificationSettings:
        return self.settings

    def apply_settings(self, settings: NotificationSettings) -> None:
        """Persist settings and rebuild every timer from scratch."""
        self.settings_store.save(settings)
        self.settings = settings
        self._rebuild()

    def _rebuild(self) -> None:
        self.scheduler.clear_all()
        if self.status_sweep_seconds:
            self.scheduler.create(STATUS_SWEEP_KEY, self.status_sweep_seconds, self._sweep_recurring_statuses)

        for section_id, config in self.settings.sections.items():
            if not config.enabled:
                continue
            self.scheduler.create(
                section_timer_key(section_id),
                config.interval_seconds,
                self._section_callback(section_id),
            )
            for category, override in config.categories.items():
                if override.enabled:
                    self.scheduler.create(
                        category_timer_key(section_id, category),
                        override.interval_seconds,
                        self._category_callback(section_id, category),
                    )
        logger.info(f"Notification timers rebuilt: {', '.join(self.scheduler.keys()) or 'none'}")

    def _section_callback(self, section_id: SectionId) -> Callable[[], None]:
        def check_section() -> None:
            section = self.task_manager.get_section_data(section_id)
            items = find_due_items_for_section(section, self.settings.sections.get(section_id), self.task_manager.today())
            if items:
                self._send(section_notification_title(section_id, len(items)), items)

        return check_section

    def _category_callback(self, section_id: SectionId, category: str) -> Callable[[], None]:
        def check_category() -> None:
            section = self.task_manager.get_section_data(section_id)
            items = find_due_items_for_category(section, category, self.task_manager.today())
            if items:
                self._send(category_notification_title(section_id, category, len(items)), items)

        return check_category

    def _sweep_recurring_statuses(self) -> None:
        self.task_manager.refresh_recurring_statuses()

    def _send(self, title: str, items: List[DueItem]) -> None:
        self.show_notification(title, format_notification_body(items))

    def show_notification(self, title: str, body: str) -> None:
        self.notifier.notify(title, body)

    def check_due_tasks_now(self) -> List[DueItem]:
        """Notify about everything due today across all sections."""
        items = self.task_manager.get_due_items()
        if items:
            self._send(due_today_title(len(items)), items)
        return items

    def suspend(self) -> None:
        self.scheduler.suspend()

    def resume(self) -> int:
        return self.scheduler.resume()

    def trigger_check(self) -> int:
        """Run the catch-up pass on demand."""
        return self.scheduler.catch_up()

    def status(self) -> NotificationStatus:
        scheduler_status = self.scheduler.status()
        return NotificationStatus(
            sleeping=scheduler_status.sleeping,
            timers=scheduler_status.timers,
            settings=self.settings,
        )

    def shutdown(self) -> None:
        self.scheduler.shutdown()
