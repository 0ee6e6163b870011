"""Due-task reminders for taskflow."""

from taskflow.notifications.notifier import LogNotifier, Notification, Notifier
from taskflow.notifications.scheduler import NotificationScheduler
from taskflow.notifications.service import NotificationService
from taskflow.notifications.settings_store import NotificationSettingsStore
from taskflow.notifications.timers import APSchedulerTimerBackend, TimerBackend

__all__ = [
    "APSchedulerTimerBackend",
    "LogNotifier",
    "Notification",
    "NotificationScheduler",
    "NotificationService",
    "NotificationSettingsStore",
    "Notifier",
    "TimerBackend",
]
