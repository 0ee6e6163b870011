"""FastAPI dependencies: process-wide singletons built from configuration."""

import logging
from functools import lru_cache

from taskflow.config import AppConfig, get_config as load_config
from taskflow.notifications.notifier import LogNotifier
from taskflow.notifications.scheduler import NotificationScheduler
from taskflow.notifications.service import NotificationService
from taskflow.notifications.settings_store import NotificationSettingsStore
from taskflow.notifications.timers import APSchedulerTimerBackend
from taskflow.services.task_manager import TaskManager
from taskflow.storage.factory import build_storage

logger = logging.getLogger(__name__)


@lru_cache
def get_config() -> AppConfig:
    return load_config()


@lru_cache
def get_task_manager() -> TaskManager:
    return TaskManager(build_storage(get_config()))


@lru_cache
def get_notification_service() -> NotificationService:
    config = get_config()
    return NotificationService(
        task_manager=get_task_manager(),
        scheduler=NotificationScheduler(APSchedulerTimerBackend()),
        notifier=LogNotifier(),
        settings_store=NotificationSettingsStore(config.resolved_notifications_path),
        status_sweep_seconds=config.status_sweep_minutes * 60,
    )
