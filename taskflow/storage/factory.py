"""Storage backend selection."""

import logging

from taskflow.config import AppConfig
from taskflow.storage.base import TaskStorage
from taskflow.storage.json_store import JsonFileStorage
from taskflow.storage.memory import InMemoryStorage
from taskflow.storage.resilient import ResilientStorage
from taskflow.storage.sql_store import SqlStorage

logger = logging.getLogger(__name__)


def build_primary_storage(config: AppConfig) -> TaskStorage:
    if config.storage_backend == "memory":
        return InMemoryStorage()
    if config.storage_backend == "sqlite":
        config.data_dir.mkdir(parents=True, exist_ok=True)
        return SqlStorage.from_url(config.resolved_database_url)
    return JsonFileStorage(config.resolved_json_path)


def build_storage(config: AppConfig) -> TaskStorage:
    """Primary backend chosen by configuration, wrapped with the in-memory fallback."""
    primary = build_primary_storage(config)
    logger.info(f"Using {config.storage_backend} storage")
    if isinstance(primary, InMemoryStorage):
        return primary
    return ResilientStorage(primary)
