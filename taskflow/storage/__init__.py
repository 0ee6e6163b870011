"""Persistence backends for taskflow."""

from taskflow.storage.base import TaskStorage
from taskflow.storage.factory import build_storage
from taskflow.storage.json_store import JsonFileStorage
from taskflow.storage.memory import InMemoryStorage
from taskflow.storage.resilient import ResilientStorage
from taskflow.storage.sql_store import SqlStorage

__all__ = [
    "TaskStorage",
    "InMemoryStorage",
    "JsonFileStorage",
    "SqlStorage",
    "ResilientStorage",
    "build_storage",
]
