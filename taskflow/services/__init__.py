"""Application services for taskflow."""

from taskflow.services.task_manager import TaskManager

__all__ = ["TaskManager"]
