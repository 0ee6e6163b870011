"""Data models for taskflow."""

from taskflow.models.section import SectionId, TASK_SECTIONS
from taskflow.models.task import Task, TaskStatus, SubGoal, compute_progress
from taskflow.models.recurring_task import RecurringTask, RecurrenceUnit
from taskflow.models.blog_entry import BlogEntry, BlogStatus
from taskflow.models.section_data import SectionData
from taskflow.models.notification import (
    CategoryNotificationConfig,
    IntervalUnit,
    NotificationSettings,
    SectionNotificationConfig,
)

__all__ = [
    "SectionId",
    "TASK_SECTIONS",
    "Task",
    "TaskStatus",
    "SubGoal",
    "compute_progress",
    "RecurringTask",
    "RecurrenceUnit",
    "BlogEntry",
    "BlogStatus",
    "SectionData",
    "CategoryNotificationConfig",
    "IntervalUnit",
    "NotificationSettings",
    "SectionNotificationConfig",
]
