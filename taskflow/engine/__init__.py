"""Due-task detection and analytics for taskflow."""

from taskflow.engine.due_tasks import (
    DueItem,
    DueItemKind,
    find_all_due_items,
    find_due_items,
    find_due_items_for_category,
    find_due_items_for_section,
    format_notification_body,
)
from taskflow.engine.analytics import compute_blog_analytics, compute_task_analytics

__all__ = [
    "DueItem",
    "DueItemKind",
    "find_all_due_items",
    "find_due_items",
    "find_due_items_for_category",
    "find_due_items_for_section",
    "format_notification_body",
    "compute_blog_analytics",
    "compute_task_analytics",
]
