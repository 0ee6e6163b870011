"""Recurrence engine for taskflow."""

from taskflow.models.recurring_task import coerce_recurrence_value
from taskflow.recurrence.next_occurrence import (
    apply_status_transitions,
    compute_next_occurrence,
    initial_recurring_status,
    should_activate,
)

__all__ = [
    "apply_status_transitions",
    "coerce_recurrence_value",
    "compute_next_occurrence",
    "initial_recurring_status",
    "should_activate",
]
