"""Next-occurrence arithmetic and status transitions for recurring tasks."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List

from dateutil.relativedelta import relativedelta

from taskflow.models.recurring_task import RecurrenceUnit, RecurringTask, coerce_recurrence_value
from taskflow.models.task import TaskStatus

logger = logging.getLogger(__name__)


def _step(value: int, unit: RecurrenceUnit):
    if unit is RecurrenceUnit.MINUTES:
        return timedelta(minutes=value)
    if unit is RecurrenceUnit.HOURS:
        return timedelta(hours=value)
    if unit is RecurrenceUnit.DAYS:
        return timedelta(days=value)
    if unit is RecurrenceUnit.WEEKS:
        return timedelta(days=7 * value)
    if unit is RecurrenceUnit.MONTHS:
        # Calendar-month increment; a day-of-month past the end of the target
        # month clamps to its last day (Jan 31 + 1 month -> Feb 28/29).
        return relativedelta(months=value)
    raise ValueError(f"Unsupported recurrence unit: {unit!r}")


def compute_next_occurrence(start: datetime, value: int, unit: RecurrenceUnit) -> datetime:
    """Return start + value x unit.

    Args:
        start: First occurrence
        value: Recurrence quantity (coerced to a positive integer)
        unit: Recurrence unit

    Returns:
        Next occurrence timestamp
    """
    return start + _step(coerce_recurrence_value(value), RecurrenceUnit(unit))


def initial_recurring_status(start: datetime, today: date) -> TaskStatus:
    """Status of a recurring task stored for the first time."""
    return TaskStatus.IN_PROGRESS if start.date() <= today else TaskStatus.TODO


def should_activate(task: RecurringTask, today: date) -> bool:
    """Whether a todo recurring task has reached its start date.

    In-progress and completed tasks never move back to todo.
    """
    return task.status is TaskStatus.TODO and task.start_date.date() <= today


def apply_status_transitions(tasks: Iterable[RecurringTask], today: date) -> List[RecurringTask]:
    """Return copies of the tasks that flip todo -> in-progress as of `today`."""
    activated: List[RecurringTask] = []
    for task in tasks:
        if should_activate(task, today):
            activated.append(task.model_copy(update={"status": TaskStatus.IN_PROGRESS}))
    if activated:
        logger.debug(f"{len(activated)} recurring task(s) reached their start date")
    return activated
