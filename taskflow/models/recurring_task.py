"""Recurring task data model for taskflow."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from taskflow.models.constants import DEFAULT_RECURRENCE_VALUE
from taskflow.models.section import SectionId
from taskflow.models.task import TaskStatus


class RecurrenceUnit(str, Enum):
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


def coerce_recurrence_value(value: Any) -> int:
    """Return a positive integer recurrence quantity, falling back to 1.

    Invalid input is never rejected: non-numeric, fractional and non-positive values all become 1.
    """
    if isinstance(value, bool):
        return DEFAULT_RECURRENCE_VALUE
    if isinstance(value, float):
        if not value.is_integer():
            return DEFAULT_RECURRENCE_VALUE
        value = int(value)
    try:
        number = int(value)
    except (TypeError, ValueError):
        return DEFAULT_RECURRENCE_VALUE
    return number if number >= 1 else DEFAULT_RECURRENCE_VALUE


def as_datetime(value: Any) -> Any:
    """Promote a date (or date-only ISO string) to midnight of that day."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str) and len(value) == 10:
        try:
            return datetime.combine(date.fromisoformat(value), datetime.min.time())
        except ValueError:
            return value
    return value


class RecurringTask(BaseModel):
    """Task that repeats every `recurrence_value` x `recurrence_unit` from `start_date`."""

    id: str = Field(..., description="Unique recurring task identifier (UUID v4)")
    section_id: SectionId = Field(..., description="Section the task belongs to")
    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field("", description="Task description")
    status: TaskStatus = Field(TaskStatus.TODO, description="Task status")
    category: str = Field("", description="Category name")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    start_date: datetime = Field(..., description="First occurrence (date-only input means midnight)")
    end_date: Optional[datetime] = Field(None, description="Optional end of the recurrence")
    recurrence_value: int = Field(DEFAULT_RECURRENCE_VALUE, description="Every N units (coerced to >= 1)")
    recurrence_unit: RecurrenceUnit = Field(RecurrenceUnit.DAYS, description="Recurrence unit")
    next_occurrence: datetime = Field(..., description="Derived; recomputed whenever the task is saved")

    @field_validator("recurrence_value", mode="before")
    @classmethod
    def _coerce_recurrence_value(cls, v):
        return coerce_recurrence_value(v)

    @field_validator("start_date", "end_date", "next_occurrence", mode="before")
    @classmethod
    def _date_only_to_datetime(cls, v):
        return as_datetime(v)
