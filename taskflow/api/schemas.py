"""Request models for the taskflow HTTP API."""

from datetime import date, datetime, time
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from taskflow.models.blog_entry import BlogStatus
from taskflow.models.recurring_task import RecurrenceUnit, as_datetime
from taskflow.models.section import SectionId
from taskflow.models.task import TaskStatus


class SubGoalInput(BaseModel):
    """Sub-goal carried inside a task create/update request."""
    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    due_date: date
    category: str = ""


class TaskCreate(BaseModel):
    """Request model for creating a task."""
    section_id: SectionId
    title: str = Field(..., min_length=1, description="Task title")
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    due_date: date
    category: str = ""
    class_start_date: Optional[date] = None
    class_from_time: Optional[time] = None
    class_to_time: Optional[time] = None
    sub_goals: List[SubGoalInput] = Field(default_factory=list)


class TaskUpdate(BaseModel):
    """Request model for updating a task (all fields optional)."""
    section_id: Optional[SectionId] = None
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = None
    category: Optional[str] = None
    class_start_date: Optional[date] = None
    class_from_time: Optional[time] = None
    class_to_time: Optional[time] = None
    sub_goals: Optional[List[SubGoalInput]] = None


class StatusUpdate(BaseModel):
    status: TaskStatus


class BlogStatusUpdate(BaseModel):
    status: BlogStatus


class RecurringTaskCreate(BaseModel):
    """Request model for creating a recurring task."""
    section_id: SectionId
    title: str = Field(..., min_length=1)
    description: str = ""
    category: str = ""
    start_date: datetime
    end_date: Optional[datetime] = None
    recurrence_value: Any = Field(1, description="Every N units; invalid values fall back to 1")
    recurrence_unit: RecurrenceUnit = RecurrenceUnit.DAYS

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _date_only_to_datetime(cls, v):
        return as_datetime(v)


class RecurringTaskUpdate(BaseModel):
    section_id: Optional[SectionId] = None
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    recurrence_value: Optional[Any] = None
    recurrence_unit: Optional[RecurrenceUnit] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _date_only_to_datetime(cls, v):
        return as_datetime(v)


class SubGoalCreate(BaseModel):
    task_id: str
    title: str = Field(..., min_length=1)
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    due_date: date
    category: str = ""


class CategoryCreate(BaseModel):
    section_id: SectionId
    name: str = Field(..., min_length=1)


class BlogEntryCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    status: BlogStatus = BlogStatus.TO_READ
    due_date: date
    category: str = ""


class BlogEntryUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[BlogStatus] = None
    due_date: Optional[date] = None
    category: Optional[str] = None


class NotificationRequest(BaseModel):
    title: str = Field(..., min_length=1)
    body: str = ""


class BridgeCall(BaseModel):
    """Positional arguments for a bridge operation."""
    args: List[Any] = Field(default_factory=list)
