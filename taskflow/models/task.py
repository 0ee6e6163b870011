"""Task and sub-goal data models for taskflow."""

import math
from datetime import date, datetime, time
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, model_validator

from taskflow.models.section import SectionId


class TaskStatus(str, Enum):
    """Task status enumeration."""
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def is_completed(self) -> bool:
        return self is TaskStatus.COMPLETED


class SubGoal(BaseModel):
    """Checklist item owned by a (personal development) task."""

    id: str = Field(..., description="Unique sub-goal identifier")
    task_id: str = Field(..., description="Owning task identifier")
    title: str = Field(..., min_length=1, description="Sub-goal title")
    description: str = Field("", description="Sub-goal description")
    status: TaskStatus = Field(TaskStatus.TODO, description="Sub-goal status")
    due_date: date = Field(..., description="Due date (date-only)")
    category: str = Field("", description="Category name within the owning task's section")
    completed: bool = Field(False, description="Mirrors status == completed")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @model_validator(mode="after")
    def _sync_completed(self):
        # status is the source of truth for the completed flag
        self.completed = self.status is TaskStatus.COMPLETED
        return self


class Task(BaseModel):
    """Canonical Task model."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    section_id: SectionId = Field(..., description="Section the task belongs to")
    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field("", description="Task description")
    status: TaskStatus = Field(TaskStatus.TODO, description="Task status")
    due_date: date = Field(..., description="Due date (date-only, local calendar)")
    category: str = Field("", description="Category name, drawn from the section's category list")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")
    completed_at: Optional[datetime] = Field(None, description="Set when the task is marked completed")

    # Personal development extras
    class_start_date: Optional[date] = None
    class_from_time: Optional[time] = None
    class_to_time: Optional[time] = None
    sub_goals: List[SubGoal] = Field(default_factory=list, description="Sub-goals (attached on read)")
    progress: int = Field(0, ge=0, le=100, description="Percentage of completed sub-goals")


def compute_progress(sub_goals: Sequence[SubGoal]) -> int:
    """Percentage of completed sub-goals, rounded half up (0 when there are none)."""
    if not sub_goals:
        return 0
    completed = sum(1 for sub_goal in sub_goals if sub_goal.completed)
    return int(math.floor(100 * completed / len(sub_goals) + 0.5))
