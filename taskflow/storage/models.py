"""SQLAlchemy database models for taskflow."""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Type, TypeVar, Union

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Time,
    UniqueConstraint,
)

from taskflow.models.blog_entry import BlogEntry, BlogStatus
from taskflow.models.recurring_task import RecurrenceUnit, RecurringTask
from taskflow.models.section import SectionId
from taskflow.models.task import SubGoal, Task, TaskStatus
from taskflow.storage.database import Base

T = TypeVar("T")


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string)."""
    if hasattr(enum_obj, "value"):
        return enum_obj.value
    return str(enum_obj)


def _one_of(column: str, enum_class: Type[Enum]) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_class)
    return f"{column} IN ({values})"


class TaskDB(Base):
    """Database model for Task (sub-goals live in their own table)."""

    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(_one_of("status", TaskStatus), name="ck_tasks_status"),
        CheckConstraint(_one_of("section_id", SectionId), name="ck_tasks_section_id"),
        CheckConstraint("progress BETWEEN 0 AND 100", name="ck_tasks_progress"),
    )

    id = Column(String, primary_key=True)
    section_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default=TaskStatus.TODO.value)
    due_date = Column(Date, nullable=False)
    category = Column(String, nullable=False, default="")

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)
    completed_at = Column(DateTime, nullable=True)

    # Personal development extras
    class_start_date = Column(Date, nullable=True)
    class_from_time = Column(Time, nullable=True)
    class_to_time = Column(Time, nullable=True)
    progress = Column(Integer, nullable=False, default=0)

    def to_pydantic(self, sub_goals: Optional[List[SubGoal]] = None) -> Task:
        return Task(
            id=self.id,
            section_id=SectionId(self.section_id),
            title=self.title,
            description=self.description or "",
            status=TaskStatus(self.status),
            due_date=self.due_date,
            category=self.category or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
            completed_at=self.completed_at,
            class_start_date=self.class_start_date,
            class_from_time=self.class_from_time,
            class_to_time=self.class_to_time,
            sub_goals=sub_goals or [],
            progress=self.progress,
        )

    @classmethod
    def from_pydantic(cls, task: Task) -> "TaskDB":
        return cls(
            id=task.id,
            section_id=enum_to_value(task.section_id),
            title=task.title,
            description=task.description,
            status=enum_to_value(task.status),
            due_date=task.due_date,
            category=task.category,
            created_at=task.created_at,
            updated_at=task.updated_at,
            completed_at=task.completed_at,
            class_start_date=task.class_start_date,
            class_from_time=task.class_from_time,
            class_to_time=task.class_to_time,
            progress=task.progress,
        )


class RecurringTaskDB(Base):
    """Database model for RecurringTask."""

    __tablename__ = "recurring_tasks"
    __table_args__ = (
        CheckConstraint(_one_of("status", TaskStatus), name="ck_recurring_tasks_status"),
        CheckConstraint(_one_of("recurrence_unit", RecurrenceUnit), name="ck_recurring_tasks_unit"),
        CheckConstraint("recurrence_value >= 1", name="ck_recurring_tasks_value"),
    )

    id = Column(String, primary_key=True)
    section_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default=TaskStatus.TODO.value)
    category = Column(String, nullable=False, default="")

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    recurrence_value = Column(Integer, nullable=False, default=1)
    recurrence_unit = Column(String, nullable=False, default=RecurrenceUnit.DAYS.value)
    next_occurrence = Column(DateTime, nullable=False)

    def to_pydantic(self) -> RecurringTask:
        return RecurringTask(
            id=self.id,
            section_id=SectionId(self.section_id),
            title=self.title,
            description=self.description or "",
            status=TaskStatus(self.status),
            category=self.category or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
            start_date=self.start_date,
            end_date=self.end_date,
            recurrence_value=self.recurrence_value,
            recurrence_unit=RecurrenceUnit(self.recurrence_unit),
            next_occurrence=self.next_occurrence,
        )

    @classmethod
    def from_pydantic(cls, task: RecurringTask) -> "RecurringTaskDB":
        return cls(
            id=task.id,
            section_id=enum_to_value(task.section_id),
            title=task.title,
            description=task.description,
            status=enum_to_value(task.status),
            category=task.category,
            created_at=task.created_at,
            updated_at=task.updated_at,
            start_date=task.start_date,
            end_date=task.end_date,
            recurrence_value=task.recurrence_value,
            recurrence_unit=enum_to_value(task.recurrence_unit),
            next_occurrence=task.next_occurrence,
        )


class SubGoalDB(Base):
    """Database model for SubGoal."""

    __tablename__ = "sub_goals"
    __table_args__ = (
        CheckConstraint(_one_of("status", TaskStatus), name="ck_sub_goals_status"),
    )

    id = Column(String, primary_key=True)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default=TaskStatus.TODO.value)
    due_date = Column(Date, nullable=False)
    category = Column(String, nullable=False, default="")

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    def to_pydantic(self) -> SubGoal:
        return SubGoal(
            id=self.id,
            task_id=self.task_id,
            title=self.title,
            description=self.description or "",
            status=TaskStatus(self.status),
            due_date=self.due_date,
            category=self.category or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, sub_goal: SubGoal) -> "SubGoalDB":
        # `completed` is derived from status and not stored
        return cls(
            id=sub_goal.id,
            task_id=sub_goal.task_id,
            title=sub_goal.title,
            description=sub_goal.description,
            status=enum_to_value(sub_goal.status),
            due_date=sub_goal.due_date,
            category=sub_goal.category,
            created_at=sub_goal.created_at,
            updated_at=sub_goal.updated_at,
        )


class CategoryDB(Base):
    """Database model for a section's category name."""

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("name", "section_id", name="uq_category_name_section"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    section_id = Column(String, nullable=False, index=True)


class BlogEntryDB(Base):
    """Database model for BlogEntry."""

    __tablename__ = "blog_entries"
    __table_args__ = (
        CheckConstraint(_one_of("status", BlogStatus), name="ck_blog_entries_status"),
    )

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default=BlogStatus.TO_READ.value)
    due_date = Column(Date, nullable=False)
    category = Column(String, nullable=False, default="")

    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    def to_pydantic(self) -> BlogEntry:
        return BlogEntry(
            id=self.id,
            title=self.title,
            description=self.description or "",
            status=BlogStatus(self.status),
            due_date=self.due_date,
            category=self.category or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, entry: BlogEntry) -> "BlogEntryDB":
        return cls(
            id=entry.id,
            title=entry.title,
            description=entry.description,
            status=enum_to_value(entry.status),
            due_date=entry.due_date,
            category=entry.category,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )
