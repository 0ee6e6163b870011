"""Entity creation factory for taskflow.

This module centralizes creation of tasks, recurring tasks, sub-goals and blog entries
so identifiers, timestamps and defaults are applied consistently across the application.
"""

import uuid
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from taskflow.models.blog_entry import BlogEntry, BlogStatus
from taskflow.models.recurring_task import RecurrenceUnit, RecurringTask, as_datetime
from taskflow.models.section import SectionId
from taskflow.models.task import SubGoal, Task, TaskStatus, compute_progress
from taskflow.recurrence.next_occurrence import compute_next_occurrence


def new_id() -> str:
    return str(uuid.uuid4())


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary."""
    return {
        "description": "",
        "status": TaskStatus.TODO,
        "category": "",
        "progress": 0,
    }


def create_task_base(
    section_id: SectionId,
    title: str,
    due_date: date,
    description: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    category: Optional[str] = None,
    task_id: Optional[str] = None,
    class_start_date: Optional[date] = None,
    class_from_time: Optional[time] = None,
    class_to_time: Optional[time] = None,
    sub_goals: Optional[List[SubGoal]] = None,
) -> Task:
    """Create a task with defaults, allowing overrides.

    Args:
        section_id: Section the task belongs to (required)
        title: Task title (required)
        due_date: Due date (required)
        description: Task description
        status: Initial status (defaults to todo)
        category: Category name
        task_id: Explicit identifier (a UUID v4 is generated when omitted)
        class_start_date: Personal development class start date
        class_from_time: Personal development class start time
        class_to_time: Personal development class end time
        sub_goals: Sub-goals; progress is derived from them

    Returns:
        Task object with defaults applied
    """
    now = datetime.now()
    defaults = create_task_defaults()
    sub_goals = sub_goals or []

    return Task(
        id=task_id or new_id(),
        section_id=section_id,
        title=title,
        description=description if description is not None else defaults["description"],
        status=status if status is not None else defaults["status"],
        due_date=due_date,
        category=category if category is not None else defaults["category"],
        created_at=now,
        updated_at=now,
        class_start_date=class_start_date,
        class_from_time=class_from_time,
        class_to_time=class_to_time,
        sub_goals=sub_goals,
        progress=compute_progress(sub_goals) if sub_goals else defaults["progress"],
    )


def create_recurring_task(
    section_id: SectionId,
    title: str,
    start_date: Any,
    recurrence_value: Any = 1,
    recurrence_unit: RecurrenceUnit = RecurrenceUnit.DAYS,
    description: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    category: Optional[str] = None,
    end_date: Optional[Any] = None,
    task_id: Optional[str] = None,
) -> RecurringTask:
    """Create a recurring task with its next occurrence already derived.

    The status passed here is provisional: the task manager decides the initial
    status of a recurring task from its start date when it is first stored.
    """
    now = datetime.now()
    defaults = create_task_defaults()
    task = RecurringTask(
        id=task_id or new_id(),
        section_id=section_id,
        title=title,
        description=description if description is not None else defaults["description"],
        status=status if status is not None else defaults["status"],
        category=category if category is not None else defaults["category"],
        created_at=now,
        updated_at=now,
        start_date=start_date,
        end_date=end_date,
        recurrence_value=recurrence_value,
        recurrence_unit=recurrence_unit,
        next_occurrence=as_datetime(start_date),
    )
    return task.model_copy(
        update={
            "next_occurrence": compute_next_occurrence(
                task.start_date, task.recurrence_value, task.recurrence_unit
            )
        }
    )


def create_sub_goal(
    task_id: str,
    title: str,
    due_date: date,
    description: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    category: Optional[str] = None,
    sub_goal_id: Optional[str] = None,
) -> SubGoal:
    """Create a sub-goal owned by `task_id`."""
    now = datetime.now()
    return SubGoal(
        id=sub_goal_id or new_id(),
        task_id=task_id,
        title=title,
        description=description or "",
        status=status or TaskStatus.TODO,
        due_date=due_date,
        category=category or "",
        created_at=now,
        updated_at=now,
    )


def create_blog_entry(
    title: str,
    due_date: date,
    description: Optional[str] = None,
    status: Optional[BlogStatus] = None,
    category: Optional[str] = None,
    entry_id: Optional[str] = None,
) -> BlogEntry:
    """Create a blog entry (defaults to to-read)."""
    now = datetime.now()
    return BlogEntry(
        id=entry_id or new_id(),
        title=title,
        description=description or "",
        status=status or BlogStatus.TO_READ,
        due_date=due_date,
        category=category or "",
        created_at=now,
        updated_at=now,
    )
