"""Task manager: the calling layer between the API and storage.

Builds entities, applies partial updates, keeps recurring tasks' derived fields
(next occurrence, initial status) current and assembles section data for the
due-task detector and analytics.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from taskflow.engine.analytics import BlogAnalytics, TaskAnalytics, compute_blog_analytics, compute_task_analytics
from taskflow.engine.due_tasks import DueItem, find_all_due_items
from taskflow.models.blog_entry import BlogEntry, BlogStatus
from taskflow.models.recurring_task import RecurringTask
from taskflow.models.section import SectionId, TASK_SECTIONS
from taskflow.models.section_data import SectionData
from taskflow.models.task import SubGoal, Task, TaskStatus
from taskflow.models.task_factory import (
    create_blog_entry,
    create_recurring_task,
    create_sub_goal,
    create_task_base,
)
from taskflow.recurrence.next_occurrence import (
    apply_status_transitions,
    compute_next_occurrence,
    initial_recurring_status,
)
from taskflow.storage.base import TaskStorage

logger = logging.getLogger(__name__)

# Fields a caller may never overwrite through a partial update
_PROTECTED_FIELDS = {"id", "created_at", "updated_at"}


def _patched(model, changes: Dict[str, Any]):
    """Re-validate `model` with `changes` applied.

    An explicit None clears fields whose default is None and is ignored elsewhere.
    """
    fields = type(model).model_fields
    data = model.model_dump()
    for key, value in changes.items():
        if key in _PROTECTED_FIELDS or key not in fields:
            continue
        if value is None and fields[key].default is not None:
            continue
        data[key] = value
    return type(model).model_validate(data)


def _require_task_section(section_id: SectionId) -> SectionId:
    section_id = SectionId(section_id)
    if not section_id.holds_tasks:
        raise ValueError(f"Section {section_id.value} holds blog entries, not tasks")
    return section_id


class TaskManager:
    """Operations over tasks, recurring tasks, sub-goals, blog entries and categories."""

    def __init__(self, storage: TaskStorage, today: Callable[[], date] = date.today):
        self.storage = storage
        self._today = today

    def today(self) -> date:
        return self._today()

    # Tasks
    def create_task(self, section_id: SectionId, title: str, due_date: date, **fields) -> Task:
        task = create_task_base(_require_task_section(section_id), title, due_date, **fields)
        return self.storage.save_task(task)

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.storage.get_task(task_id)

    def get_tasks(self, section_id: SectionId) -> List[Task]:
        return self.storage.get_tasks(section_id)

    def save_task(self, task: Task) -> Task:
        _require_task_section(task.section_id)
        return self.storage.save_task(task)

    def update_task(self, task_id: str, **changes) -> Optional[Task]:
        """Apply a partial update; a `sub_goals` change replaces the whole list."""
        existing = self.storage.get_task(task_id)
        if existing is None:
            return None
        task = _patched(existing, changes)
        _require_task_section(task.section_id)
        return self.storage.save_task(task, replace_sub_goals=changes.get("sub_goals") is not None)

    def update_task_status(self, task_id: str, status: TaskStatus) -> bool:
        return self.storage.update_task_status(task_id, status)

    def delete_task(self, task_id: str) -> bool:
        return self.storage.delete_task(task_id)

    # Recurring tasks
    def save_recurring_task(self, task: RecurringTask) -> RecurringTask:
        """Upsert a recurring task, deriving its next occurrence and (when new) its status."""
        _require_task_section(task.section_id)
        updates: Dict[str, Any] = {
            "next_occurrence": compute_next_occurrence(task.start_date, task.recurrence_value, task.recurrence_unit)
        }
        if self.storage.get_recurring_task(task.id) is None:
            updates["status"] = initial_recurring_status(task.start_date, self.today())
        return self.storage.save_recurring_task(task.model_copy(update=updates))

    def create_recurring_task(self, section_id: SectionId, title: str, start_date: Any, **fields) -> RecurringTask:
        task = create_recurring_task(_require_task_section(section_id), title, start_date, **fields)
        return self.save_recurring_task(task)

    def get_recurring_task(self, task_id: str) -> Optional[RecurringTask]:
        return self.storage.get_recurring_task(task_id)

    def get_recurring_tasks(self, section_id: SectionId) -> List[RecurringTask]:
        return self.storage.get_recurring_tasks(section_id)

    def update_recurring_task(self, task_id: str, **changes) -> Optional[RecurringTask]:
        existing = self.storage.get_recurring_task(task_id)
        if existing is None:
            return None
        return self.save_recurring_task(_patched(existing, changes))

    def update_recurring_task_status(self, task_id: str, status: TaskStatus) -> bool:
        return self.storage.update_recurring_task_status(task_id, status)

    def delete_recurring_task(self, task_id: str) -> bool:
        return self.storage.delete_recurring_task(task_id)

    def refresh_recurring_statuses(self) -> int:
        """Move todo recurring tasks whose start date has arrived to in-progress."""
        today = self.today()
        changed = 0
        for section_id in TASK_SECTIONS:
            for task in apply_status_transitions(self.storage.get_recurring_tasks(section_id), today):
                if self.storage.update_recurring_task_status(task.id, task.status):
                    changed += 1
        if changed:
            logger.info(f"Activated {changed} recurring task(s)")
        return changed

    # Sub-goals
    def add_sub_goal(self, task_id: str, title: str, due_date: date, **fields) -> Optional[SubGoal]:
        return self.storage.save_sub_goal(create_sub_goal(task_id, title, due_date, **fields))

    def replace_sub_goals(self, task_id: str, sub_goals: List[SubGoal]) -> Optional[Task]:
        """Replace a task's whole sub-goal list (progress follows)."""
        task = self.storage.get_task(task_id)
        if task is None:
            return None
        task = task.model_copy(update={"sub_goals": list(sub_goals)})
        return self.storage.save_task(task, replace_sub_goals=True)

    def save_sub_goal(self, sub_goal: SubGoal) -> Optional[SubGoal]:
        return self.storage.save_sub_goal(sub_goal)

    def get_sub_goal(self, sub_goal_id: str) -> Optional[SubGoal]:
        return self.storage.get_sub_goal(sub_goal_id)

    def get_sub_goals(self, task_id: str) -> List[SubGoal]:
        return self.storage.get_sub_goals(task_id)

    def update_sub_goal_status(self, sub_goal_id: str, status: TaskStatus) -> bool:
        return self.storage.update_sub_goal_status(sub_goal_id, status)

    def delete_sub_goal(self, sub_goal_id: str) -> bool:
        return self.storage.delete_sub_goal(sub_goal_id)

    # Blog entries
    def create_blog_entry(self, title: str, due_date: date, **fields) -> BlogEntry:
        return self.storage.save_blog_entry(create_blog_entry(title, due_date, **fields))

    def save_blog_entry(self, entry: BlogEntry) -> BlogEntry:
        return self.storage.save_blog_entry(entry)

    def get_blog_entry(self, entry_id: str) -> Optional[BlogEntry]:
        return self.storage.get_blog_entry(entry_id)

    def get_blog_entries(self) -> List[BlogEntry]:
        return self.storage.get_blog_entries()

    def update_blog_entry(self, entry_id: str, **changes) -> Optional[BlogEntry]:
        existing = self.storage.get_blog_entry(entry_id)
        if existing is None:
            return None
        return self.storage.save_blog_entry(_patched(existing, changes))

    def update_blog_entry_status(self, entry_id: str, status: BlogStatus) -> bool:
        return self.storage.update_blog_entry_status(entry_id, status)

    def advance_blog_entry(self, entry_id: str) -> Optional[BlogEntry]:
        """Move an entry one step along to-read -> reading -> practiced -> expert.

        Expert entries are returned unchanged; unknown ids return None.
        """
        entry = self.storage.get_blog_entry(entry_id)
        if entry is None:
            return None
        next_status = entry.status.advance()
        if next_status is None:
            return entry
        self.storage.update_blog_entry_status(entry_id, next_status)
        return self.storage.get_blog_entry(entry_id)

    def delete_blog_entry(self, entry_id: str) -> bool:
        return self.storage.delete_blog_entry(entry_id)

    # Categories
    def get_categories(self, section_id: SectionId) -> List[str]:
        return self.storage.get_categories(section_id)

    def add_category(self, section_id: SectionId, name: str) -> bool:
        name = name.strip()
        if not name:
            raise ValueError("Category name must not be empty")
        return self.storage.add_category(section_id, name)

    def remove_category(self, section_id: SectionId, name: str) -> bool:
        return self.storage.remove_category(section_id, name)

    # Aggregates
    def get_section_data(self, section_id: SectionId) -> SectionData:
        return self.storage.get_section_data(section_id)

    def get_task_tree(self) -> Dict[SectionId, SectionData]:
        """Every section's data keyed by section id."""
        return {section_id: self.storage.get_section_data(section_id) for section_id in SectionId}

    def get_due_items(self) -> List[DueItem]:
        return find_all_due_items(self.get_task_tree(), self.today())

    def get_task_analytics(self) -> TaskAnalytics:
        return compute_task_analytics(self.get_task_tree())

    def get_blog_analytics(self) -> BlogAnalytics:
        return compute_blog_analytics(self.storage.get_blog_entries())
