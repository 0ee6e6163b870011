"""Failure-tolerant storage wrapper.

Reads are served from an in-memory mirror hydrated from the primary backend at start-up.
Writes always land in the mirror; the mirror's result is then written to the primary,
whose failures are logged and never raised.
"""

import logging
from typing import List, Optional

from taskflow.models.blog_entry import BlogEntry, BlogStatus
from taskflow.models.recurring_task import RecurringTask
from taskflow.models.section import SectionId, TASK_SECTIONS
from taskflow.models.task import SubGoal, Task, TaskStatus
from taskflow.storage.base import TaskStorage
from taskflow.storage.document import StorageDocument
from taskflow.storage.memory import InMemoryStorage

logger = logging.getLogger(__name__)


def build_document(storage: TaskStorage) -> StorageDocument:
    """Read everything a backend holds into a single document."""
    doc = StorageDocument()
    for section_id in SectionId:
        doc.categories[section_id.value] = storage.get_categories(section_id)
    for section_id in TASK_SECTIONS:
        tasks = storage.get_tasks(section_id)
        doc.tasks[section_id.value] = [task.model_copy(update={"sub_goals": []}) for task in tasks]
        for task in tasks:
            if task.sub_goals:
                doc.sub_goals[task.id] = list(task.sub_goals)
        doc.recurring_tasks[section_id.value] = storage.get_recurring_tasks(section_id)
    doc.blog_entries = storage.get_blog_entries()
    return doc


class ResilientStorage(TaskStorage):
    """Mirror-backed wrapper around a primary TaskStorage."""

    def __init__(self, primary: TaskStorage):
        self.primary = primary
        self.mirror = InMemoryStorage()
        try:
            self.mirror.replace_document(build_document(primary))
        except Exception:
            logger.exception("Failed to load data from primary storage; starting with an empty mirror")

    def _to_primary(self, operation: str, *args) -> None:
        try:
            getattr(self.primary, operation)(*args)
        except Exception:
            logger.exception(f"Primary storage failed during {operation}; change kept in memory only")

    def close(self) -> None:
        try:
            self.primary.close()
        except Exception:
            logger.exception("Failed to close primary storage")

    # Tasks
    def save_task(self, task: Task, replace_sub_goals: bool = False) -> Task:
        stored = self.mirror.save_task(task, replace_sub_goals)
        # The mirror result carries the full sub-goal list
        self._to_primary("save_task", stored, True)
        return stored

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.mirror.get_task(task_id)

    def get_tasks(self, section_id: SectionId) -> List[Task]:
        return self.mirror.get_tasks(section_id)

    def update_task_status(self, task_id: str, status: TaskStatus) -> bool:
        updated = self.mirror.update_task_status(task_id, status)
        if updated:
            self._to_primary("update_task_status", task_id, status)
        return updated

    def delete_task(self, task_id: str) -> bool:
        deleted = self.mirror.delete_task(task_id)
        if deleted:
            self._to_primary("delete_task", task_id)
        return deleted

    # Recurring tasks
    def save_recurring_task(self, task: RecurringTask) -> RecurringTask:
        stored = self.mirror.save_recurring_task(task)
        self._to_primary("save_recurring_task", stored)
        return stored

    def get_recurring_task(self, task_id: str) -> Optional[RecurringTask]:
        return self.mirror.get_recurring_task(task_id)

    def get_recurring_tasks(self, section_id: SectionId) -> List[RecurringTask]:
        return self.mirror.get_recurring_tasks(section_id)

    def update_recurring_task_status(self, task_id: str, status: TaskStatus) -> bool:
        updated = self.mirror.update_recurring_task_status(task_id, status)
        if updated:
            self._to_primary("update_recurring_task_status", task_id, status)
        return updated

    def delete_recurring_task(self, task_id: str) -> bool:
        deleted = self.mirror.delete_recurring_task(task_id)
        if deleted:
            self._to_primary("delete_recurring_task", task_id)
        return deleted

    # Sub-goals
    def save_sub_goal(self, sub_goal: SubGoal) -> Optional[SubGoal]:
        stored = self.mirror.save_sub_goal(sub_goal)
        if stored is not None:
            self._to_primary("save_sub_goal", stored)
        return stored

    def get_sub_goal(self, sub_goal_id: str) -> Optional[SubGoal]:
        return self.mirror.get_sub_goal(sub_goal_id)

    def get_sub_goals(self, task_id: str) -> List[SubGoal]:
        return self.mirror.get_sub_goals(task_id)

    def update_sub_goal_status(self, sub_goal_id: str, status: TaskStatus) -> bool:
        updated = self.mirror.update_sub_goal_status(sub_goal_id, status)
        if updated:
            self._to_primary("update_sub_goal_status", sub_goal_id, status)
        return updated

    def delete_sub_goal(self, sub_goal_id: str) -> bool:
        deleted = self.mirror.delete_sub_goal(sub_goal_id)
        if deleted:
            self._to_primary("delete_sub_goal", sub_goal_id)
        return deleted

    # Blog entries
    def save_blog_entry(self, entry: BlogEntry) -> BlogEntry:
        stored = self.mirror.save_blog_entry(entry)
        self._to_primary("save_blog_entry", stored)
        return stored

    def get_blog_entry(self, entry_id: str) -> Optional[BlogEntry]:
        return self.mirror.get_blog_entry(entry_id)

    def get_blog_entries(self) -> List[BlogEntry]:
        return self.mirror.get_blog_entries()

    def update_blog_entry_status(self, entry_id: str, status: BlogStatus) -> bool:
        updated = self.mirror.update_blog_entry_status(entry_id, status)
        if updated:
            self._to_primary("update_blog_entry_status", entry_id, status)
        return updated

    def delete_blog_entry(self, entry_id: str) -> bool:
        deleted = self.mirror.delete_blog_entry(entry_id)
        if deleted:
            self._to_primary("delete_blog_entry", entry_id)
        return deleted

    # Categories
    def get_categories(self, section_id: SectionId) -> List[str]:
        return self.mirror.get_categories(section_id)

    def add_category(self, section_id: SectionId, name: str) -> bool:
        added = self.mirror.add_category(section_id, name)
        if added:
            self._to_primary("add_category", section_id, name)
        return added

    def remove_category(self, section_id: SectionId, name: str) -> bool:
        removed = self.mirror.remove_category(section_id, name)
        if removed:
            self._to_primary("remove_category", section_id, name)
        return removed
