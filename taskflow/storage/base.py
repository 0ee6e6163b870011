"""Storage contract shared by every taskflow persistence backend."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from taskflow.models.blog_entry import BlogEntry, BlogStatus
from taskflow.models.constants import SECTION_COLORS, SECTION_NAMES
from taskflow.models.recurring_task import RecurringTask
from taskflow.models.section import SectionId
from taskflow.models.section_data import SectionData
from taskflow.models.task import SubGoal, Task, TaskStatus


class TaskStorage(ABC):
    """Persistence adapter for tasks, recurring tasks, sub-goals, blog entries and categories.

    All writes are upserts by identifier (insert if absent, else full replace). Storage stamps
    `updated_at` on every write and keeps the first stored `created_at`. Lookups of unknown
    identifiers return None (or False for status updates and deletes).
    """

    # Tasks
    @abstractmethod
    def save_task(self, task: Task, replace_sub_goals: bool = False) -> Task:
        """Upsert a task; progress follows its stored sub-goals.

        Sub-goals carried by `task` are upserted next to the stored ones. With
        `replace_sub_goals` the carried list replaces the stored list outright.
        """

    @abstractmethod
    def get_task(self, task_id: str) -> Optional[Task]:
        ...

    @abstractmethod
    def get_tasks(self, section_id: SectionId) -> List[Task]:
        """Tasks of a section with their sub-goals attached."""

    @abstractmethod
    def update_task_status(self, task_id: str, status: TaskStatus) -> bool:
        ...

    @abstractmethod
    def delete_task(self, task_id: str) -> bool:
        """Delete a task and its sub-goals."""

    # Recurring tasks
    @abstractmethod
    def save_recurring_task(self, task: RecurringTask) -> RecurringTask:
        ...

    @abstractmethod
    def get_recurring_task(self, task_id: str) -> Optional[RecurringTask]:
        ...

    @abstractmethod
    def get_recurring_tasks(self, section_id: SectionId) -> List[RecurringTask]:
        ...

    @abstractmethod
    def update_recurring_task_status(self, task_id: str, status: TaskStatus) -> bool:
        ...

    @abstractmethod
    def delete_recurring_task(self, task_id: str) -> bool:
        ...

    # Sub-goals
    @abstractmethod
    def save_sub_goal(self, sub_goal: SubGoal) -> Optional[SubGoal]:
        """Upsert a sub-goal and recompute its parent's progress (None if the parent is unknown)."""

    @abstractmethod
    def get_sub_goal(self, sub_goal_id: str) -> Optional[SubGoal]:
        ...

    @abstractmethod
    def get_sub_goals(self, task_id: str) -> List[SubGoal]:
        ...

    @abstractmethod
    def update_sub_goal_status(self, sub_goal_id: str, status: TaskStatus) -> bool:
        """Update status, sync the completed flag and recompute the parent's progress."""

    @abstractmethod
    def delete_sub_goal(self, sub_goal_id: str) -> bool:
        ...

    # Blog entries
    @abstractmethod
    def save_blog_entry(self, entry: BlogEntry) -> BlogEntry:
        ...

    @abstractmethod
    def get_blog_entry(self, entry_id: str) -> Optional[BlogEntry]:
        ...

    @abstractmethod
    def get_blog_entries(self) -> List[BlogEntry]:
        """All blog entries, newest first."""

    @abstractmethod
    def update_blog_entry_status(self, entry_id: str, status: BlogStatus) -> bool:
        ...

    @abstractmethod
    def delete_blog_entry(self, entry_id: str) -> bool:
        ...

    # Categories
    @abstractmethod
    def get_categories(self, section_id: SectionId) -> List[str]:
        ...

    @abstractmethod
    def add_category(self, section_id: SectionId, name: str) -> bool:
        """Add a category; False if the (section, name) pair already exists."""

    @abstractmethod
    def remove_category(self, section_id: SectionId, name: str) -> bool:
        """Remove a category name. Tasks carrying it are left untouched."""

    def close(self) -> None:
        """Release backend resources."""

    def get_section_data(self, section_id: SectionId) -> SectionData:
        """Convenience aggregate of everything stored for one section."""
        section_id = SectionId(section_id)
        data = SectionData(
            id=section_id,
            name=SECTION_NAMES[section_id],
            color=SECTION_COLORS[section_id],
            categories=self.get_categories(section_id),
        )
        if section_id.holds_tasks:
            data.tasks = self.get_tasks(section_id)
            data.recurring_tasks = self.get_recurring_tasks(section_id)
        else:
            data.entries = self.get_blog_entries()
        return data


def stamp(entity, existing=None, now: Optional[datetime] = None):
    """Copy `entity` with `updated_at` = now and the stored `created_at` preserved."""
    now = now or datetime.now()
    created_at = existing.created_at if existing is not None else entity.created_at
    return entity.model_copy(update={"created_at": created_at, "updated_at": max(now, created_at)})


def merge_sub_goals(current: List[SubGoal], task: Task, now: datetime, replace: bool = False) -> List[SubGoal]:
    """Sub-goal list a task ends up with after a save.

    Carried sub-goals are stamped against their stored versions. Unless `replace`
    is set, stored sub-goals the task does not carry are kept in place.
    """
    stored = {sg.id: sg for sg in current}
    carried = [
        stamp(sg.model_copy(update={"task_id": task.id}), stored.get(sg.id), now)
        for sg in task.sub_goals
    ]
    if replace:
        return carried
    updates = {sg.id: sg for sg in carried}
    merged = [updates.pop(sg.id, sg) for sg in current]
    return merged + [sg for sg in carried if sg.id in updates]
