"""Whole-document storage shared by the in-memory and JSON file backends.

The document mirrors the persisted JSON layout: `tasks` and `recurringTasks` map a section
to a list, `blogEntries` is a flat list, `categories` maps a section to names, `subGoals`
maps a task id to its sub-goals, and `metadata.lastModified` records the last write.
"""

import logging
import threading
from abc import abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from taskflow.models.blog_entry import BlogEntry, BlogStatus
from taskflow.models.constants import DEFAULT_CATEGORIES
from taskflow.models.recurring_task import RecurringTask
from taskflow.models.section import SectionId
from taskflow.models.task import SubGoal, Task, TaskStatus, compute_progress
from taskflow.storage.base import TaskStorage, merge_sub_goals, stamp

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = "1.0.0"


class StorageMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str = DOCUMENT_VERSION
    created: datetime = Field(default_factory=datetime.now)
    last_modified: datetime = Field(default_factory=datetime.now, alias="lastModified")


class StorageDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tasks: Dict[str, List[Task]] = Field(default_factory=dict)
    recurring_tasks: Dict[str, List[RecurringTask]] = Field(default_factory=dict, alias="recurringTasks")
    blog_entries: List[BlogEntry] = Field(default_factory=list, alias="blogEntries")
    categories: Dict[str, List[str]] = Field(default_factory=dict)
    sub_goals: Dict[str, List[SubGoal]] = Field(default_factory=dict, alias="subGoals")
    metadata: StorageMetadata = Field(default_factory=StorageMetadata)


def empty_document() -> StorageDocument:
    """A fresh document seeded with each section's default categories."""
    return StorageDocument(
        categories={section.value: list(names) for section, names in DEFAULT_CATEGORIES.items()}
    )


def _index_of(items: List, item_id: str) -> int:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return -1


class DocumentStorage(TaskStorage):
    """TaskStorage over a single document that is loaded and rewritten as a whole."""

    def __init__(self):
        self._lock = threading.RLock()

    @abstractmethod
    def _load(self) -> StorageDocument:
        ...

    @abstractmethod
    def _save(self, doc: StorageDocument) -> None:
        ...

    def _commit(self, doc: StorageDocument) -> None:
        doc.metadata.last_modified = datetime.now()
        self._save(doc)

    # Lookup helpers
    @staticmethod
    def _find_task(doc: StorageDocument, task_id: str) -> Tuple[Optional[str], int]:
        for section, tasks in doc.tasks.items():
            index = _index_of(tasks, task_id)
            if index >= 0:
                return section, index
        return None, -1

    @staticmethod
    def _find_recurring(doc: StorageDocument, task_id: str) -> Tuple[Optional[str], int]:
        for section, tasks in doc.recurring_tasks.items():
            index = _index_of(tasks, task_id)
            if index >= 0:
                return section, index
        return None, -1

    @staticmethod
    def _find_sub_goal(doc: StorageDocument, sub_goal_id: str) -> Tuple[Optional[str], int]:
        for task_id, sub_goals in doc.sub_goals.items():
            index = _index_of(sub_goals, sub_goal_id)
            if index >= 0:
                return task_id, index
        return None, -1

    @staticmethod
    def _with_sub_goals(doc: StorageDocument, task: Task) -> Task:
        return task.model_copy(update={"sub_goals": list(doc.sub_goals.get(task.id, []))})

    def _refresh_progress(self, doc: StorageDocument, task_id: str, now: datetime) -> None:
        section, index = self._find_task(doc, task_id)
        if section is None:
            return
        task = doc.tasks[section][index]
        doc.tasks[section][index] = task.model_copy(
            update={"progress": compute_progress(doc.sub_goals.get(task_id, [])), "updated_at": now}
        )

    # Tasks
    def save_task(self, task: Task, replace_sub_goals: bool = False) -> Task:
        with self._lock:
            doc = self._load()
            now = datetime.now()
            section, index = self._find_task(doc, task.id)
            existing = doc.tasks[section][index] if section is not None else None
            if section is not None and section != task.section_id.value:
                # Moved to another section
                doc.tasks[section].pop(index)
                index = -1

            current = doc.sub_goals.get(task.id, [])
            sub_goals = merge_sub_goals(current, task, now, replace_sub_goals)
            if sub_goals or current or replace_sub_goals:
                progress = compute_progress(sub_goals)
            else:
                progress = task.progress
            stored = stamp(task, existing, now).model_copy(update={"sub_goals": [], "progress": progress})

            bucket = doc.tasks.setdefault(task.section_id.value, [])
            if existing is not None and index >= 0:
                bucket[index] = stored
            else:
                bucket.append(stored)
            if sub_goals:
                doc.sub_goals[task.id] = sub_goals
            else:
                doc.sub_goals.pop(task.id, None)
            self._commit(doc)
            logger.debug(f"Saved task {task.id}: {task.title[:50]} in section {task.section_id.value}")
            return self._with_sub_goals(doc, stored)

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._lock:
            doc = self._load()
            section, index = self._find_task(doc, task_id)
            if section is None:
                return None
            return self._with_sub_goals(doc, doc.tasks[section][index])

    def get_tasks(self, section_id: SectionId) -> List[Task]:
        with self._lock:
            doc = self._load()
            tasks = doc.tasks.get(SectionId(section_id).value, [])
            return [self._with_sub_goals(doc, task) for task in tasks]

    def update_task_status(self, task_id: str, status: TaskStatus) -> bool:
        with self._lock:
            doc = self._load()
            section, index = self._find_task(doc, task_id)
            if section is None:
                return False
            now = datetime.now()
            status = TaskStatus(status)
            doc.tasks[section][index] = doc.tasks[section][index].model_copy(
                update={
                    "status": status,
                    "updated_at": now,
                    "completed_at": now if status.is_completed else None,
                }
            )
            self._commit(doc)
            logger.debug(f"Task {task_id} status updated to {status.value}")
            return True

    def delete_task(self, task_id: str) -> bool:
        with self._lock:
            doc = self._load()
            section, index = self._find_task(doc, task_id)
            if section is None:
                return False
            doc.tasks[section].pop(index)
            doc.sub_goals.pop(task_id, None)
            self._commit(doc)
            logger.debug(f"Deleted task {task_id}")
            return True

    # Recurring tasks
    def save_recurring_task(self, task: RecurringTask) -> RecurringTask:
        with self._lock:
            doc = self._load()
            section, index = self._find_recurring(doc, task.id)
            existing = doc.recurring_tasks[section][index] if section is not None else None
            if section is not None and section != task.section_id.value:
                doc.recurring_tasks[section].pop(index)
                index = -1

            stored = stamp(task, existing)
            bucket = doc.recurring_tasks.setdefault(task.section_id.value, [])
            if existing is not None and index >= 0:
                bucket[index] = stored
            else:
                bucket.append(stored)
            self._commit(doc)
            logger.debug(f"Saved recurring task {task.id}: {task.title[:50]}")
            return stored

    def get_recurring_task(self, task_id: str) -> Optional[RecurringTask]:
        with self._lock:
            doc = self._load()
            section, index = self._find_recurring(doc, task_id)
            return doc.recurring_tasks[section][index] if section is not None else None

    def get_recurring_tasks(self, section_id: SectionId) -> List[RecurringTask]:
        with self._lock:
            doc = self._load()
            return list(doc.recurring_tasks.get(SectionId(section_id).value, []))

    def update_recurring_task_status(self, task_id: str, status: TaskStatus) -> bool:
        with self._lock:
            doc = self._load()
            section, index = self._find_recurring(doc, task_id)
            if section is None:
                return False
            doc.recurring_tasks[section][index] = doc.recurring_tasks[section][index].model_copy(
                update={"status": TaskStatus(status), "updated_at": datetime.now()}
            )
            self._commit(doc)
            return True

    def delete_recurring_task(self, task_id: str) -> bool:
        with self._lock:
            doc = self._load()
            section, index = self._find_recurring(doc, task_id)
            if section is None:
                return False
            doc.recurring_tasks[section].pop(index)
            self._commit(doc)
            logger.debug(f"Deleted recurring task {task_id}")
            return True

    # Sub-goals
    def save_sub_goal(self, sub_goal: SubGoal) -> Optional[SubGoal]:
        with self._lock:
            doc = self._load()
            if self._find_task(doc, sub_goal.task_id)[0] is None:
                return None
            now = datetime.now()
            owner, index = self._find_sub_goal(doc, sub_goal.id)
            existing = doc.sub_goals[owner][index] if owner is not None else None
            if owner is not None and owner != sub_goal.task_id:
                doc.sub_goals[owner].pop(index)
                self._refresh_progress(doc, owner, now)
                index = -1

            stored = stamp(sub_goal, existing, now)
            bucket = doc.sub_goals.setdefault(sub_goal.task_id, [])
            if existing is not None and index >= 0:
                bucket[index] = stored
            else:
                bucket.append(stored)
            self._refresh_progress(doc, sub_goal.task_id, now)
            self._commit(doc)
            return stored

    def get_sub_goal(self, sub_goal_id: str) -> Optional[SubGoal]:
        with self._lock:
            doc = self._load()
            owner, index = self._find_sub_goal(doc, sub_goal_id)
            return doc.sub_goals[owner][index] if owner is not None else None

    def get_sub_goals(self, task_id: str) -> List[SubGoal]:
        with self._lock:
            return list(self._load().sub_goals.get(task_id, []))

    def update_sub_goal_status(self, sub_goal_id: str, status: TaskStatus) -> bool:
        with self._lock:
            doc = self._load()
            owner, index = self._find_sub_goal(doc, sub_goal_id)
            if owner is None:
                return False
            now = datetime.now()
            status = TaskStatus(status)
            doc.sub_goals[owner][index] = doc.sub_goals[owner][index].model_copy(
                update={"status": status, "completed": status.is_completed, "updated_at": now}
            )
            self._refresh_progress(doc, owner, now)
            self._commit(doc)
            logger.debug(f"Sub-goal {sub_goal_id} status updated to {status.value}")
            return True

    def delete_sub_goal(self, sub_goal_id: str) -> bool:
        with self._lock:
            doc = self._load()
            owner, index = self._find_sub_goal(doc, sub_goal_id)
            if owner is None:
                return False
            doc.sub_goals[owner].pop(index)
            if not doc.sub_goals[owner]:
                del doc.sub_goals[owner]
            self._refresh_progress(doc, owner, datetime.now())
            self._commit(doc)
            return True

    # Blog entries
    def save_blog_entry(self, entry: BlogEntry) -> BlogEntry:
        with self._lock:
            doc = self._load()
            index = _index_of(doc.blog_entries, entry.id)
            existing = doc.blog_entries[index] if index >= 0 else None
            stored = stamp(entry, existing)
            if existing is not None:
                doc.blog_entries[index] = stored
            else:
                doc.blog_entries.append(stored)
            self._commit(doc)
            logger.debug(f"Saved blog entry {entry.id}: {entry.title[:50]}")
            return stored

    def get_blog_entry(self, entry_id: str) -> Optional[BlogEntry]:
        with self._lock:
            doc = self._load()
            index = _index_of(doc.blog_entries, entry_id)
            return doc.blog_entries[index] if index >= 0 else None

    def get_blog_entries(self) -> List[BlogEntry]:
        with self._lock:
            return sorted(self._load().blog_entries, key=lambda e: e.created_at, reverse=True)

    def update_blog_entry_status(self, entry_id: str, status: BlogStatus) -> bool:
        with self._lock:
            doc = self._load()
            index = _index_of(doc.blog_entries, entry_id)
            if index < 0:
                return False
            doc.blog_entries[index] = doc.blog_entries[index].model_copy(
                update={"status": BlogStatus(status), "updated_at": datetime.now()}
            )
            self._commit(doc)
            return True

    def delete_blog_entry(self, entry_id: str) -> bool:
        with self._lock:
            doc = self._load()
            index = _index_of(doc.blog_entries, entry_id)
            if index < 0:
                return False
            doc.blog_entries.pop(index)
            self._commit(doc)
            return True

    # Categories
    def get_categories(self, section_id: SectionId) -> List[str]:
        with self._lock:
            return list(self._load().categories.get(SectionId(section_id).value, []))

    def add_category(self, section_id: SectionId, name: str) -> bool:
        with self._lock:
            doc = self._load()
            names = doc.categories.setdefault(SectionId(section_id).value, [])
            if name in names:
                return False
            names.append(name)
            self._commit(doc)
            logger.debug(f"Added category {name} to section {SectionId(section_id).value}")
            return True

    def remove_category(self, section_id: SectionId, name: str) -> bool:
        with self._lock:
            doc = self._load()
            names = doc.categories.get(SectionId(section_id).value, [])
            if name not in names:
                return False
            names.remove(name)
            self._commit(doc)
            logger.debug(f"Removed category {name} from section {SectionId(section_id).value}")
            return True
