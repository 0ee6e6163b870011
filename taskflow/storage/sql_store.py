"""SQL storage backend (SQLite by default) built on SQLAlchemy sessions."""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from sqlalchemy import desc
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from taskflow.models.blog_entry import BlogEntry, BlogStatus
from taskflow.models.recurring_task import RecurringTask
from taskflow.models.section import SectionId
from taskflow.models.task import SubGoal, Task, TaskStatus, compute_progress
from taskflow.storage.base import TaskStorage, merge_sub_goals, stamp
from taskflow.storage.database import build_engine, build_session_factory, init_db
from taskflow.storage.models import (
    BlogEntryDB,
    CategoryDB,
    RecurringTaskDB,
    SubGoalDB,
    TaskDB,
    enum_to_value,
)

logger = logging.getLogger(__name__)


class SqlStorage(TaskStorage):
    """TaskStorage over a relational database; one session per operation."""

    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker] = None):
        self.engine = engine
        self._session_factory = session_factory or build_session_factory(engine)
        init_db(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlStorage":
        return cls(build_engine(database_url))

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _transaction(self, action: str) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Failed to {action}: {type(e).__name__}: {str(e)}")
            raise
        finally:
            session.close()

    @contextmanager
    def _query(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    @staticmethod
    def _sub_goals_of(session: Session, task_id: str) -> List[SubGoal]:
        rows = (
            session.query(SubGoalDB)
            .filter(SubGoalDB.task_id == task_id)
            .order_by(SubGoalDB.created_at)
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def _refresh_progress(self, session: Session, task_id: str, now: datetime) -> None:
        session.flush()
        task_db = session.get(TaskDB, task_id)
        if task_db is None:
            return
        task_db.progress = compute_progress(self._sub_goals_of(session, task_id))
        task_db.updated_at = now

    # Tasks
    def save_task(self, task: Task, replace_sub_goals: bool = False) -> Task:
        with self._transaction(f"save task {task.id}") as session:
            now = datetime.now()
            existing = session.get(TaskDB, task.id)
            stored_rows = {
                row.id: row
                for row in session.query(SubGoalDB)
                .filter(SubGoalDB.task_id == task.id)
                .order_by(SubGoalDB.created_at)
                .all()
            }
            current = [row.to_pydantic() for row in stored_rows.values()]
            sub_goals = merge_sub_goals(current, task, now, replace_sub_goals)
            if sub_goals or current or replace_sub_goals:
                progress = compute_progress(sub_goals)
            else:
                progress = task.progress
            stored = stamp(task, existing, now).model_copy(update={"progress": progress, "sub_goals": sub_goals})

            session.merge(TaskDB.from_pydantic(stored))
            session.flush()

            keep = {sg.id for sg in sub_goals}
            for sub_goal_id, row in stored_rows.items():
                if sub_goal_id not in keep:
                    session.delete(row)
            for sub_goal in sub_goals:
                session.merge(SubGoalDB.from_pydantic(sub_goal))
            logger.debug(f"Saved task {task.id}: {task.title[:50]} in section {enum_to_value(task.section_id)}")
            return stored

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._query() as session:
            task_db = session.get(TaskDB, task_id)
            if task_db is None:
                return None
            return task_db.to_pydantic(self._sub_goals_of(session, task_id))

    def get_tasks(self, section_id: SectionId) -> List[Task]:
        with self._query() as session:
            rows = (
                session.query(TaskDB)
                .filter(TaskDB.section_id == SectionId(section_id).value)
                .order_by(TaskDB.created_at)
                .all()
            )
            return [row.to_pydantic(self._sub_goals_of(session, row.id)) for row in rows]

    def update_task_status(self, task_id: str, status: TaskStatus) -> bool:
        with self._transaction(f"update status of task {task_id}") as session:
            task_db = session.get(TaskDB, task_id)
            if task_db is None:
                return False
            now = datetime.now()
            status = TaskStatus(status)
            task_db.status = status.value
            task_db.updated_at = now
            task_db.completed_at = now if status.is_completed else None
            logger.debug(f"Task {task_id} status updated to {status.value}")
            return True

    def delete_task(self, task_id: str) -> bool:
        with self._transaction(f"delete task {task_id}") as session:
            task_db = session.get(TaskDB, task_id)
            if task_db is None:
                return False
            session.query(SubGoalDB).filter(SubGoalDB.task_id == task_id).delete()
            session.delete(task_db)
            logger.debug(f"Deleted task {task_id}")
            return True

    # Recurring tasks
    def save_recurring_task(self, task: RecurringTask) -> RecurringTask:
        with self._transaction(f"save recurring task {task.id}") as session:
            stored = stamp(task, session.get(RecurringTaskDB, task.id))
            session.merge(RecurringTaskDB.from_pydantic(stored))
            logger.debug(f"Saved recurring task {task.id}: {task.title[:50]}")
            return stored

    def get_recurring_task(self, task_id: str) -> Optional[RecurringTask]:
        with self._query() as session:
            row = session.get(RecurringTaskDB, task_id)
            return row.to_pydantic() if row else None

    def get_recurring_tasks(self, section_id: SectionId) -> List[RecurringTask]:
        with self._query() as session:
            rows = (
                session.query(RecurringTaskDB)
                .filter(RecurringTaskDB.section_id == SectionId(section_id).value)
                .order_by(RecurringTaskDB.created_at)
                .all()
            )
            return [row.to_pydantic() for row in rows]

    def update_recurring_task_status(self, task_id: str, status: TaskStatus) -> bool:
        with self._transaction(f"update status of recurring task {task_id}") as session:
            row = session.get(RecurringTaskDB, task_id)
            if row is None:
                return False
            row.status = TaskStatus(status).value
            row.updated_at = datetime.now()
            return True

    def delete_recurring_task(self, task_id: str) -> bool:
        with self._transaction(f"delete recurring task {task_id}") as session:
            row = session.get(RecurringTaskDB, task_id)
            if row is None:
                return False
            session.delete(row)
            logger.debug(f"Deleted recurring task {task_id}")
            return True

    # Sub-goals
    def save_sub_goal(self, sub_goal: SubGoal) -> Optional[SubGoal]:
        with self._transaction(f"save sub-goal {sub_goal.id}") as session:
            if session.get(TaskDB, sub_goal.task_id) is None:
                return None
            now = datetime.now()
            existing = session.get(SubGoalDB, sub_goal.id)
            previous_owner = existing.task_id if existing is not None else None
            stored = stamp(sub_goal, existing, now)
            session.merge(SubGoalDB.from_pydantic(stored))
            self._refresh_progress(session, sub_goal.task_id, now)
            if previous_owner and previous_owner != sub_goal.task_id:
                self._refresh_progress(session, previous_owner, now)
            return stored

    def get_sub_goal(self, sub_goal_id: str) -> Optional[SubGoal]:
        with self._query() as session:
            row = session.get(SubGoalDB, sub_goal_id)
            return row.to_pydantic() if row else None

    def get_sub_goals(self, task_id: str) -> List[SubGoal]:
        with self._query() as session:
            return self._sub_goals_of(session, task_id)

    def update_sub_goal_status(self, sub_goal_id: str, status: TaskStatus) -> bool:
        with self._transaction(f"update status of sub-goal {sub_goal_id}") as session:
            row = session.get(SubGoalDB, sub_goal_id)
            if row is None:
                return False
            now = datetime.now()
            row.status = TaskStatus(status).value
            row.updated_at = now
            self._refresh_progress(session, row.task_id, now)
            logger.debug(f"Sub-goal {sub_goal_id} status updated to {TaskStatus(status).value}")
            return True

    def delete_sub_goal(self, sub_goal_id: str) -> bool:
        with self._transaction(f"delete sub-goal {sub_goal_id}") as session:
            row = session.get(SubGoalDB, sub_goal_id)
            if row is None:
                return False
            task_id = row.task_id
            session.delete(row)
            self._refresh_progress(session, task_id, datetime.now())
            return True

    # Blog entries
    def save_blog_entry(self, entry: BlogEntry) -> BlogEntry:
        with self._transaction(f"save blog entry {entry.id}") as session:
            stored = stamp(entry, session.get(BlogEntryDB, entry.id))
            session.merge(BlogEntryDB.from_pydantic(stored))
            logger.debug(f"Saved blog entry {entry.id}: {entry.title[:50]}")
            return stored

    def get_blog_entry(self, entry_id: str) -> Optional[BlogEntry]:
        with self._query() as session:
            row = session.get(BlogEntryDB, entry_id)
            return row.to_pydantic() if row else None

    def get_blog_entries(self) -> List[BlogEntry]:
        with self._query() as session:
            rows = session.query(BlogEntryDB).order_by(desc(BlogEntryDB.created_at)).all()
            return [row.to_pydantic() for row in rows]

    def update_blog_entry_status(self, entry_id: str, status: BlogStatus) -> bool:
        with self._transaction(f"update status of blog entry {entry_id}") as session:
            row = session.get(BlogEntryDB, entry_id)
            if row is None:
                return False
            row.status = BlogStatus(status).value
            row.updated_at = datetime.now()
            return True

    def delete_blog_entry(self, entry_id: str) -> bool:
        with self._transaction(f"delete blog entry {entry_id}") as session:
            row = session.get(BlogEntryDB, entry_id)
            if row is None:
                return False
            session.delete(row)
            return True

    # Categories
    def get_categories(self, section_id: SectionId) -> List[str]:
        with self._query() as session:
            rows = (
                session.query(CategoryDB)
                .filter(CategoryDB.section_id == SectionId(section_id).value)
                .order_by(CategoryDB.id)
                .all()
            )
            return [row.name for row in rows]

    def add_category(self, section_id: SectionId, name: str) -> bool:
        section = SectionId(section_id).value
        with self._transaction(f"add category {name} to {section}") as session:
            exists = (
                session.query(CategoryDB)
                .filter(CategoryDB.section_id == section, CategoryDB.name == name)
                .first()
            )
            if exists is not None:
                return False
            session.add(CategoryDB(name=name, section_id=section))
            logger.debug(f"Added category {name} to section {section}")
            return True

    def remove_category(self, section_id: SectionId, name: str) -> bool:
        section = SectionId(section_id).value
        with self._transaction(f"remove category {name} from {section}") as session:
            deleted = (
                session.query(CategoryDB)
                .filter(CategoryDB.section_id == section, CategoryDB.name == name)
                .delete()
            )
            if deleted:
                logger.debug(f"Removed category {name} from section {section}")
            return bool(deleted)
