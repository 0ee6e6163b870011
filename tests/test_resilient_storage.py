"""Tests for the mirror-backed storage wrapper."""

import pytest

from taskflow.models.section import SectionId
from taskflow.models.task import TaskStatus
from taskflow.storage.memory import InMemoryStorage
from taskflow.storage.resilient import ResilientStorage


class BrokenWrites(InMemoryStorage):
    """Reads work; every write raises."""

    def _save(self, doc):
        raise OSError("disk full")


class BrokenReads(InMemoryStorage):
    def _load(self):
        raise OSError("unreadable")


class TestHydration:
    def test_mirror_loads_primary_contents(self, sql_storage, personal_task_with_sub_goals, sample_blog_entry):
        sql_storage.save_task(personal_task_with_sub_goals)
        sql_storage.save_blog_entry(sample_blog_entry)
        sql_storage.add_category(SectionId.BLOG, "Podcasts")
        stored = sql_storage.get_task(personal_task_with_sub_goals.id)

        storage = ResilientStorage(sql_storage)

        mirrored = storage.get_task(stored.id)
        assert mirrored.model_dump() == stored.model_dump()
        assert [e.id for e in storage.get_blog_entries()] == [sample_blog_entry.id]
        assert "Podcasts" in storage.get_categories(SectionId.BLOG)

    def test_unreadable_primary_starts_empty(self):
        storage = ResilientStorage(BrokenReads())
        assert storage.get_tasks(SectionId.OFFICIAL) == []


class TestWrites:
    def test_writes_reach_primary(self, sql_storage, sample_task):
        storage = ResilientStorage(sql_storage)

        storage.save_task(sample_task)
        storage.update_task_status(sample_task.id, TaskStatus.COMPLETED)

        assert sql_storage.get_task(sample_task.id).status is TaskStatus.COMPLETED

    def test_primary_keeps_sub_goals_when_task_is_renamed(self, sql_storage, personal_task_with_sub_goals):
        storage = ResilientStorage(sql_storage)
        task = storage.save_task(personal_task_with_sub_goals)

        storage.save_task(task.model_copy(update={"title": "Learn Rust properly", "sub_goals": []}))

        stored = sql_storage.get_task(task.id)
        assert stored.title == "Learn Rust properly"
        assert len(stored.sub_goals) == 4

    def test_primary_failures_are_not_raised(self, sample_task, personal_task_with_sub_goals):
        storage = ResilientStorage(BrokenWrites())

        saved = storage.save_task(sample_task)
        storage.save_task(personal_task_with_sub_goals)
        sub_goal = personal_task_with_sub_goals.sub_goals[0]

        assert storage.get_task(saved.id) is not None
        assert storage.update_sub_goal_status(sub_goal.id, TaskStatus.COMPLETED) is True
        assert storage.get_task(personal_task_with_sub_goals.id).progress == 25
        assert storage.add_category(SectionId.HOUSEHOLD, "Garden") is True
        assert storage.delete_task(saved.id) is True

    def test_missing_ids_skip_primary(self, sql_storage):
        storage = ResilientStorage(sql_storage)
        assert storage.delete_task("nope") is False
        assert storage.update_blog_entry_status("nope", "reading") is False

    @pytest.mark.parametrize("operation", ["delete_task", "delete_recurring_task", "delete_blog_entry"])
    def test_deletes_on_unknown_ids_return_false(self, operation):
        assert getattr(ResilientStorage(InMemoryStorage()), operation)("nope") is False
