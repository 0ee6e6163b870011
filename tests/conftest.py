"""Pytest fixtures and configuration for taskflow tests."""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from taskflow.models.notification import (
    CategoryNotificationConfig,
    IntervalUnit,
    NotificationSettings,
    SectionNotificationConfig,
)
from taskflow.models.section import SectionId
from taskflow.models.task_factory import create_blog_entry, create_sub_goal, create_task_base
from taskflow.notifications.scheduler import NotificationScheduler
from taskflow.notifications.service import NotificationService
from taskflow.notifications.settings_store import NotificationSettingsStore
from taskflow.services.task_manager import TaskManager
from taskflow.storage.database import build_engine
from taskflow.storage.json_store import JsonFileStorage
from taskflow.storage.memory import InMemoryStorage
from taskflow.storage.sql_store import SqlStorage
from tests.fakes import FakeClock, FakeNotifier, ManualTimerBackend

# Fixed "today" for everything that depends on the calendar
TODAY = date(2024, 6, 15)

# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def sql_engine():
    """Fresh in-memory SQLite engine shared across sessions via StaticPool."""
    engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    yield engine
    engine.dispose()


@pytest.fixture
def memory_storage():
    return InMemoryStorage()


@pytest.fixture
def json_path(tmp_path):
    return tmp_path / "data" / "tasks.json"


@pytest.fixture
def json_storage(json_path):
    return JsonFileStorage(json_path)


@pytest.fixture
def sql_storage(sql_engine):
    return SqlStorage(sql_engine)


@pytest.fixture(params=["memory", "json", "sql"])
def backend(request, tmp_path):
    """(storage, reopen) for each backend; `reopen()` builds a new adapter over the same data."""
    if request.param == "memory":
        storage = InMemoryStorage()
        yield storage, lambda: InMemoryStorage(storage.snapshot())
    elif request.param == "json":
        path = tmp_path / "tasks.json"
        yield JsonFileStorage(path), lambda: JsonFileStorage(path)
    else:
        engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
        yield SqlStorage(engine), lambda: SqlStorage(engine)
        engine.dispose()


@pytest.fixture
def storage(backend):
    return backend[0]


@pytest.fixture
def task_manager(memory_storage, today):
    return TaskManager(memory_storage, today=lambda: today)


@pytest.fixture
def clock():
    return FakeClock(start=1_000_000.0)


@pytest.fixture
def timer_backend(clock):
    return ManualTimerBackend(clock)


@pytest.fixture
def scheduler(timer_backend, clock):
    return NotificationScheduler(timer_backend, clock=clock)


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def settings_store(tmp_path):
    return NotificationSettingsStore(tmp_path / "notifications.json")


@pytest.fixture
def notification_service(task_manager, scheduler, notifier, settings_store):
    return NotificationService(
        task_manager=task_manager,
        scheduler=scheduler,
        notifier=notifier,
        settings_store=settings_store,
        status_sweep_seconds=3600,
    )


@pytest.fixture
def test_client(task_manager, notification_service):
    """FastAPI test client with the task manager and notification service overridden."""
    from taskflow.api.app import app
    from taskflow.api.dependencies import get_notification_service, get_task_manager

    app.dependency_overrides[get_task_manager] = lambda: task_manager
    app.dependency_overrides[get_notification_service] = lambda: notification_service

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_task(today):
    """An official task due today."""
    return create_task_base(
        SectionId.OFFICIAL,
        "Prepare quarterly report",
        today,
        description="Numbers for Q2",
        category="Reports",
    )


@pytest.fixture
def personal_task_with_sub_goals(today):
    """A personal development task with four sub-goals, none completed."""
    task = create_task_base(SectionId.PERSONAL, "Learn Rust", today + timedelta(days=30), category="Learning")
    sub_goals = [
        create_sub_goal(task.id, f"Chapter {i}", today + timedelta(days=i), category="Learning")
        for i in range(1, 5)
    ]
    return task.model_copy(update={"sub_goals": sub_goals})


@pytest.fixture
def sample_blog_entry(today):
    return create_blog_entry("Understanding asyncio", today + timedelta(days=7), category="Research")


@pytest.fixture
def section_settings():
    """Household every 30 minutes with a 2-hour Cleaning override; official disabled."""
    return NotificationSettings(
        sections={
            SectionId.HOUSEHOLD: SectionNotificationConfig(
                enabled=True,
                interval=30,
                unit=IntervalUnit.MINUTES,
                categories={
                    "Cleaning": CategoryNotificationConfig(enabled=True, interval=2, unit=IntervalUnit.HOURS),
                    "Shopping": CategoryNotificationConfig(enabled=False, interval=10),
                },
            ),
            SectionId.OFFICIAL: SectionNotificationConfig(
                enabled=False,
                categories={"Meetings": CategoryNotificationConfig(enabled=True, interval=15)},
            ),
        }
    )

