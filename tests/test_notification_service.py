"""Tests for the notification service (settings -> timers -> notifications)."""

from datetime import timedelta

from taskflow.models.notification import IntervalUnit, NotificationSettings, SectionNotificationConfig
from taskflow.models.section import SectionId
from taskflow.models.task import TaskStatus
from taskflow.notifications.service import STATUS_SWEEP_KEY
from taskflow.notifications.settings_store import NotificationSettingsStore

MINUTE = 60


def _household_tasks(task_manager, today):
    vacuum = task_manager.create_task(SectionId.HOUSEHOLD, "Vacuum", today, category="Cleaning")
    meal = task_manager.create_task(SectionId.HOUSEHOLD, "Meal prep", today, category="Cooking")
    return vacuum, meal


class TestApplySettings:
    def test_builds_section_and_category_timers(self, notification_service, scheduler, section_settings):
        notification_service.apply_settings(section_settings)

        assert set(scheduler.keys()) == {STATUS_SWEEP_KEY, "household", "household-Cleaning"}
        intervals = {t.key: t.interval_seconds for t in scheduler.status().timers}
        assert intervals["household"] == 30 * MINUTE
        assert intervals["household-Cleaning"] == 2 * 3600

    def test_category_timers_need_an_enabled_section(self, notification_service, scheduler, section_settings):
        notification_service.apply_settings(section_settings)
        assert not any(key.startswith("official") for key in scheduler.keys())

    def test_rebuild_replaces_previous_timers(self, notification_service, scheduler, section_settings):
        notification_service.apply_settings(section_settings)
        notification_service.apply_settings(
            NotificationSettings(sections={SectionId.BLOG: SectionNotificationConfig(enabled=True, interval=1,
                                                                                        unit=IntervalUnit.HOURS)})
        )
        assert set(scheduler.keys()) == {STATUS_SWEEP_KEY, "blog"}

    def test_settings_are_persisted(self, notification_service, settings_store, section_settings):
        notification_service.apply_settings(section_settings)

        reloaded = NotificationSettingsStore(settings_store.path).load()

        assert reloaded.model_dump() == section_settings.model_dump()
        assert notification_service.get_settings().model_dump() == section_settings.model_dump()


class TestReminders:
    def test_section_and_category_notifications(
        self, notification_service, task_manager, notifier, section_settings, today
    ):
        _household_tasks(task_manager, today)

        notification_service.apply_settings(section_settings)

        assert ("1 Household Task Due", "• Meal prep") in notifier.sent
        assert ("1 Cleaning Task Due (Household)", "• Vacuum") in notifier.sent

    def test_ticks_reread_current_data(
        self, notification_service, task_manager, notifier, timer_backend, section_settings, today
    ):
        _, meal = _household_tasks(task_manager, today)
        notification_service.apply_settings(section_settings)
        notifier.sent.clear()

        task_manager.update_task_status(meal.id, TaskStatus.COMPLETED)
        timer_backend.advance(30 * MINUTE)

        assert "1 Household Task Due" not in notifier.titles

    def test_nothing_due_sends_nothing(self, notification_service, task_manager, notifier, section_settings, today):
        task_manager.create_task(SectionId.HOUSEHOLD, "Later", today + timedelta(days=2))
        notification_service.apply_settings(section_settings)
        assert notifier.sent == []

    def test_status_sweep_activates_recurring_tasks(self, notification_service, task_manager, timer_backend, today):
        task = task_manager.create_recurring_task(SectionId.OFFICIAL, "Weekly report", today + timedelta(days=1))
        assert task.status is TaskStatus.TODO
        notification_service.apply_settings(NotificationSettings())

        task_manager._today = lambda: today + timedelta(days=1)
        timer_backend.advance(3600)

        assert task_manager.get_recurring_task(task.id).status is TaskStatus.IN_PROGRESS


class TestLifecycle:
    def test_start_loads_settings_and_reports_due_tasks(
        self, notification_service, task_manager, notifier, scheduler, settings_store, section_settings, today
    ):
        settings_store.save(section_settings)
        _household_tasks(task_manager, today)

        notification_service.start()

        assert "household" in scheduler.keys()
        assert "2 Tasks Due Today" in notifier.titles

    def test_unreadable_settings_file_means_no_reminders(self, notification_service, scheduler, settings_store):
        settings_store.path.write_text("{not json", encoding="utf-8")

        notification_service.start()

        assert scheduler.keys() == [STATUS_SWEEP_KEY]
        assert notification_service.get_settings().sections == {}

    def test_check_due_tasks_now(self, notification_service, task_manager, notifier, today):
        _household_tasks(task_manager, today)
        items = notification_service.check_due_tasks_now()
        assert len(items) == 2
        assert notifier.titles == ["2 Tasks Due Today"]

    def test_suspend_resume_and_status(self, notification_service, timer_backend, section_settings):
        notification_service.apply_settings(section_settings)
        notification_service.suspend()
        assert notification_service.status().sleeping is True

        timer_backend.advance(45 * MINUTE)
        caught_up = notification_service.resume()

        status = notification_service.status()
        assert status.sleeping is False
        assert caught_up == 1  # only the 30-minute household timer elapsed
        assert {t.key for t in status.timers} == {STATUS_SWEEP_KEY, "household", "household-Cleaning"}

    def test_show_notification(self, notification_service, notifier):
        notification_service.show_notification("Hello", "World")
        assert notifier.sent == [("Hello", "World")]

    def test_shutdown_tears_down_timers(self, notification_service, scheduler, timer_backend, section_settings):
        notification_service.apply_settings(section_settings)
        notification_service.shutdown()
        assert scheduler.keys() == []
        assert timer_backend.shut_down is True
