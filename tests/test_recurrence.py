"""Tests for next-occurrence arithmetic and recurring status transitions."""

from datetime import date, datetime, timedelta

import pytest

from taskflow.models.recurring_task import RecurrenceUnit, coerce_recurrence_value
from taskflow.models.section import SectionId
from taskflow.models.task import TaskStatus
from taskflow.models.task_factory import create_recurring_task
from taskflow.recurrence import (
    apply_status_transitions,
    compute_next_occurrence,
    initial_recurring_status,
    should_activate,
)


class TestComputeNextOccurrence:
    def test_two_weeks_from_new_year(self):
        assert compute_next_occurrence(datetime(2024, 1, 1), 2, RecurrenceUnit.WEEKS) == datetime(2024, 1, 15)

    @pytest.mark.parametrize(
        "value,unit,expected",
        [
            (30, RecurrenceUnit.MINUTES, datetime(2024, 3, 10, 9, 30)),
            (5, RecurrenceUnit.HOURS, datetime(2024, 3, 10, 14, 0)),
            (3, RecurrenceUnit.DAYS, datetime(2024, 3, 13, 9, 0)),
            (1, RecurrenceUnit.MONTHS, datetime(2024, 4, 10, 9, 0)),
        ],
    )
    def test_units(self, value, unit, expected):
        assert compute_next_occurrence(datetime(2024, 3, 10, 9, 0), value, unit) == expected

    def test_month_end_clamps_to_last_day(self):
        """Jan 31 + 1 month lands on the last day of February."""
        assert compute_next_occurrence(datetime(2024, 1, 31), 1, RecurrenceUnit.MONTHS) == datetime(2024, 2, 29)
        assert compute_next_occurrence(datetime(2023, 1, 31), 1, RecurrenceUnit.MONTHS) == datetime(2023, 2, 28)

    def test_months_cross_year_boundary(self):
        assert compute_next_occurrence(datetime(2024, 11, 15), 3, RecurrenceUnit.MONTHS) == datetime(2025, 2, 15)

    def test_invalid_value_falls_back_to_one(self):
        start = datetime(2024, 1, 1)
        assert compute_next_occurrence(start, 0, RecurrenceUnit.DAYS) == datetime(2024, 1, 2)
        assert compute_next_occurrence(start, "abc", RecurrenceUnit.DAYS) == datetime(2024, 1, 2)

    def test_unit_accepts_plain_string(self):
        assert compute_next_occurrence(datetime(2024, 1, 1), 1, "weeks") == datetime(2024, 1, 8)


class TestCoerceRecurrenceValue:
    @pytest.mark.parametrize("raw,expected", [(3, 3), ("4", 4), (2.0, 2)])
    def test_valid_values_kept(self, raw, expected):
        assert coerce_recurrence_value(raw) == expected

    @pytest.mark.parametrize("raw", [0, -2, 1.5, "x", None, True, "", [2]])
    def test_invalid_values_become_one(self, raw):
        assert coerce_recurrence_value(raw) == 1

    def test_model_coerces_on_construction(self):
        task = create_recurring_task(SectionId.HOUSEHOLD, "Water plants", date(2024, 1, 1), recurrence_value=-5)
        assert task.recurrence_value == 1
        assert task.next_occurrence == datetime(2024, 1, 2)

    def test_date_only_start_means_midnight(self):
        task = create_recurring_task(SectionId.HOUSEHOLD, "Water plants", "2024-01-01", recurrence_value=2,
                                     recurrence_unit=RecurrenceUnit.WEEKS)
        assert task.start_date == datetime(2024, 1, 1)
        assert task.next_occurrence == datetime(2024, 1, 15)


class TestInitialStatus:
    def test_started_yesterday_is_in_progress(self):
        today = date(2024, 6, 15)
        assert initial_recurring_status(datetime(2024, 6, 14, 18, 0), today) is TaskStatus.IN_PROGRESS

    def test_starting_today_is_in_progress(self):
        today = date(2024, 6, 15)
        assert initial_recurring_status(datetime(2024, 6, 15, 23, 59), today) is TaskStatus.IN_PROGRESS

    def test_starting_tomorrow_is_todo(self):
        today = date(2024, 6, 15)
        assert initial_recurring_status(datetime(2024, 6, 16), today) is TaskStatus.TODO


class TestStatusTransitions:
    def _task(self, start, status):
        task = create_recurring_task(SectionId.OFFICIAL, "Weekly sync", start, recurrence_unit=RecurrenceUnit.WEEKS)
        return task.model_copy(update={"status": status})

    def test_todo_task_activates_once_started(self):
        today = date(2024, 6, 15)
        started = self._task(datetime(2024, 6, 15), TaskStatus.TODO)
        future = self._task(datetime(2024, 6, 16), TaskStatus.TODO)

        activated = apply_status_transitions([started, future], today)

        assert [t.id for t in activated] == [started.id]
        assert activated[0].status is TaskStatus.IN_PROGRESS
        # Inputs are left untouched
        assert started.status is TaskStatus.TODO

    def test_never_moves_backwards(self):
        today = date(2024, 6, 15)
        completed = self._task(datetime(2024, 6, 1), TaskStatus.COMPLETED)
        future_in_progress = self._task(datetime(2024, 7, 1), TaskStatus.IN_PROGRESS)

        assert not should_activate(completed, today)
        assert not should_activate(future_in_progress, today)
        assert apply_status_transitions([completed, future_in_progress], today) == []

    def test_runs_across_month_boundary(self):
        task = self._task(datetime(2024, 7, 1), TaskStatus.TODO)
        assert not should_activate(task, date(2024, 6, 30))
        assert should_activate(task, date(2024, 7, 1))

    def test_many_days_later_still_activates(self):
        task = self._task(datetime(2024, 6, 1), TaskStatus.TODO)
        assert should_activate(task, date(2024, 6, 1) + timedelta(days=90))
