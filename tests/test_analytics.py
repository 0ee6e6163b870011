"""Tests for task and blog analytics."""

from datetime import date

from taskflow.engine.analytics import compute_blog_analytics, compute_task_analytics
from taskflow.models.blog_entry import BlogStatus
from taskflow.models.constants import SECTION_COLORS, SECTION_NAMES
from taskflow.models.section import SectionId
from taskflow.models.section_data import SectionData
from taskflow.models.task import TaskStatus
from taskflow.models.task_factory import create_blog_entry, create_task_base

TODAY = date(2024, 6, 15)


def _section(section_id, statuses, category=""):
    tasks = [
        create_task_base(section_id, f"Task {i}", TODAY, status=status, category=category)
        for i, status in enumerate(statuses)
    ]
    return SectionData(id=section_id, name=SECTION_NAMES[section_id], color=SECTION_COLORS[section_id], tasks=tasks)


class TestTaskAnalytics:
    def test_counts_and_rates(self):
        sections = {
            SectionId.HOUSEHOLD: _section(
                SectionId.HOUSEHOLD, [TaskStatus.COMPLETED, TaskStatus.TODO, TaskStatus.IN_PROGRESS], "Cleaning"
            ),
            SectionId.OFFICIAL: _section(SectionId.OFFICIAL, [TaskStatus.COMPLETED, TaskStatus.COMPLETED], "Reports"),
            SectionId.PERSONAL: _section(SectionId.PERSONAL, []),
        }

        analytics = compute_task_analytics(sections)

        assert analytics.total_tasks == 5
        assert analytics.completed_tasks == 3
        assert analytics.in_progress_tasks == 1
        assert analytics.todo_tasks == 1
        assert analytics.completion_rate == 60.0
        assert analytics.category_breakdown == {"Cleaning": 3, "Reports": 2}

        by_section = {s.id: s for s in analytics.sections}
        assert by_section[SectionId.HOUSEHOLD].completion_rate == 33.33
        assert by_section[SectionId.OFFICIAL].completion_rate == 100.0
        assert by_section[SectionId.PERSONAL].completion_rate == 0.0

    def test_empty(self):
        analytics = compute_task_analytics({})
        assert analytics.total_tasks == 0
        assert analytics.completion_rate == 0.0
        assert analytics.sections == []


class TestBlogAnalytics:
    def test_practiced_and_expert_count_as_complete(self):
        entries = [
            create_blog_entry("A", TODAY, status=BlogStatus.TO_READ, category="Research"),
            create_blog_entry("B", TODAY, status=BlogStatus.READING),
            create_blog_entry("C", TODAY, status=BlogStatus.PRACTICED),
            create_blog_entry("D", TODAY, status=BlogStatus.EXPERT, category="Research"),
        ]

        analytics = compute_blog_analytics(entries)

        assert analytics.total_entries == 4
        assert (analytics.to_read, analytics.reading, analytics.practiced, analytics.expert) == (1, 1, 1, 1)
        assert analytics.completion_rate == 50.0
        assert analytics.category_breakdown == {"Research": 2}

    def test_empty(self):
        assert compute_blog_analytics([]).completion_rate == 0.0
