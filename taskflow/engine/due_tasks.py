"""Due-task detection for taskflow.

Selects tasks, recurring tasks and (personal development) sub-goals whose date has
arrived and that are not completed. Comparison is date-only against local "today".
Results are returned in discovery order; callers sort if they need to.
"""

from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field

from taskflow.models.constants import NOTIFICATION_PREVIEW_LIMIT, NOTIFICATION_SECTION_NAMES
from taskflow.models.notification import SectionNotificationConfig
from taskflow.models.section import SectionId
from taskflow.models.section_data import SectionData
from taskflow.models.task import TaskStatus


class DueItemKind(str, Enum):
    TASK = "task"
    RECURRING_TASK = "recurring_task"
    SUB_GOAL = "sub_goal"


class DueItem(BaseModel):
    """A task, recurring task or sub-goal whose date has arrived."""

    id: str
    kind: DueItemKind
    section_id: SectionId
    title: str = Field(..., description="Display title (sub-goals are prefixed with their task title)")
    category: str
    status: TaskStatus
    due_date: date = Field(..., description="Due date, or the next occurrence date for recurring tasks")
    parent_task_id: Optional[str] = None


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def is_due(status: TaskStatus, when: Union[date, datetime], today: date) -> bool:
    """Not completed and dated on or before today (time of day ignored)."""
    return not status.is_completed and _as_date(when) <= today


def _candidates(section: SectionData) -> Iterable[DueItem]:
    for task in section.tasks:
        yield DueItem(
            id=task.id,
            kind=DueItemKind.TASK,
            section_id=section.id,
            title=task.title,
            category=task.category,
            status=task.status,
            due_date=task.due_date,
        )

    for task in section.recurring_tasks:
        yield DueItem(
            id=task.id,
            kind=DueItemKind.RECURRING_TASK,
            section_id=section.id,
            title=task.title,
            category=task.category,
            status=task.status,
            due_date=_as_date(task.next_occurrence),
        )

    # Sub-goals surface as standalone items for personal development only
    if section.id is SectionId.PERSONAL:
        for task in section.tasks:
            if task.status.is_completed:
                continue
            for sub_goal in task.sub_goals:
                yield DueItem(
                    id=sub_goal.id,
                    kind=DueItemKind.SUB_GOAL,
                    section_id=section.id,
                    title=f"{task.title} - {sub_goal.title}",
                    category=sub_goal.category,
                    status=sub_goal.status,
                    due_date=sub_goal.due_date,
                    parent_task_id=task.id,
                )


def find_due_items(section: SectionData, today: date) -> List[DueItem]:
    """All due items of one section, without category suppression."""
    return [item for item in _candidates(section) if is_due(item.status, item.due_date, today)]


def find_due_items_for_section(
    section: SectionData,
    config: Optional[SectionNotificationConfig],
    today: date,
) -> List[DueItem]:
    """Due items for a section-level reminder.

    Items whose category has its own enabled override are left to that category's reminder.
    """
    items = find_due_items(section, today)
    if config is None:
        return items
    return [item for item in items if not config.has_category_override(item.category)]


def find_due_items_for_category(section: SectionData, category: str, today: date) -> List[DueItem]:
    """Due items of a single category within a section."""
    return [item for item in find_due_items(section, today) if item.category == category]


def find_all_due_items(sections: Mapping[SectionId, SectionData], today: date) -> List[DueItem]:
    """Due items across every section (startup and "check now" popups)."""
    items: List[DueItem] = []
    for section in sections.values():
        items.extend(find_due_items(section, today))
    return items


def format_notification_body(items: Sequence[DueItem], limit: int = NOTIFICATION_PREVIEW_LIMIT) -> str:
    lines = [f"• {item.title}" for item in items[:limit]]
    body = "\n".join(lines)
    if len(items) > limit:
        body += f"\n...and {len(items) - limit} more"
    return body


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def section_notification_title(section_id: SectionId, count: int) -> str:
    return f"{count} {NOTIFICATION_SECTION_NAMES[section_id]} Task{_plural(count)} Due"


def category_notification_title(section_id: SectionId, category: str, count: int) -> str:
    return f"{count} {category} Task{_plural(count)} Due ({NOTIFICATION_SECTION_NAMES[section_id]})"


def due_today_title(count: int) -> str:
    return f"{count} Task{_plural(count)} Due Today"
