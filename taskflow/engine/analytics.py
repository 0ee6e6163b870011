"""Completion analytics over task sections and blog entries."""

from typing import Dict, List, Mapping, Sequence

from pydantic import BaseModel, Field

from taskflow.models.blog_entry import BlogEntry, BlogStatus
from taskflow.models.section import SectionId, TASK_SECTIONS
from taskflow.models.section_data import SectionData
from taskflow.models.task import TaskStatus


class SectionAnalytics(BaseModel):
    id: SectionId
    name: str
    total_tasks: int
    completed_tasks: int
    completion_rate: float


class TaskAnalytics(BaseModel):
    total_tasks: int = 0
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    todo_tasks: int = 0
    completion_rate: float = 0.0
    category_breakdown: Dict[str, int] = Field(default_factory=dict)
    sections: List[SectionAnalytics] = Field(default_factory=list)


class BlogAnalytics(BaseModel):
    total_entries: int = 0
    to_read: int = 0
    reading: int = 0
    practiced: int = 0
    expert: int = 0
    completion_rate: float = 0.0
    category_breakdown: Dict[str, int] = Field(default_factory=dict)


def _rate(part: int, total: int) -> float:
    """Percentage rounded to two decimals."""
    return round(part / total * 100, 2) if total else 0.0


def compute_task_analytics(sections: Mapping[SectionId, SectionData]) -> TaskAnalytics:
    """Status counts and completion rates over household, personal and official tasks."""
    counts = {status: 0 for status in TaskStatus}
    category_breakdown: Dict[str, int] = {}
    per_section: List[SectionAnalytics] = []

    for section_id in TASK_SECTIONS:
        section = sections.get(section_id)
        if section is None:
            continue
        completed = 0
        for task in section.tasks:
            counts[task.status] += 1
            if task.status.is_completed:
                completed += 1
            if task.category:
                category_breakdown[task.category] = category_breakdown.get(task.category, 0) + 1
        per_section.append(
            SectionAnalytics(
                id=section_id,
                name=section.name,
                total_tasks=len(section.tasks),
                completed_tasks=completed,
                completion_rate=_rate(completed, len(section.tasks)),
            )
        )

    total = sum(counts.values())
    return TaskAnalytics(
        total_tasks=total,
        completed_tasks=counts[TaskStatus.COMPLETED],
        in_progress_tasks=counts[TaskStatus.IN_PROGRESS],
        todo_tasks=counts[TaskStatus.TODO],
        completion_rate=_rate(counts[TaskStatus.COMPLETED], total),
        category_breakdown=category_breakdown,
        sections=per_section,
    )


def compute_blog_analytics(entries: Sequence[BlogEntry]) -> BlogAnalytics:
    """Status counts for blog entries; practiced and expert count as complete."""
    counts = {status: 0 for status in BlogStatus}
    category_breakdown: Dict[str, int] = {}
    for entry in entries:
        counts[entry.status] += 1
        if entry.category:
            category_breakdown[entry.category] = category_breakdown.get(entry.category, 0) + 1

    total = len(entries)
    return BlogAnalytics(
        total_entries=total,
        to_read=counts[BlogStatus.TO_READ],
        reading=counts[BlogStatus.READING],
        practiced=counts[BlogStatus.PRACTICED],
        expert=counts[BlogStatus.EXPERT],
        completion_rate=_rate(counts[BlogStatus.PRACTICED] + counts[BlogStatus.EXPERT], total),
        category_breakdown=category_breakdown,
    )
