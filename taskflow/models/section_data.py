"""Section aggregate returned by storage and the API."""

from typing import List

from pydantic import BaseModel, Field

from taskflow.models.blog_entry import BlogEntry
from taskflow.models.recurring_task import RecurringTask
from taskflow.models.section import SectionId
from taskflow.models.task import Task


class SectionData(BaseModel):
    """Aggregate view of one section.

    Task sections fill `tasks` and `recurring_tasks`; the blog section fills `entries`.
    """

    id: SectionId
    name: str
    color: str
    categories: List[str] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    recurring_tasks: List[RecurringTask] = Field(default_factory=list)
    entries: List[BlogEntry] = Field(default_factory=list)
