"""Section identifiers for taskflow."""

from enum import Enum


class SectionId(str, Enum):
    """The four fixed sections that partition tasks and categories."""
    HOUSEHOLD = "household"
    PERSONAL = "personal"
    OFFICIAL = "official"
    BLOG = "blog"

    @property
    def holds_tasks(self) -> bool:
        """Whether the section holds tasks (blog holds blog entries instead)."""
        return self is not SectionId.BLOG


TASK_SECTIONS = (SectionId.HOUSEHOLD, SectionId.PERSONAL, SectionId.OFFICIAL)
