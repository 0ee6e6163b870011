"""Blog / learning entry data model for taskflow."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class BlogStatus(str, Enum):
    """Learning progression of a blog entry."""
    TO_READ = "to-read"
    READING = "reading"
    PRACTICED = "practiced"
    EXPERT = "expert"

    def advance(self) -> Optional["BlogStatus"]:
        """Next status in to-read -> reading -> practiced -> expert, or None at the end."""
        return _NEXT_BLOG_STATUS[self]


_NEXT_BLOG_STATUS = {
    BlogStatus.TO_READ: BlogStatus.READING,
    BlogStatus.READING: BlogStatus.PRACTICED,
    BlogStatus.PRACTICED: BlogStatus.EXPERT,
    BlogStatus.EXPERT: None,
}


class BlogEntry(BaseModel):
    """Canonical BlogEntry model."""

    id: str = Field(..., description="Unique entry identifier (UUID v4)")
    title: str = Field(..., min_length=1, description="Entry title")
    description: str = Field("", description="Entry description")
    status: BlogStatus = Field(BlogStatus.TO_READ, description="Learning status")
    due_date: date = Field(..., description="Target date (date-only)")
    category: str = Field("", description="Category name within the blog section")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
