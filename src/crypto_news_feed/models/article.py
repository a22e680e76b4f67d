"""
Article and filter state models.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Source filter value that matches every article
ALL_SOURCES = "all"


class Article(BaseModel):
    """A normalized feed item.

    Articles are immutable once parsed. ``link`` is the canonical identity key
    alongside ``id``; see ``ArticleStore.merge`` for the duplicate rules.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Fingerprint of title + link")
    title: str = Field(..., min_length=1, description="Plain-text title")
    link: str = Field(..., min_length=1, description="Article URL")
    description: str = Field(default="", description="Plain-text, truncated description")
    published_at: datetime = Field(..., description="Publication time (fetch time if absent)")
    source_name: str = Field(..., description="Registry name of the originating feed")
    source_color: str = Field(default="#888888", description="Display color of the source")

    @field_validator("published_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC so articles from any feed compare."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def __repr__(self) -> str:
        return f"<Article(id='{self.id}', source='{self.source_name}', title='{self.title}')>"


@dataclass
class FilterState:
    """Active source filter and free-text search term."""

    active_source: str = ALL_SOURCES
    search_term: str = ""

    @property
    def is_default(self) -> bool:
        return self.active_source == ALL_SOURCES and not self.search_term.strip()
