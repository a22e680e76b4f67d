"""
Feed descriptor model.
"""

from pydantic import BaseModel, ConfigDict, Field


class FeedDescriptor(BaseModel):
    """A feed source: display name, feed URL and display color."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, max_length=200, description="Source display name")
    url: str = Field(..., min_length=1, description="Feed URL")
    color: str = Field(default="#888888", description="Display color")

    def __str__(self) -> str:
        return self.name
