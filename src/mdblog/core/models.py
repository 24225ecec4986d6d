"""Data models for mdblog."""

from datetime import date

from pydantic import BaseModel, ConfigDict

# Stored for posts whose header has no usable Date: line.
NO_DATE = date.min


class Post(BaseModel):
    """A parsed blog post, ready to render."""

    model_config = ConfigDict(frozen=True)

    slug: str
    title: str = ""
    published_at: date = NO_DATE
    content_html: str = ""
    summary: str = ""
    source_name: str = ""

    @property
    def has_date(self) -> bool:
        """Return True if the header carried a valid date."""
        return self.published_at != NO_DATE
