"""
Scientist Document.

One record per notable figure shown on the site.
"""

from datetime import datetime

from pydantic import Field

from worship_bff.core.utils import utc_now
from worship_bff.models.base import Document


class Scientist(Document):
    """
    Stored scientist.

    `image` holds either an absolute URL or an image host id; thumbnails
    are derived when the document is rendered, never stored.
    """

    name: str
    title: str | None = None
    description: str | None = None
    achievements: list[str] = Field(default_factory=list)
    birth_year: int | None = None
    death_year: int | None = None
    subject: str
    color: str
    image: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"<Scientist(id={self.id}, name={self.name!r})>"
