"""
Content Schemas.

Normalized representation of WordPress pages and posts. Field names
follow the WordPress convention (featured_image), not camelCase.
"""

from pydantic import BaseModel, Field


class ContentAuthor(BaseModel):
    name: str | None = None


class ContentRecord(BaseModel):
    """A page or post, with optimized HTML and a guaranteed featured image."""

    id: int | str | None = None
    title: str = ""
    content: str = ""
    excerpt: str | None = None
    date: str | None = None
    featured_image: str = Field(description="Featured image URL, backfilled when the CMS has none")
    author: ContentAuthor = Field(default_factory=ContentAuthor)
    slug: str | None = None
    link: str | None = None
