"""
Content Service.

Fetches pages and posts from the CMS and turns them into ContentRecord:

- wp/v2 items carry {"rendered": ...} objects and embed the author and
  featured media under "_embedded";
- WordPress.com items carry flat strings, "ID", "URL" and an author
  object.

Content and excerpt are run through the optimizer, and items without a
featured image get one from the image pool.
"""

from typing import Any

from worship_bff.core.exceptions import NotFoundError
from worship_bff.integrations.image_pool import ImagePool
from worship_bff.integrations.wordpress import WordPressClient
from worship_bff.schemas.content import ContentAuthor, ContentRecord
from worship_bff.services.base import BaseService
from worship_bff.services.optimizer import DEFAULT_IMAGE_ALT, optimize_content


def _rendered(value: Any) -> str | None:
    """Unwrap a wp/v2 {"rendered": ...} field; plain strings pass through."""
    if isinstance(value, dict):
        value = value.get("rendered")
    return value if isinstance(value, str) else None


def _first_embedded(item: dict[str, Any], key: str) -> dict[str, Any]:
    embedded = item.get("_embedded")
    if not isinstance(embedded, dict):
        return {}
    entries = embedded.get(key)
    if isinstance(entries, list) and entries and isinstance(entries[0], dict):
        return entries[0]
    return {}


def _author_name(item: dict[str, Any]) -> str | None:
    author = item.get("author")
    if isinstance(author, dict):
        name = author.get("name")
        if isinstance(name, str):
            return name
    name = _first_embedded(item, "author").get("name")
    return name if isinstance(name, str) else None


def _featured_image(item: dict[str, Any]) -> str | None:
    image = item.get("featured_image")
    if isinstance(image, str) and image:
        return image
    source_url = _first_embedded(item, "wp:featuredmedia").get("source_url")
    if isinstance(source_url, str) and source_url:
        return source_url
    return None


class ContentService(BaseService):
    """
    Normalizes CMS content for the frontend.

    Args:
        client: Raw CMS client
        image_pool: Source of fallback featured images
        image_alt: Alt text the optimizer gives images without one
    """

    def __init__(
        self,
        client: WordPressClient,
        image_pool: ImagePool,
        image_alt: str = DEFAULT_IMAGE_ALT,
    ) -> None:
        super().__init__()
        self.client = client
        self.image_pool = image_pool
        self.image_alt = image_alt

    async def normalize(self, item: dict[str, Any]) -> ContentRecord:
        """Convert a wp/v2 or WordPress.com item into a ContentRecord."""
        excerpt = _rendered(item.get("excerpt"))
        featured_image = _featured_image(item) or await self.image_pool.get()

        return ContentRecord(
            id=item.get("id", item.get("ID")),
            title=_rendered(item.get("title")) or "",
            content=optimize_content(_rendered(item.get("content")), self.image_alt),
            excerpt=optimize_content(excerpt, self.image_alt) if excerpt else excerpt,
            date=item.get("date"),
            featured_image=featured_image,
            author=ContentAuthor(name=_author_name(item)),
            slug=item.get("slug"),
            link=item.get("link") or item.get("URL"),
        )

    async def fetch_page(self, slug: str) -> ContentRecord:
        """
        Raises:
            NotFoundError: No page with this slug
            UpstreamError: CMS unreachable or erroring
        """
        page = await self.client.get_page(slug)
        if page is None:
            raise NotFoundError(f"Page not found: {slug}")
        self._log_debug("Page fetched", slug=slug)
        return await self.normalize(page)

    async def fetch_posts(self) -> list[ContentRecord]:
        """
        Raises:
            NotFoundError: The CMS returned no post list
            UpstreamError: CMS unreachable or erroring
        """
        posts = await self.client.get_posts()
        if posts is None:
            raise NotFoundError("No posts found")
        self._log_debug("Posts fetched", count=len(posts))
        return [await self.normalize(post) for post in posts if isinstance(post, dict)]

    async def fetch_post(self, post_id: str) -> ContentRecord:
        """
        Raises:
            NotFoundError: No post with this id
            UpstreamError: CMS unreachable or erroring
        """
        post = await self.client.get_post(post_id)
        if post is None:
            raise NotFoundError(f"Post not found: {post_id}")
        return await self.normalize(post)
