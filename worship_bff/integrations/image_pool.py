"""
Fallback Image Pool.

Supplies a random featured image for CMS items that have none. The pool
is seeded from configuration and periodically refreshed from a remote
list. It never fails a request:

    fresh cache            → random cached image
    expired cache          → random stale image, refresh scheduled in background
    empty cache            → refresh inline, then random image
    nothing available      → static fallback URL

After a failed refresh no new fetch starts for retry_after_seconds.

Concurrent refreshes may race; the last successful one wins.
"""

import asyncio
import random
import time
from collections.abc import Callable
from typing import Any

import httpx

from worship_bff.core.logging import get_logger

logger = get_logger(__name__)


def _extract_urls(payload: Any) -> list[str]:
    """
    Accept a JSON array of URL strings or of objects carrying
    download_url / url (the picsum.photos list shape).
    """
    if isinstance(payload, dict):
        payload = payload.get("images", [])
    if not isinstance(payload, list):
        return []

    urls = []
    for item in payload:
        if isinstance(item, str):
            urls.append(item)
        elif isinstance(item, dict):
            url = item.get("download_url") or item.get("url")
            if isinstance(url, str):
                urls.append(url)
    return [url for url in urls if url]


class ImagePool:
    """
    Time-boxed in-memory cache of image URLs.

    Args:
        http_client: Client used to fetch the source list
        source_url: Remote list to refresh from; None disables refreshing
        fallback_url: Returned when the pool is empty and cannot be filled
        ttl_seconds: How long a loaded list counts as fresh
        retry_after_seconds: Pause after a failed refresh before fetching again
        seed: Initial images, served until the first refresh succeeds
        clock: Monotonic clock (injectable for expiry tests)
        rng: Randomness source for picking an image
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        source_url: str | None,
        fallback_url: str,
        ttl_seconds: float = 3600,
        retry_after_seconds: float = 60,
        seed: list[str] | None = None,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self._http = http_client
        self.source_url = source_url
        self.fallback_url = fallback_url
        self.ttl_seconds = ttl_seconds
        self.retry_after_seconds = retry_after_seconds
        self._images: list[str] = list(seed or [])
        self._loaded_at: float | None = None
        self._failed_at: float | None = None
        self._clock = clock
        self._rng = rng or random.Random()
        self._refresh_task: asyncio.Task | None = None

    @property
    def images(self) -> list[str]:
        return list(self._images)

    def is_expired(self) -> bool:
        if self._loaded_at is None:
            return True
        return self._clock() - self._loaded_at >= self.ttl_seconds

    def is_backing_off(self) -> bool:
        """True while a recent failed refresh suppresses new fetches."""
        if self._failed_at is None:
            return False
        return self._clock() - self._failed_at < self.retry_after_seconds

    async def refresh(self) -> bool:
        """
        Reload the pool from the source list.

        Returns:
            True when the cache was replaced; False when the stale cache
            was kept because the fetch failed or returned nothing usable
        """
        if not self.source_url:
            return False

        try:
            response = await self._http.get(self.source_url)
            response.raise_for_status()
            urls = _extract_urls(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "Image pool refresh failed, keeping cached images",
                extra={"error": str(e), "cached": len(self._images)},
            )
            self._failed_at = self._clock()
            return False

        if not urls:
            logger.warning("Image pool source returned no images", extra={"source": self.source_url})
            self._failed_at = self._clock()
            return False

        self._images = urls
        self._loaded_at = self._clock()
        self._failed_at = None
        logger.debug("Image pool refreshed", extra={"count": len(urls)})
        return True

    def _schedule_refresh(self) -> None:
        if self._refresh_task is not None and not self._refresh_task.done():
            return
        self._refresh_task = asyncio.create_task(self.refresh())

    async def get(self) -> str:
        """Return a random image URL. Never raises."""
        if self.source_url and self.is_expired() and not self.is_backing_off():
            if self._images:
                self._schedule_refresh()
            else:
                await self.refresh()

        if not self._images:
            return self.fallback_url
        return self._rng.choice(self._images)

    async def close(self) -> None:
        """Cancel an in-flight background refresh."""
        if self._refresh_task is not None and not self._refresh_task.done():
            self._refresh_task.cancel()
            try:
                await self._refresh_task
            except asyncio.CancelledError:
                pass
        self._refresh_task = None


_pool: ImagePool | None = None


def get_image_pool() -> ImagePool:
    """Get the process-wide image pool, creating it on first use."""
    global _pool
    if _pool is None:
        from worship_bff.core.config import get_app_config
        from worship_bff.integrations.http import get_http_client

        pool_config = get_app_config().content.image_pool
        _pool = ImagePool(
            http_client=get_http_client(),
            source_url=pool_config.source_url,
            fallback_url=pool_config.fallback_url,
            ttl_seconds=pool_config.ttl_seconds,
            retry_after_seconds=pool_config.retry_after_seconds,
            seed=pool_config.seed,
        )
    return _pool


async def close_image_pool() -> None:
    """Stop background refreshes and drop the process-wide pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
    _pool = None
