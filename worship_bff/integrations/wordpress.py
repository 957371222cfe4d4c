"""
WordPress Client.

Raw access to the two CMS APIs the site reads from:

- Self-hosted WordPress REST API (wp/v2) for pages, looked up by slug
  with embedded author and featured media.
- WordPress.com public API (v1.1) for posts, addressed by the hostname
  of the configured WP_URL.

Returns decoded JSON untouched; normalization happens in
services.content.
"""

from typing import Any
from urllib.parse import urlsplit

import httpx

from worship_bff.core.exceptions import UpstreamError
from worship_bff.core.logging import get_logger

logger = get_logger(__name__)


class WordPressClient:
    """
    Args:
        http_client: Shared outbound client (carries the request timeout)
        base_url: WP_URL of the self-hosted site
        wpcom_api_base: WordPress.com sites API root
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str | None,
        wpcom_api_base: str = "https://public-api.wordpress.com/rest/v1.1/sites",
    ) -> None:
        self._http = http_client
        self.base_url = (base_url or "").rstrip("/")
        self.wpcom_api_base = wpcom_api_base.rstrip("/")

    def _require_base_url(self) -> str:
        if not self.base_url:
            raise UpstreamError("WordPress URL is not configured")
        return self.base_url

    @property
    def site_domain(self) -> str:
        """Hostname of WP_URL, used as the WordPress.com site identifier."""
        hostname = urlsplit(self._require_base_url()).hostname
        if not hostname:
            raise UpstreamError("WordPress URL is not a valid URL", details={"wp_url": self.base_url})
        return hostname

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        allow_not_found: bool = False,
    ) -> Any:
        logger.debug("Requesting WordPress API", extra={"url": url, "params": params})
        try:
            response = await self._http.get(url, params=params)
        except httpx.TimeoutException as e:
            raise UpstreamError(
                "WordPress request timed out",
                details={"url": url, "error": str(e)},
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(
                "Could not connect to WordPress",
                details={"url": url, "error": str(e)},
            ) from e

        if allow_not_found and response.status_code == 404:
            return None

        if response.is_error:
            raise UpstreamError(
                f"WordPress returned {response.status_code}",
                details={
                    "url": url,
                    "status": response.status_code,
                    "reason": response.reason_phrase,
                    "body": response.text[:500],
                },
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                "WordPress returned invalid JSON",
                details={"url": url, "error": str(e)},
            ) from e

    async def get_page(self, slug: str) -> dict[str, Any] | None:
        """First page matching slug (wp/v2, embedded), or None."""
        url = f"{self._require_base_url()}/wp-json/wp/v2/pages"
        data = await self._get_json(url, params={"slug": slug, "_embed": ""})
        if not isinstance(data, list) or not data:
            return None
        return data[0]

    async def get_posts(self) -> list[dict[str, Any]] | None:
        """Latest posts from WordPress.com, or None when the response has none."""
        url = f"{self.wpcom_api_base}/{self.site_domain}/posts"
        data = await self._get_json(url)
        if not isinstance(data, dict) or not isinstance(data.get("posts"), list):
            return None
        return data["posts"]

    async def get_post(self, post_id: str) -> dict[str, Any] | None:
        """Single WordPress.com post, or None when it does not exist."""
        url = f"{self.wpcom_api_base}/{self.site_domain}/posts/{post_id}"
        data = await self._get_json(url, allow_not_found=True)
        if not isinstance(data, dict) or not data:
            return None
        return data
