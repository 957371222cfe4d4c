"""
Shared Outbound HTTP Client.

Every call to an external service goes through one httpx.AsyncClient so
connections are pooled and every request carries the same bounded
timeout (application.yaml timeouts.external_api). Lazily created; closed
during application shutdown.
"""

import httpx

from worship_bff.core.logging import get_logger

logger = get_logger(__name__)

_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Get the shared HTTP client, creating it on first use."""
    global _client
    if _client is None or _client.is_closed:
        from worship_bff.core.config import get_app_config

        timeout = get_app_config().application.timeouts.external_api
        _client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )
        logger.debug("HTTP client created", extra={"timeout": timeout})
    return _client


async def close_http_client() -> None:
    """Close the shared HTTP client."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
        logger.debug("HTTP client closed")
    _client = None
