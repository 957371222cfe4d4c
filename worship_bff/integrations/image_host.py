"""
Image Host Client.

Stores uploaded images on a Cloudinary-compatible managed service and
builds delivery URLs for transformed derivatives. Talks to the REST API
directly with signed requests over the shared httpx client.

Signing: the request parameters (excluding file and api_key) are sorted
by name, joined as "k=v&k=v", suffixed with the API secret and SHA-1
hashed.
"""

import hashlib
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from worship_bff.core.exceptions import UpstreamError
from worship_bff.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImageTransform:
    """Derived image geometry and quality."""

    width: int
    height: int
    crop: str = "fill"
    quality: int = 80

    def to_path(self) -> str:
        return f"c_{self.crop},w_{self.width},h_{self.height},q_{self.quality}"


THUMBNAIL = ImageTransform(width=200, height=200, crop="fill", quality=80)


@dataclass(frozen=True)
class UploadedImage:
    remote_id: str
    url: str


class ImageHost(ABC):
    """Contract for image storage providers."""

    thumbnail: ImageTransform = THUMBNAIL

    @abstractmethod
    async def upload(self, content: bytes, filename: str) -> UploadedImage:
        """Store an image and return its remote id and delivery URL."""

    @abstractmethod
    def url_for(self, remote_id: str, transform: ImageTransform | None = None) -> str:
        """Delivery URL for a stored image, optionally transformed."""

    @abstractmethod
    async def delete(self, remote_id: str) -> None:
        """Remove a stored image."""

    def thumbnail_url(self, remote_id: str) -> str:
        return self.url_for(remote_id, self.thumbnail)


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Cloudinary request signature."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()


class CloudinaryImageHost(ImageHost):
    """
    Cloudinary REST client.

    Args:
        http_client: Shared outbound client (carries the request timeout)
        cloud_name: Account cloud name
        api_key: API key
        api_secret: API secret used for signing
        api_base: Upload API root, e.g. https://api.cloudinary.com/v1_1
        delivery_base: Delivery root, e.g. https://res.cloudinary.com
        folder: Folder new uploads are placed in
        thumbnail: Transform used for thumbnail URLs
        clock: Returns the current unix time (injectable for signing tests)
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        api_base: str = "https://api.cloudinary.com/v1_1",
        delivery_base: str = "https://res.cloudinary.com",
        folder: str = "scientists",
        thumbnail: ImageTransform = THUMBNAIL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._http = http_client
        self.cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._api_base = api_base.rstrip("/")
        self._delivery_base = delivery_base.rstrip("/")
        self.folder = folder
        self.thumbnail = thumbnail
        self._clock = clock

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self._api_key and self._api_secret)

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise UpstreamError("Image host is not configured")

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "timestamp": int(self._clock())}
        return {
            **params,
            "api_key": self._api_key,
            "signature": sign_params(params, self._api_secret),
        }

    async def _post(self, action: str, data: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        url = f"{self._api_base}/{self.cloud_name}/image/{action}"
        try:
            response = await self._http.post(url, data=data, **kwargs)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Image host {action} failed",
                details={"status": e.response.status_code, "body": e.response.text[:500]},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(
                f"Image host {action} failed",
                details={"error": str(e)},
            ) from e

        if not isinstance(payload, dict):
            raise UpstreamError(
                f"Image host returned an unexpected {action} response",
                details={"body": response.text[:500]},
            )
        return payload

    async def upload(self, content: bytes, filename: str) -> UploadedImage:
        self._require_configured()

        payload = await self._post(
            "upload",
            self._signed({"folder": self.folder}),
            files={"file": (filename, content)},
        )
        try:
            uploaded = UploadedImage(remote_id=payload["public_id"], url=payload["secure_url"])
        except KeyError as e:
            raise UpstreamError(
                "Image host returned an unexpected upload response",
                details={"missing": str(e)},
            ) from e

        logger.info(
            "Image uploaded",
            extra={"remote_id": uploaded.remote_id, "bytes": len(content)},
        )
        return uploaded

    def url_for(self, remote_id: str, transform: ImageTransform | None = None) -> str:
        parts = [self._delivery_base, self.cloud_name, "image", "upload"]
        if transform is not None:
            parts.append(transform.to_path())
        parts.append(remote_id)
        return "/".join(parts)

    async def delete(self, remote_id: str) -> None:
        self._require_configured()

        payload = await self._post("destroy", self._signed({"public_id": remote_id}))
        result = payload.get("result")
        if result == "not found":
            logger.info("Image already absent from host", extra={"remote_id": remote_id})
        elif result != "ok":
            raise UpstreamError(
                "Image host destroy failed",
                details={"remote_id": remote_id, "result": result},
            )
        else:
            logger.info("Image deleted", extra={"remote_id": remote_id})
