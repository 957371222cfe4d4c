"""
Scientist Service.

Business logic for the scientists collection. Owns the image rules:

- a new record needs an image, either an uploaded file (stored on the
  image host) or an image reference supplied by the client;
- replacing or deleting a record discards the previous hosted image on a
  best-effort basis;
- thumbnails and delivery URLs are derived when a record is rendered.
"""

import random
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

from worship_bff.core.exceptions import ApplicationError, ValidationError
from worship_bff.core.utils import is_absolute_url
from worship_bff.integrations.image_host import ImageHost
from worship_bff.models.scientist import Scientist
from worship_bff.repositories.scientist import ScientistRepository
from worship_bff.schemas.scientist import ScientistCreate, ScientistResponse, ScientistUpdate
from worship_bff.services.base import BaseService

DEFAULT_PALETTE = [
    "#3498db",
    "#e74c3c",
    "#2ecc71",
    "#f1c40f",
    "#9b59b6",
    "#1abc9c",
    "#e67e22",
    "#34495e",
]

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
DEFAULT_ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png", "gif")

REQUIRED_FIELDS = ("name", "subject", "image", "color")


@dataclass(frozen=True)
class ImageUpload:
    """An image file received with a request."""

    filename: str
    content: bytes

    @property
    def extension(self) -> str:
        return PurePath(self.filename).suffix.lstrip(".").lower()


class ScientistService(BaseService):
    """
    Service for scientist business logic.

    Args:
        repo: Scientist repository
        image_host: Image storage provider
        palette: Colours assigned to records created without one
        max_upload_bytes: Largest accepted image file
        allowed_extensions: Accepted image file extensions (lower case)
        rng: Randomness source for colour selection
    """

    def __init__(
        self,
        repo: ScientistRepository,
        image_host: ImageHost,
        palette: list[str] | None = None,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        allowed_extensions: tuple[str, ...] | list[str] = DEFAULT_ALLOWED_EXTENSIONS,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__()
        self.repo = repo
        self.image_host = image_host
        self.palette = list(palette or DEFAULT_PALETTE)
        self.max_upload_bytes = max_upload_bytes
        self.allowed_extensions = {ext.lower() for ext in allowed_extensions}
        self._rng = rng or random.Random()

    def validate_upload(self, upload: ImageUpload) -> None:
        """
        Raises:
            ValidationError: Empty, oversized or non-image file
        """
        if upload.extension not in self.allowed_extensions:
            raise ValidationError(
                "Only image files are allowed",
                details={
                    "filename": upload.filename,
                    "allowed_extensions": sorted(self.allowed_extensions),
                },
            )
        if not upload.content:
            raise ValidationError("Uploaded image is empty", details={"filename": upload.filename})
        if len(upload.content) > self.max_upload_bytes:
            raise ValidationError(
                "Uploaded image is too large",
                details={"size": len(upload.content), "max_bytes": self.max_upload_bytes},
            )

    def pick_color(self) -> str:
        return self._rng.choice(self.palette)

    async def _store_upload(self, upload: ImageUpload) -> str:
        self.validate_upload(upload)
        uploaded = await self.image_host.upload(upload.content, upload.filename)
        return uploaded.remote_id

    async def _discard_image(self, image: str | None) -> None:
        """Remove a hosted image. Failures are logged, never raised."""
        if not image or is_absolute_url(image):
            return
        try:
            await self.image_host.delete(image)
        except ApplicationError as e:
            self._logger.warning(
                "Could not delete hosted image",
                extra={"remote_id": image, "error": e.message},
            )

    def to_response(self, scientist: Scientist) -> ScientistResponse:
        """Render a scientist with its derived image URLs."""
        if is_absolute_url(scientist.image):
            image_url = thumbnail = scientist.image
        else:
            image_url = self.image_host.url_for(scientist.image)
            thumbnail = self.image_host.thumbnail_url(scientist.image)

        return ScientistResponse(
            **scientist.model_dump(exclude={"id"}),
            id=scientist.id,
            image_url=image_url,
            thumbnail=thumbnail,
        )

    async def list_scientists(self) -> list[Scientist]:
        """All scientists, newest first."""
        return await self._execute_db_operation(
            "list_scientists",
            self.repo.list_recent(),
        )

    async def get_scientist(self, scientist_id: str) -> Scientist:
        """
        Raises:
            NotFoundError: If the scientist does not exist
        """
        return await self._execute_db_operation(
            "get_scientist",
            self.repo.get_by_id(scientist_id),
        )

    async def create_scientist(
        self,
        data: ScientistCreate,
        upload: ImageUpload | None = None,
    ) -> Scientist:
        """
        Create a scientist.

        An uploaded file wins over an image reference in the payload.

        Raises:
            ValidationError: Missing image or invalid upload
        """
        fields = data.model_dump(exclude={"image", "color"})

        if upload is not None:
            image = await self._store_upload(upload)
        elif data.image:
            image = data.image
        else:
            raise ValidationError(
                "An image file or image URL is required",
                details={"missing_fields": ["image"]},
            )

        self._log_operation("Creating scientist", name=data.name, uploaded=upload is not None)

        try:
            scientist = await self._execute_db_operation(
                "create_scientist",
                self.repo.create(**fields, image=image, color=data.color or self.pick_color()),
            )
        except ApplicationError:
            if upload is not None:
                await self._discard_image(image)
            raise

        self._log_debug("Scientist created", scientist_id=scientist.id)
        return scientist

    async def update_scientist(
        self,
        scientist_id: str,
        data: ScientistUpdate,
        upload: ImageUpload | None = None,
    ) -> Scientist:
        """
        Apply a partial update. Only fields present in the request change.

        Raises:
            NotFoundError: If the scientist does not exist
            ValidationError: A required field cleared, or an invalid upload
        """
        changes: dict[str, Any] = data.model_dump(exclude_unset=True)
        self._validate_required(changes, [name for name in REQUIRED_FIELDS if name in changes])
        if changes.get("achievements") is None:
            changes.pop("achievements", None)

        current = await self.get_scientist(scientist_id)

        if upload is not None:
            changes["image"] = await self._store_upload(upload)

        self._log_operation("Updating scientist", scientist_id=scientist_id, fields=sorted(changes))
        scientist = await self._execute_db_operation(
            "update_scientist",
            self.repo.update(scientist_id, **changes),
        )

        if "image" in changes and changes["image"] != current.image:
            await self._discard_image(current.image)

        return scientist

    async def delete_scientist(self, scientist_id: str) -> None:
        """
        Delete a scientist and its hosted image.

        Raises:
            NotFoundError: If the scientist does not exist
        """
        scientist = await self.get_scientist(scientist_id)
        await self._execute_db_operation(
            "delete_scientist",
            self.repo.delete(scientist_id),
        )
        self._log_operation("Scientist deleted", scientist_id=scientist_id)
        await self._discard_image(scientist.image)
