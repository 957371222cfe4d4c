"""
Unit Tests for Scientist Service.

Uses the in-memory repository and image host fakes from the root conftest.
"""

from unittest.mock import AsyncMock

import httpx
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from worship_bff.core.exceptions import DatabaseError, NotFoundError, ValidationError
from worship_bff.integrations.image_host import CloudinaryImageHost
from worship_bff.schemas.scientist import ScientistCreate, ScientistUpdate
from worship_bff.services.scientist import DEFAULT_PALETTE, ImageUpload, ScientistService
from tests.fakes import FakeImageHost

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def service(scientist_repo, image_host, rng) -> ScientistService:
    return ScientistService(repo=scientist_repo, image_host=image_host, rng=rng)


def _create_data(**overrides) -> ScientistCreate:
    fields = {"name": "Isaac Newton", "subject": "Physics"}
    fields.update(overrides)
    return ScientistCreate(**fields)


class TestCreate:
    """Tests for scientist creation."""

    @pytest.mark.asyncio
    async def test_create_with_image_url(self, service, image_host):
        """Should store the URL and use it as its own thumbnail."""
        scientist = await service.create_scientist(_create_data(image="http://x/y.png"))
        response = service.to_response(scientist)

        assert scientist.image == "http://x/y.png"
        assert response.thumbnail == "http://x/y.png"
        assert response.image_url == "http://x/y.png"
        assert image_host.uploads == []

    @pytest.mark.asyncio
    async def test_create_with_upload(self, service, image_host):
        """Should upload the file and derive a hosted thumbnail."""
        upload = ImageUpload(filename="newton.PNG", content=PNG)

        scientist = await service.create_scientist(_create_data(), upload)
        response = service.to_response(scientist)

        assert image_host.uploads == [("newton.PNG", PNG)]
        assert scientist.image == "scientists/upload-1"
        assert response.thumbnail == (
            "https://images.test/c_fill,w_200,h_200,q_80/scientists/upload-1"
        )
        assert response.image_url == "https://images.test/scientists/upload-1"

    @pytest.mark.asyncio
    async def test_upload_wins_over_url(self, service):
        """Should prefer the uploaded file when both are given."""
        upload = ImageUpload(filename="a.jpg", content=PNG)

        scientist = await service.create_scientist(_create_data(image="http://x/y.png"), upload)

        assert scientist.image == "scientists/upload-1"

    @pytest.mark.asyncio
    async def test_create_without_image_fails(self, service, scientist_repo):
        """Should reject a scientist with neither file nor URL."""
        with pytest.raises(ValidationError) as exc_info:
            await service.create_scientist(_create_data())

        assert exc_info.value.details == {"missing_fields": ["image"]}
        assert scientist_repo.items == {}

    @pytest.mark.asyncio
    async def test_random_color_from_palette(self, service):
        """Should assign a palette colour when none is given."""
        scientist = await service.create_scientist(_create_data(image="http://x/y.png"))
        assert scientist.color in DEFAULT_PALETTE

    @pytest.mark.asyncio
    async def test_explicit_color_kept(self, service):
        """Should keep a client-specified colour."""
        scientist = await service.create_scientist(
            _create_data(image="http://x/y.png", color="#123456")
        )
        assert scientist.color == "#123456"

    @pytest.mark.asyncio
    async def test_fields_are_trimmed(self, service):
        """Should strip whitespace from strings and achievements."""
        data = ScientistCreate(
            name="  Marie Curie ",
            subject=" Chemistry",
            achievements=[" Nobel Prize ", "  ", "Radium"],
            image="http://x/c.png",
        )

        scientist = await service.create_scientist(data)

        assert scientist.name == "Marie Curie"
        assert scientist.subject == "Chemistry"
        assert scientist.achievements == ["Nobel Prize", "Radium"]

    @pytest.mark.asyncio
    async def test_database_error_discards_upload(self, scientist_repo, image_host, rng):
        """Should delete the uploaded image when the insert fails."""
        scientist_repo.create = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))
        service = ScientistService(repo=scientist_repo, image_host=image_host, rng=rng)

        with pytest.raises(DatabaseError):
            await service.create_scientist(
                _create_data(), ImageUpload(filename="a.png", content=PNG),
            )

        assert image_host.deleted == ["scientists/upload-1"]


class TestUploadValidation:
    """Tests for file checks."""

    @pytest.mark.parametrize("filename", ["a.jpg", "a.JPEG", "a.png", "a.Gif"])
    def test_allowed_extensions(self, service, filename):
        """Should accept image extensions case-insensitively."""
        service.validate_upload(ImageUpload(filename=filename, content=PNG))

    @pytest.mark.parametrize("filename", ["a.pdf", "a.exe", "noext", "a.png.txt"])
    def test_rejected_extensions(self, service, filename):
        """Should reject anything that is not an allowed image type."""
        with pytest.raises(ValidationError):
            service.validate_upload(ImageUpload(filename=filename, content=PNG))

    def test_too_large(self, scientist_repo, image_host):
        """Should reject files above the size limit."""
        service = ScientistService(scientist_repo, image_host, max_upload_bytes=10)

        with pytest.raises(ValidationError, match="too large"):
            service.validate_upload(ImageUpload(filename="a.png", content=b"x" * 11))

    def test_default_limit_is_five_megabytes(self, service):
        """Should accept exactly 5 MB and reject one byte more."""
        service.validate_upload(ImageUpload(filename="a.png", content=b"x" * 5 * 1024 * 1024))
        with pytest.raises(ValidationError):
            service.validate_upload(
                ImageUpload(filename="a.png", content=b"x" * (5 * 1024 * 1024 + 1))
            )

    @pytest.mark.asyncio
    async def test_invalid_upload_never_reaches_host(self, service, image_host):
        """Should validate before uploading."""
        with pytest.raises(ValidationError):
            await service.create_scientist(
                _create_data(), ImageUpload(filename="a.pdf", content=PNG),
            )
        assert image_host.uploads == []


class TestUpdate:
    """Tests for partial updates."""

    @pytest.mark.asyncio
    async def test_only_present_fields_change(self, service):
        """Should leave absent fields untouched."""
        created = await service.create_scientist(
            _create_data(image="http://x/y.png", title="Sir", birth_year=1643)
        )

        updated = await service.update_scientist(created.id, ScientistUpdate(title="Professor"))

        assert updated.title == "Professor"
        assert updated.name == "Isaac Newton"
        assert updated.birth_year == 1643
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_from_camel_case_payload(self, service):
        """Should accept camelCase keys."""
        created = await service.create_scientist(_create_data(image="http://x/y.png"))

        updated = await service.update_scientist(
            created.id, ScientistUpdate.model_validate({"deathYear": 1727}),
        )

        assert updated.death_year == 1727

    @pytest.mark.asyncio
    async def test_new_upload_replaces_and_discards_old_image(self, service, image_host):
        """Should delete the previous hosted image after replacing it."""
        created = await service.create_scientist(
            _create_data(), ImageUpload(filename="old.png", content=PNG),
        )

        updated = await service.update_scientist(
            created.id, ScientistUpdate(), ImageUpload(filename="new.png", content=PNG),
        )

        assert updated.image == "scientists/upload-2"
        assert image_host.deleted == ["scientists/upload-1"]

    @pytest.mark.asyncio
    async def test_external_url_never_deleted(self, service, image_host):
        """Should not call the host for an external image URL."""
        created = await service.create_scientist(_create_data(image="http://x/old.png"))

        await service.update_scientist(created.id, ScientistUpdate(image="http://x/new.png"))

        assert image_host.deleted == []

    @pytest.mark.asyncio
    async def test_failed_old_image_delete_is_swallowed(self, scientist_repo, rng):
        """Should complete the update even when the old image cannot be deleted."""
        host = FakeImageHost(fail_delete=True)
        service = ScientistService(repo=scientist_repo, image_host=host, rng=rng)
        created = await service.create_scientist(
            _create_data(), ImageUpload(filename="old.png", content=PNG),
        )

        updated = await service.update_scientist(
            created.id, ScientistUpdate(image="http://x/new.png"),
        )

        assert updated.image == "http://x/new.png"

    @pytest.mark.asyncio
    async def test_clearing_required_field_fails(self, service):
        """Should refuse to blank out the image."""
        created = await service.create_scientist(_create_data(image="http://x/y.png"))

        with pytest.raises(ValidationError):
            await service.update_scientist(created.id, ScientistUpdate(image=""))

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, service):
        """Should raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await service.update_scientist("0" * 24, ScientistUpdate(title="x"))


class TestDelete:
    """Tests for deletion."""

    @pytest.mark.asyncio
    async def test_delete_removes_record_and_hosted_image(self, service, scientist_repo, image_host):
        """Should delete the record and its hosted image."""
        created = await service.create_scientist(
            _create_data(), ImageUpload(filename="a.png", content=PNG),
        )

        await service.delete_scientist(created.id)

        assert scientist_repo.items == {}
        assert image_host.deleted == ["scientists/upload-1"]

    @pytest.mark.asyncio
    async def test_delete_keeps_external_image(self, service, image_host):
        """Should not touch the host for URL images."""
        created = await service.create_scientist(_create_data(image="https://x/y.png"))

        await service.delete_scientist(created.id)

        assert image_host.deleted == []

    @pytest.mark.asyncio
    async def test_delete_survives_malformed_destroy_response(self, scientist_repo, rng):
        """Should finish the delete when the host answers destroy with a JSON array."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=["unexpected"])

        host = CloudinaryImageHost(
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            cloud_name="demo",
            api_key="key-1",
            api_secret="secret-1",
        )
        service = ScientistService(repo=scientist_repo, image_host=host, rng=rng)
        created = await scientist_repo.create(
            name="Isaac Newton", subject="Physics", image="scientists/abc", color="#3498db",
        )

        await service.delete_scientist(created.id)

        assert scientist_repo.items == {}

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, service):
        """Should raise NotFoundError for a missing scientist."""
        with pytest.raises(NotFoundError):
            await service.delete_scientist("0" * 24)


class TestList:
    """Tests for listing."""

    @pytest.mark.asyncio
    async def test_newest_first(self, service):
        """Should list the most recently created scientist first."""
        first = await service.create_scientist(_create_data(name="First", image="http://x/1.png"))
        second = await service.create_scientist(_create_data(name="Second", image="http://x/2.png"))
        second.created_at = first.created_at.replace(year=first.created_at.year + 1)

        scientists = await service.list_scientists()

        assert [s.name for s in scientists] == ["Second", "First"]
