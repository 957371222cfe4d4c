"""
Integration Test Fixtures.

The application is exercised in-process through httpx.ASGITransport.
ASGITransport does not run the lifespan, so the document store and every
third-party client are swapped for fakes with app.dependency_overrides.
"""

import random
from typing import Any

import httpx
import pytest
from fastapi import FastAPI

from tests.fakes import FakeImageHost, FakeMessageRepository, FakeScientistRepository, FakeVerifier
from worship_bff.core.config import get_app_config, get_settings
from worship_bff.core.dependencies import (
    get_bot_verifier,
    get_image_host,
    get_message_repository,
    get_scientist_repository,
    get_wordpress_client,
)
from worship_bff.integrations.image_pool import ImagePool, get_image_pool
from worship_bff.integrations.wordpress import WordPressClient
from worship_bff.main import create_app

CMS_URL = "https://cms.test"
POOL_IMAGES = ["https://pool.test/1.jpg", "https://pool.test/2.jpg"]


class CmsStub:
    """
    Routes CMS requests to canned responses keyed by URL path.

    Unknown paths answer 404.
    """

    def __init__(self) -> None:
        self.routes: dict[str, httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, status_code: int = 200, json: Any = None) -> None:
        self.routes[path] = httpx.Response(status_code, json=json)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get(request.url.path)
        if response is None:
            return httpx.Response(404, json={"error": "unknown"})
        return response


@pytest.fixture(autouse=True)
def clear_config_caches():
    get_app_config.cache_clear()
    get_settings.cache_clear()
    yield
    get_app_config.cache_clear()
    get_settings.cache_clear()


@pytest.fixture
def cms() -> CmsStub:
    return CmsStub()


@pytest.fixture
def app(
    scientist_repo: FakeScientistRepository,
    message_repo: FakeMessageRepository,
    image_host: FakeImageHost,
    verifier: FakeVerifier,
    cms: CmsStub,
) -> FastAPI:
    application = create_app()

    cms_http = httpx.AsyncClient(transport=httpx.MockTransport(cms))
    pool = ImagePool(
        http_client=cms_http,
        source_url=None,
        fallback_url="https://pool.test/fallback.jpg",
        seed=POOL_IMAGES,
        rng=random.Random(7),
    )

    application.dependency_overrides[get_scientist_repository] = lambda: scientist_repo
    application.dependency_overrides[get_message_repository] = lambda: message_repo
    application.dependency_overrides[get_image_host] = lambda: image_host
    application.dependency_overrides[get_bot_verifier] = lambda: verifier
    application.dependency_overrides[get_wordpress_client] = lambda: WordPressClient(cms_http, CMS_URL)
    application.dependency_overrides[get_image_pool] = lambda: pool
    return application


@pytest.fixture
async def client(app: FastAPI):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
