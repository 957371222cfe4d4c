"""
Unit Tests for HTTP Middleware.

Each middleware is mounted on a bare Starlette app and exercised through
httpx ASGITransport.
"""

import httpx
import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from worship_bff.core.middleware import OriginGuardMiddleware, RequestContextMiddleware

ALLOWED = "https://worship.example.org"


async def echo_request_id(request: Request) -> JSONResponse:
    return JSONResponse({"request_id": request.state.request_id})


async def ok(request: Request) -> JSONResponse:
    return JSONResponse({"ok": True})


def _client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


class TestRequestContextMiddleware:
    """Tests for RequestContextMiddleware."""

    @pytest.fixture
    def app(self) -> Starlette:
        app = Starlette(routes=[Route("/echo", echo_request_id)])
        app.add_middleware(RequestContextMiddleware)
        return app

    @pytest.mark.asyncio
    async def test_generates_request_id(self, app):
        """Should create a request id and expose it in state and headers."""
        async with _client(app) as client:
            response = await client.get("/echo")

        request_id = response.headers["X-Request-ID"]
        assert request_id
        assert response.json()["request_id"] == request_id

    @pytest.mark.asyncio
    async def test_propagates_request_id(self, app):
        """Should reuse an incoming X-Request-ID."""
        async with _client(app) as client:
            response = await client.get("/echo", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_adds_response_time(self, app):
        """Should add X-Response-Time in milliseconds."""
        async with _client(app) as client:
            response = await client.get("/echo")

        assert response.headers["X-Response-Time"].endswith("ms")


class TestOriginGuardMiddleware:
    """Tests for OriginGuardMiddleware."""

    @pytest.fixture
    def app(self) -> Starlette:
        app = Starlette(routes=[Route("/ok", ok, methods=["GET", "POST"])])
        app.add_middleware(OriginGuardMiddleware, allowed_origins=[ALLOWED])
        return app

    @pytest.mark.asyncio
    async def test_allowed_origin_passes(self, app):
        async with _client(app) as client:
            response = await client.get("/ok", headers={"Origin": ALLOWED})
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_missing_origin_passes(self, app):
        """Should allow requests without an Origin header."""
        async with _client(app) as client:
            response = await client.get("/ok")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_disallowed_origin_rejected(self, app):
        """Should answer 403 with the error envelope."""
        async with _client(app) as client:
            response = await client.post("/ok", headers={"Origin": "https://evil.test"})

        body = response.json()
        assert response.status_code == 403
        assert body["error"]["code"] == "CORS_ORIGIN_NOT_ALLOWED"
        assert body["error"]["details"] == {"origin": "https://evil.test"}

    @pytest.mark.asyncio
    async def test_wildcard_allows_everything(self):
        app = Starlette(routes=[Route("/ok", ok)])
        app.add_middleware(OriginGuardMiddleware, allowed_origins=["*"])

        async with _client(app) as client:
            response = await client.get("/ok", headers={"Origin": "https://any.test"})
        assert response.status_code == 200
