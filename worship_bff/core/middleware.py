"""
HTTP Middleware.

RequestContextMiddleware - request ID, timing and structlog context binding.
OriginGuardMiddleware    - rejects requests from origins outside the CORS
                           allow-list with 403 before any route runs.
"""

import uuid
from datetime import datetime, timezone

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from worship_bff.core.exception_handlers import build_error_response
from worship_bff.core.exceptions import OriginNotAllowedError
from worship_bff.core.logging import get_logger

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds request context to every request.

    - Generates or propagates request ID (X-Request-ID header)
    - Records request timing (X-Response-Time header)
    - Binds request_id, method and path to structlog for every log line
      emitted while the request is being handled
    - Stores request_id and start_time in request.state
    """

    def __init__(self, app: ASGIApp, log_requests: bool = False) -> None:
        super().__init__(app)
        self.log_requests = log_requests

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start_time = datetime.now(timezone.utc).replace(tzinfo=None)

        request.state.request_id = request_id
        request.state.start_time = start_time

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        request_log = logger.info if self.log_requests else logger.debug
        request_log(
            "Request received",
            extra={
                "client_host": request.client.host if request.client else None,
                "origin": request.headers.get("Origin"),
                "user_agent": request.headers.get("User-Agent"),
            },
        )

        try:
            response = await call_next(request)

            end_time = datetime.now(timezone.utc).replace(tzinfo=None)
            duration_ms = int((end_time - start_time).total_seconds() * 1000)

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            request_log(
                "Request completed",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )

            return response

        except Exception as exc:
            end_time = datetime.now(timezone.utc).replace(tzinfo=None)
            duration_ms = int((end_time - start_time).total_seconds() * 1000)

            logger.error(
                "Request failed with exception",
                extra={
                    "duration_ms": duration_ms,
                    "error_type": type(exc).__name__,
                },
            )
            raise

        finally:
            structlog.contextvars.clear_contextvars()


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """
    Reject cross-origin requests whose Origin is not allow-listed.

    Requests without an Origin header (same-origin navigation, curl,
    server-to-server) pass through. Preflight requests from allowed
    origins are answered by CORSMiddleware further in.
    """

    def __init__(self, app: ASGIApp, allowed_origins: list[str]) -> None:
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        origin = request.headers.get("Origin")
        if origin and "*" not in self.allowed_origins and origin not in self.allowed_origins:
            exc = OriginNotAllowedError(origin)
            request_id = getattr(request.state, "request_id", None)
            logger.warning(
                "Origin not allowed",
                extra={"origin": origin, "path": request.url.path},
            )
            return build_error_response(
                403,
                exc.code,
                exc.message,
                request_id=request_id,
                details={"origin": origin},
            )
        return await call_next(request)
