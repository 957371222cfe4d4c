"""
Health Check Endpoints.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (document store answers a ping)
"""

import asyncio
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from worship_bff.core.config import get_app_config
from worship_bff.core.database import get_document_store
from worship_bff.core.logging import get_logger
from worship_bff.core.utils import as_utc, utc_now

router = APIRouter()
logger = get_logger(__name__)

READY_TIMEOUT_SECONDS = 5


async def check_database() -> dict[str, Any]:
    """
    Check document store connectivity.

    Returns:
        Dict with status and latency
    """
    store = get_document_store()
    if not store.is_connected:
        return {"status": "unhealthy", "error": "not connected"}

    start = utc_now()
    if not await store.ping():
        return {"status": "unhealthy", "error": "ping failed"}

    latency_ms = int((utc_now() - start).total_seconds() * 1000)
    return {"status": "healthy", "latency_ms": latency_ms}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "ok", "message": get_app_config().application.health_message}


@router.get("/health/ready", response_model=None)
async def readiness_check() -> dict[str, Any] | JSONResponse:
    """
    Readiness check.

    Returns 503 when the document store does not answer.
    """
    try:
        async with asyncio.timeout(READY_TIMEOUT_SECONDS):
            database = await check_database()
    except TimeoutError:
        database = {"status": "unhealthy", "error": "timed out"}

    checks = {"database": database}
    body = {
        "status": "ok" if database["status"] == "healthy" else "unhealthy",
        "checks": checks,
        "timestamp": as_utc(utc_now()).isoformat(),
    }

    if database["status"] != "healthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        return JSONResponse(status_code=503, content=body)

    return body
