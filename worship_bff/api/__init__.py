"""
API Router.

Aggregates all endpoint routers under the configured API prefix.
"""

from fastapi import APIRouter

from worship_bff.api import health
from worship_bff.api.endpoints import messages, scientists, wordpress

router = APIRouter()

router.include_router(health.router, tags=["health"])

# Scientists endpoints
router.include_router(scientists.router, prefix="/scientists", tags=["scientists"])

# Guestbook endpoints
router.include_router(messages.router, prefix="/messages", tags=["messages"])

# CMS content endpoints
router.include_router(wordpress.router, prefix="/wordpress", tags=["wordpress"])
