"""
WordPress Content API Endpoints.

Read-only proxy for CMS pages and posts with optimized HTML.
"""

from fastapi import APIRouter

from worship_bff.core.dependencies import ContentServiceDep
from worship_bff.schemas.content import ContentRecord

router = APIRouter()


@router.get(
    "/pages/{slug}",
    response_model=ContentRecord,
    summary="Get a page by slug",
)
async def get_page(slug: str, service: ContentServiceDep) -> ContentRecord:
    return await service.fetch_page(slug)


@router.get(
    "/posts",
    response_model=list[ContentRecord],
    summary="Latest posts",
)
async def list_posts(service: ContentServiceDep) -> list[ContentRecord]:
    return await service.fetch_posts()


@router.get(
    "/posts/{post_id}",
    response_model=ContentRecord,
    summary="Get a post",
)
async def get_post(post_id: str, service: ContentServiceDep) -> ContentRecord:
    return await service.fetch_post(post_id)
