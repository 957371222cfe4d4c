"""
Guestbook API Endpoints.
"""

from fastapi import APIRouter, Query

from worship_bff.core.dependencies import MessageServiceDep
from worship_bff.schemas.message import MessageCreate, MessageResponse

router = APIRouter()


@router.get(
    "",
    response_model=list[MessageResponse],
    summary="Latest messages",
)
async def list_messages(
    service: MessageServiceDep,
    limit: int | None = Query(default=None, description="Number of messages (default 5)"),
) -> list[MessageResponse]:
    messages = await service.list_latest(limit)
    return [MessageResponse.model_validate(message) for message in messages]


@router.get(
    "/history",
    response_model=list[MessageResponse],
    summary="Older messages",
    description="Messages created strictly before `before` (epoch milliseconds), newest first.",
)
async def list_message_history(
    service: MessageServiceDep,
    limit: int | None = Query(default=None, description="Number of messages (default 10)"),
    before: int | None = Query(default=None, description="Exclusive createdAt bound, epoch ms"),
) -> list[MessageResponse]:
    messages = await service.list_history(before, limit)
    return [MessageResponse.model_validate(message) for message in messages]


@router.post(
    "",
    response_model=MessageResponse,
    status_code=201,
    summary="Post a message",
    description="Requires non-empty content and a valid bot verification token.",
)
async def create_message(data: MessageCreate, service: MessageServiceDep) -> MessageResponse:
    message = await service.post_message(data)
    return MessageResponse.model_validate(message)
