"""
Message Schemas.

Request/response validation for the guestbook API.
"""

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from worship_bff.schemas.base import CamelModel, UtcDatetime


class MessageCreate(CamelModel):
    """
    Guestbook submission.

    Length limits are enforced by MessageService from content.yaml so the
    empty-content check answers 400 before any verification call.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    content: str | None = None
    author: str | None = None
    is_anonymous: bool = True
    recaptcha_token: str | None = None


class MessageResponse(CamelModel):
    id: str
    content: str
    author: str
    is_anonymous: bool
    created_at: UtcDatetime = Field(description="Creation timestamp (UTC)")
