"""
Base Schemas.

Shared schema configuration and the standard error envelope.
Resource endpoints return bare JSON documents and arrays; only errors
are wrapped.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from worship_bff.core.utils import as_utc, utc_now

# Stored timestamps are naive UTC; responses carry the offset so clients
# do not read them as local time.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Schema whose JSON field names are camelCase (birthYear, createdAt, ...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ResponseMetadata(BaseModel):
    """Metadata included in error responses."""

    timestamp: UtcDatetime = Field(default_factory=lambda: as_utc(utc_now()))
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """
    Standard error response.

    `message` duplicates error.message at the top level for clients that
    only read a flat message.
    """

    success: bool = False
    message: str
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class AcknowledgementResponse(BaseModel):
    """Plain acknowledgement body, e.g. after a delete."""

    message: str
