# Pydantic schemas package
from worship_bff.schemas.base import (
    AcknowledgementResponse,
    CamelModel,
    ErrorDetail,
    ErrorResponse,
    ResponseMetadata,
)

__all__ = [
    "AcknowledgementResponse",
    "CamelModel",
    "ErrorDetail",
    "ErrorResponse",
    "ResponseMetadata",
]
