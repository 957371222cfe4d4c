"""
Message Document.

Guestbook entries. Immutable once written.
"""

from datetime import datetime

from pydantic import Field

from worship_bff.core.utils import utc_now
from worship_bff.models.base import Document


class Message(Document):
    content: str
    author: str
    is_anonymous: bool = True
    created_at: datetime = Field(default_factory=utc_now)
