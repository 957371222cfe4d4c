"""
Message Repository.

Data access layer for the guestbook messages collection.
"""

from datetime import datetime

from pymongo import DESCENDING

from worship_bff.models.message import Message
from worship_bff.repositories.base import BaseRepository


class MessageRepository(BaseRepository[Message]):
    """Repository for Message documents. Messages are never updated."""

    model = Message

    async def get_latest(self, limit: int = 5) -> list[Message]:
        """
        Get the newest messages.

        Args:
            limit: Maximum number of messages to return

        Returns:
            Messages ordered by createdAt, newest first
        """
        return await self.find(sort=[("createdAt", DESCENDING)], limit=limit)

    async def get_before(self, before: datetime | None, limit: int = 10) -> list[Message]:
        """
        Get messages strictly older than a timestamp.

        Args:
            before: Exclusive upper bound on createdAt; None means no bound
            limit: Maximum number of messages to return

        Returns:
            Messages ordered by createdAt, newest first
        """
        query = {}
        if before is not None:
            query["createdAt"] = {"$lt": before}
        return await self.find(query, sort=[("createdAt", DESCENDING)], limit=limit)
