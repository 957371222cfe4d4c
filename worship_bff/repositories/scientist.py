"""
Scientist Repository.

Data access layer for the scientists collection.
"""

from typing import Any

from pymongo import DESCENDING

from worship_bff.core.utils import utc_now
from worship_bff.models.scientist import Scientist
from worship_bff.repositories.base import BaseRepository


class ScientistRepository(BaseRepository[Scientist]):
    """Repository for Scientist documents."""

    model = Scientist

    async def list_recent(self) -> list[Scientist]:
        """All scientists, newest first."""
        return await self.find(sort=[("createdAt", DESCENDING)])

    async def update(self, id: str, **kwargs: Any) -> Scientist:
        """Set fields and refresh updatedAt."""
        kwargs["updated_at"] = utc_now()
        return await super().update(id, **kwargs)
