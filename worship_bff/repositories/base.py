"""
Base Repository.

Base class for all repositories with common CRUD operations over a
Motor collection.
"""

from typing import Any, Generic, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from worship_bff.core.exceptions import NotFoundError
from worship_bff.core.logging import get_logger
from worship_bff.models.base import Document

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Document)


def to_object_id(id: str) -> ObjectId | None:
    """Parse a string id, returning None when it is not a valid ObjectId."""
    # ObjectId(None) generates a fresh id instead of failing.
    if not isinstance(id, str):
        return None
    try:
        return ObjectId(id)
    except (InvalidId, TypeError):
        return None


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses set the model class:

        class ScientistRepository(BaseRepository[Scientist]):
            model = Scientist

    Malformed ids are treated like unknown ids: NotFoundError.
    """

    model: type[ModelType]

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    def _to_model(self, document: dict[str, Any]) -> ModelType:
        return self.model.from_document(document)

    def _to_storage(self, fields: dict[str, Any]) -> dict[str, Any]:
        return {self.model.storage_name(key): value for key, value in fields.items()}

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.model.__name__} not found")

    async def get_by_id(self, id: str) -> ModelType:
        """
        Get a single document by ID.

        Raises:
            NotFoundError: If document not found
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise self._not_found()
        return instance

    async def get_by_id_or_none(self, id: str) -> ModelType | None:
        """Get a single document by ID, returning None if not found."""
        object_id = to_object_id(id)
        if object_id is None:
            return None
        document = await self.collection.find_one({"_id": object_id})
        if document is None:
            return None
        return self._to_model(document)

    async def find(
        self,
        query: dict[str, Any] | None = None,
        sort: list[tuple[str, int]] | None = None,
        limit: int = 0,
    ) -> list[ModelType]:
        """Find documents matching a raw query. limit=0 means no limit."""
        cursor = self.collection.find(query or {})
        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(limit)
        documents = await cursor.to_list(length=None)
        return [self._to_model(document) for document in documents]

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new document."""
        instance = self.model(**kwargs)
        result = await self.collection.insert_one(instance.to_document())
        instance.id = str(result.inserted_id)
        return instance

    async def update(self, id: str, **kwargs: Any) -> ModelType:
        """
        Set the given fields on an existing document.

        Raises:
            NotFoundError: If document not found
        """
        object_id = to_object_id(id)
        if object_id is None:
            raise self._not_found()

        document = await self.collection.find_one_and_update(
            {"_id": object_id},
            {"$set": self._to_storage(kwargs)},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            raise self._not_found()
        return self._to_model(document)

    async def delete(self, id: str) -> None:
        """
        Delete a document by ID.

        Raises:
            NotFoundError: If document not found
        """
        object_id = to_object_id(id)
        if object_id is None:
            raise self._not_found()

        result = await self.collection.delete_one({"_id": object_id})
        if result.deleted_count == 0:
            raise self._not_found()
