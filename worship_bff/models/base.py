"""
Document Base Model.

Base class for documents persisted in the document store. Field names
are snake_case in Python and camelCase in storage (birthYear, createdAt),
matching the documents the frontend already consumes.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Document(BaseModel):
    """Base class for all stored documents."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str | None = None

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Document":
        """Build a model from a raw document, exposing _id as a string id."""
        data = dict(document)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)

    def to_document(self) -> dict[str, Any]:
        """Raw document for insertion; _id is assigned by the store."""
        return self.model_dump(by_alias=True, exclude={"id"})

    @staticmethod
    def storage_name(field_name: str) -> str:
        """Storage key for a Python field name."""
        return to_camel(field_name)
