"""
Scientist Schemas.

Request/response validation for the scientists API. JSON field names are
camelCase (birthYear, createdAt); string fields are trimmed.
"""


from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from worship_bff.schemas.base import CamelModel, UtcDatetime

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class _ScientistInput(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @field_validator("achievements", mode="before", check_fields=False)
    @classmethod
    def _split_achievements(cls, value):
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        return value

    @field_validator(
        "title", "description", "color", "image", "birth_year", "death_year",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ScientistCreate(_ScientistInput):
    """Fields accepted when creating a scientist (JSON or form)."""

    name: str = Field(..., min_length=1, description="Display name")
    subject: str = Field(..., min_length=1, description="Field of study")
    title: str | None = None
    description: str | None = None
    achievements: list[str] = Field(default_factory=list)
    birth_year: int | None = None
    death_year: int | None = None
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    image: str | None = Field(
        default=None,
        description="Absolute image URL, used when no file is uploaded",
    )


class ScientistUpdate(_ScientistInput):
    """Partial update. Only fields present in the request are written."""

    name: str | None = Field(default=None, min_length=1)
    subject: str | None = Field(default=None, min_length=1)
    title: str | None = None
    description: str | None = None
    achievements: list[str] | None = None
    birth_year: int | None = None
    death_year: int | None = None
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    image: str | None = None


class ScientistResponse(CamelModel):
    """Scientist as returned by the API, with derived image URLs."""

    id: str
    name: str
    title: str | None = None
    description: str | None = None
    achievements: list[str] = Field(default_factory=list)
    birth_year: int | None = None
    death_year: int | None = None
    subject: str
    color: str
    image: str
    image_url: str = Field(description="Deliverable URL of the full image")
    thumbnail: str = Field(description="200x200 thumbnail URL")
    created_at: UtcDatetime
    updated_at: UtcDatetime
