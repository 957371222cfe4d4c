"""
Scientists API Endpoints.

CRUD for the scientists collection. POST and PATCH accept either a JSON
body or form data; form data may carry the image as a file field named
"image".
"""

import json
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from worship_bff.core.dependencies import ScientistServiceDep
from worship_bff.core.exceptions import ValidationError
from worship_bff.schemas.base import AcknowledgementResponse
from worship_bff.schemas.scientist import ScientistCreate, ScientistResponse, ScientistUpdate
from worship_bff.services.scientist import ImageUpload

router = APIRouter()

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _parse_achievements(values: list[Any]) -> Any:
    """Form achievements arrive as repeated fields or one JSON array string."""
    if len(values) == 1 and isinstance(values[0], str) and values[0].strip().startswith("["):
        try:
            return json.loads(values[0])
        except ValueError as e:
            raise ValidationError(
                "achievements is not a valid JSON array",
                details={"field": "achievements"},
            ) from e
    return values


async def _read_form(request: Request) -> tuple[dict[str, Any], ImageUpload | None]:
    form = await request.form()
    data: dict[str, Any] = {}
    upload = None

    for key in set(form.keys()):
        values = form.getlist(key)
        if key == "image" and isinstance(values[0], UploadFile):
            file = values[0]
            if file.filename:
                upload = ImageUpload(filename=file.filename, content=await file.read())
            continue
        if key == "achievements":
            data[key] = _parse_achievements(values)
        else:
            data[key] = values[-1]

    return data, upload


async def _read_payload(request: Request) -> tuple[dict[str, Any], ImageUpload | None]:
    """
    Read a scientist payload from JSON or form data.

    Returns:
        Tuple of (fields, uploaded image or None)
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        return await _read_form(request)

    body = await request.body()
    if not body:
        return {}, None
    try:
        data = json.loads(body)
    except ValueError as e:
        raise ValidationError("Request body is not valid JSON") from e
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data, None


def _validate(schema: type[BaseModel], data: dict[str, Any]) -> Any:
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Scientist validation failed",
            details={
                "validation_errors": [
                    {
                        "field": ".".join(str(loc) for loc in err["loc"]),
                        "message": err["msg"],
                        "type": err["type"],
                    }
                    for err in e.errors()
                ]
            },
        ) from e


@router.get(
    "",
    response_model=list[ScientistResponse],
    summary="List scientists",
    description="All scientists, newest first.",
)
async def list_scientists(service: ScientistServiceDep) -> list[ScientistResponse]:
    scientists = await service.list_scientists()
    return [service.to_response(scientist) for scientist in scientists]


@router.get(
    "/{scientist_id}",
    response_model=ScientistResponse,
    summary="Get a scientist",
)
async def get_scientist(scientist_id: str, service: ScientistServiceDep) -> ScientistResponse:
    return service.to_response(await service.get_scientist(scientist_id))


@router.post(
    "",
    response_model=ScientistResponse,
    status_code=201,
    summary="Create a scientist",
    description="Requires name, subject and either an image file or an image URL.",
)
async def create_scientist(request: Request, service: ScientistServiceDep) -> ScientistResponse:
    data, upload = await _read_payload(request)
    scientist = await service.create_scientist(_validate(ScientistCreate, data), upload)
    return service.to_response(scientist)


@router.patch(
    "/{scientist_id}",
    response_model=ScientistResponse,
    summary="Update a scientist",
    description="Partial update; only fields present in the request change.",
)
async def update_scientist(
    scientist_id: str,
    request: Request,
    service: ScientistServiceDep,
) -> ScientistResponse:
    data, upload = await _read_payload(request)
    scientist = await service.update_scientist(
        scientist_id, _validate(ScientistUpdate, data), upload,
    )
    return service.to_response(scientist)


@router.delete(
    "/{scientist_id}",
    response_model=AcknowledgementResponse,
    summary="Delete a scientist",
)
async def delete_scientist(scientist_id: str, service: ScientistServiceDep) -> AcknowledgementResponse:
    await service.delete_scientist(scientist_id)
    return AcknowledgementResponse(message="科学家已删除")
