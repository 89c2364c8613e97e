"""
JSON request/response helpers shared by the API views.

Every error leaves the API as {"message": ..., "errors": [...]} where
"errors" is only present for field-level validation failures.
"""

import json
from typing import Any

from django.core.exceptions import BadRequest
from django.http import HttpRequest, JsonResponse

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel


class FieldViolation(BaseModel):
    """A single violated field."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Error body for all non-2xx API responses."""

    message: str
    errors: list[FieldViolation] | None = None


class CamelModel(BaseModel):
    """
    Base schema for the wire format.

    Fields are snake_case in Python and camelCase on the wire; both spellings
    are accepted on input. Unknown fields are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


def json_response(data: Any, status: int = 200) -> JsonResponse:
    """Create a JSON response; lists are allowed at the top level."""
    return JsonResponse(data, status=status, safe=False)


def dump(schema: BaseModel) -> dict[str, Any]:
    """Serialize a schema to its camelCase JSON form."""
    return schema.model_dump(mode="json", by_alias=True)


def error_response(
    message: str,
    status: int,
    errors: list[FieldViolation] | None = None,
) -> JsonResponse:
    """Create an error response in the standard error shape."""
    body = ErrorResponse(message=message, errors=errors)
    return json_response(body.model_dump(exclude_none=True), status=status)


def violations_from(exc: ValidationError) -> list[FieldViolation]:
    """
    Flatten a pydantic ValidationError into field violations.

    Locations are reported with the wire (camelCase) field names, joined
    with dots: cartItems.0.quantity
    """
    return [
        FieldViolation(
            field=".".join(str(loc) for loc in err["loc"]) or "body",
            message=err["msg"],
        )
        for err in exc.errors()
    ]


def validation_error_response(message: str, exc: ValidationError) -> JsonResponse:
    """400 response enumerating every violated field."""
    return error_response(message, status=400, errors=violations_from(exc))


def load_json(request: HttpRequest) -> Any:
    """
    Parse the request body as JSON.

    An empty body parses as an empty object.

    Raises:
        BadRequest: If the body is not valid JSON
    """
    if not request.body:
        return {}
    try:
        return json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise BadRequest("Invalid JSON in request body") from exc


def parse_id(raw: str) -> int:
    """
    Parse a numeric id from a URL segment.

    Raises:
        BadRequest: If the segment is not a non-negative integer
    """
    if not raw.isascii() or not raw.isdigit():
        raise BadRequest("Invalid ID")
    return int(raw)
