from typing import Type, TypeVar

from flask import request
from pydantic import BaseModel, ValidationError as PydanticValidationError

from tenantcms.errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def first_error_message(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    message = error["msg"]
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {message}" if location else message


def parse_body(schema: Type[SchemaT]) -> SchemaT:
    """Validate the JSON request body against `schema`."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(first_error_message(exc)) from exc
