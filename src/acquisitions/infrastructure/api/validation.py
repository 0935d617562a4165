"""Request body validation returning typed results.

``validate_payload`` never raises for bad input: it returns either a
``ValidationSuccess`` holding the parsed model or a ``ValidationFailure``
holding flattened field-level messages.
"""

from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar, Union

from fastapi import Request
from pydantic import BaseModel, ValidationError

from acquisitions.infrastructure.api.schemas import ValidationErrorDetail

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class ValidationSuccess(Generic[ModelT]):
    value: ModelT
    ok: Literal[True] = True


@dataclass(frozen=True)
class ValidationFailure:
    errors: list[ValidationErrorDetail]
    ok: Literal[False] = False


ValidationResult = Union[ValidationSuccess[ModelT], ValidationFailure]


def format_validation_errors(error: ValidationError) -> list[ValidationErrorDetail]:
    """Flatten a pydantic ValidationError into field/message pairs."""
    details = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "body"
        message = item["msg"].removeprefix("Value error, ")
        details.append(ValidationErrorDetail(field=field, message=message))
    return details


def validate_payload(model: type[ModelT], payload: Any) -> ValidationResult[ModelT]:
    """Validate a decoded JSON body against a request model.

    Anything that is not a JSON object is validated as an empty object, so
    the caller gets "field required" messages rather than a type error.
    """
    if not isinstance(payload, dict):
        payload = {}
    try:
        return ValidationSuccess(value=model.model_validate(payload))
    except ValidationError as e:
        return ValidationFailure(errors=format_validation_errors(e))


async def read_json_body(request: Request) -> Any:
    """Decode the request body as JSON, returning None when it is not JSON."""
    try:
        return await request.json()
    except ValueError:
        return None
