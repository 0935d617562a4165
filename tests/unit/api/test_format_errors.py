import pytest
from pydantic import BaseModel, ValidationError, field_validator

from acquisitions.infrastructure.api.validation import format_validation_errors


class _Nested(BaseModel):
    code: int


class _Payload(BaseModel):
    nested: _Nested
    label: str

    @field_validator("label")
    @classmethod
    def no_spaces(cls, v: str) -> str:
        if " " in v:
            raise ValueError("Label must not contain spaces")
        return v


def test_locations_are_dotted_and_prefix_is_stripped():
    with pytest.raises(ValidationError) as exc_info:
        _Payload.model_validate({"nested": {"code": "x"}, "label": "a b"})

    by_field = {d.field: d.message for d in format_validation_errors(exc_info.value)}

    assert set(by_field) == {"nested.code", "label"}
    assert by_field["label"] == "Label must not contain spaces"
