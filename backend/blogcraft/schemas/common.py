"""Common schemas and utilities."""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

from blogcraft.core.security import sanitize_text


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Fields are snake_case in Python and camelCase on the wire; input
    accepts either spelling.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


def text_field(min_length: int = 1, max_length: int | None = None):
    """Trimmed string with length bounds."""
    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length),
    ]


def plain_text_field(min_length: int = 1, max_length: int | None = None):
    """Trimmed, length-bounded, HTML-escaped string for text shown to other users."""
    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length),
        AfterValidator(sanitize_text),
    ]


class ErrorDetail(BaseModel):
    """Error detail for validation errors."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    message: str
    errors: list[ErrorDetail] | None = None


class MessageResponse(BaseModel):
    """Simple acknowledgement."""

    message: str
