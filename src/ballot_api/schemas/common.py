"""Common Pydantic v2 schemas shared across the API.

Provides pagination, error response, and plain message schemas, and the
``ImageUrl`` field type.
"""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, HttpUrl, TypeAdapter, ValidationError

_HTTP_URL = TypeAdapter(HttpUrl)


def _validate_image_url(value: str | None) -> str | None:
    """Blank means no image; anything else must parse as an http(s) URL and is kept as typed."""
    if value is None or not value.strip():
        return None
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError as e:
        msg = "Image URL must be a valid http(s) URL."
        raise ValueError(msg) from e
    return value


# Validated like HttpUrl, but stored and echoed exactly as submitted.
ImageUrl = Annotated[str | None, AfterValidator(_validate_image_url)]


class PaginationParams(BaseModel):
    """Query parameters for paginated endpoints."""

    page: int = Field(default=1, ge=1, description="Page number (1-based)")
    page_size: int = Field(default=20, ge=1, le=100, description="Items per page")


class PaginationMeta(BaseModel):
    """Pagination metadata included in paginated responses."""

    total: int = Field(description="Total number of items")
    page: int = Field(description="Current page number")
    page_size: int = Field(description="Items per page")
    total_pages: int = Field(description="Total number of pages")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    message: str = Field(description="Human-readable error message")
    code: str | None = Field(default=None, description="Machine-readable error code")
    errors: dict[str, list[str]] | None = Field(default=None, description="Per-field validation errors")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
