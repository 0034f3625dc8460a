"""Response envelope shared by every endpoint: {success, message?, data?}.

Also holds small input helpers shared by request models.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


def blank_to_none(value: object) -> object:
    """Treat a blank optional string as absent (stored as NULL)."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class MessageResponse(BaseModel):
    """Success without a payload."""

    success: bool = True
    message: str | None = None


class DataResponse(MessageResponse, Generic[T]):
    """Success with a payload under data."""

    data: T


class ErrorResponse(BaseModel):
    """Shape of every error body (see core.exception_handlers)."""

    success: bool = False
    message: str
    errors: dict[str, list[str]] | None = Field(
        default=None, description="Field name to messages, for form display"
    )
