"""Request context management using contextvars.

Provides async-safe storage for request-scoped data: the request id (set by
RequestIDMiddleware) and the authenticated user id (set by the auth gate).
Both are read by the logging filter so every record can be traced back.

Usage:
    set_request_id("b2c1...")
    set_current_user_id(42)
    request_id = get_request_id()
"""

from contextvars import ContextVar

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_current_user_id: ContextVar[int | None] = ContextVar("current_user_id", default=None)


def set_request_id(request_id: str | None) -> None:
    """Set the request id for the current task."""
    _request_id.set(request_id)


def get_request_id() -> str | None:
    """Return the current request id, or None outside a request."""
    return _request_id.get()


def set_current_user_id(user_id: int | None) -> None:
    """Set the authenticated user id for the current request."""
    _current_user_id.set(user_id)


def get_current_user_id() -> int | None:
    """Return the authenticated user id, or None if not authenticated."""
    return _current_user_id.get()
