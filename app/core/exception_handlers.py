"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses with the {success: false, message, errors?}
envelope (SRP, OCP for adding new handlers).
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import OrgChartException
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "INVALID_CREDENTIALS": 401,
    "AUTHENTICATION_ERROR": 401,
    "ACCOUNT_INACTIVE": 403,
    "AUTHORIZATION_ERROR": 403,
    "RESOURCE_NOT_FOUND": 404,
    "SESSION_CONFLICT": 409,
    "VALIDATION_ERROR": 422,
    "HAS_CHILDREN": 422,
    "PROTECTED_ACCOUNT": 422,
    "TOO_MANY_ATTEMPTS": 422,
    "EMAIL_DELIVERY_ERROR": 500,
    "STORAGE_WRITE_ERROR": 500,
    "STORAGE_DELETE_ERROR": 500,
    "STORAGE_PERMISSION_ERROR": 500,
}

# Request parts stripped from validation error locations ("body.email" -> "email").
_LOC_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _orgchart_exception_handler(request: Request, exc: OrgChartException) -> JSONResponse:
    """Return JSON from OrgChartException.to_dict() with the mapped status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("%s: %s", exc.error_code, exc.message)
    headers = None
    if status == 401:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _field_errors(errors: list[dict[str, Any]]) -> dict[str, list[str]]:
    """Collapse pydantic error entries into field -> messages."""
    fields: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] in _LOC_PREFIXES:
            loc = loc[1:]
        key = ".".join(loc) or "body"
        message = str(err.get("msg", "Invalid value"))
        # pydantic prefixes messages from custom validators
        message = message.removeprefix("Value error, ")
        fields.setdefault(key, []).append(message)
    return fields


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with field-keyed validation messages."""
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": "The given data was invalid.",
            "errors": _field_errors(list(exc.errors())),
        },
    )


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 when a slowapi limit is hit."""
    logger.warning("Rate limit exceeded on %s: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": f"Too many requests. Limit: {exc.detail}.",
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: OrgChartException (and
    subclasses), RequestValidationError, RateLimitExceeded,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(OrgChartException, _orgchart_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
