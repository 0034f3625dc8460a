"""Request body size limit middleware.

Rejects requests whose body exceeds max_bytes with 413 and the standard
error envelope. Checks Content-Length up front; bodies without one
(chunked uploads) are buffered and counted before the app sees them.
Raw ASGI (no BaseHTTPMiddleware).
"""

import json
from typing import Callable

from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _content_length(scope: dict) -> int | None:
    for key, value in scope.get("headers", []):
        if key.lower() == b"content-length":
            try:
                return int(value)
            except ValueError:
                return None
    return None


async def _reject(send: Callable, max_bytes: int) -> None:
    body = json.dumps(
        {
            "success": False,
            "message": f"The request body may not be greater than {max_bytes} bytes.",
        }
    ).encode()
    await send(
        {
            "type": "http.response.start",
            "status": 413,
            "headers": [
                (b"content-type", b"application/json"),
                (b"content-length", str(len(body)).encode()),
            ],
        }
    )
    await send({"type": "http.response.body", "body": body, "more_body": False})


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        length = _content_length(scope)
        if length is not None:
            if length > max_bytes:
                logger.warning(
                    "Rejected %s %s: body %d bytes",
                    scope.get("method"),
                    scope.get("path"),
                    length,
                )
                await _reject(send, max_bytes)
                return
            await app(scope, receive, send)
            return

        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                # Client went away before the body was complete.
                return
            chunk = message.get("body", b"")
            total += len(chunk)
            if total > max_bytes:
                logger.warning(
                    "Rejected %s %s: streamed body over limit",
                    scope.get("method"),
                    scope.get("path"),
                )
                await _reject(send, max_bytes)
                return
            chunks.append(chunk)
            if not message.get("more_body", False):
                break

        buffered = b"".join(chunks)
        sent = False

        async def replay() -> dict:
            nonlocal sent
            if not sent:
                sent = True
                return {"type": "http.request", "body": buffered, "more_body": False}
            return await receive()

        await app(scope, replay, send)

    return asgi_app
