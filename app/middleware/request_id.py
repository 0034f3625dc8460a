"""Request ID middleware.

Every HTTP request gets an id: a well-formed X-Request-ID from the client is
kept, anything else is replaced by a fresh UUID. The id is echoed back on the
response, stored on request.state and pushed into the logging context.
Raw ASGI (no BaseHTTPMiddleware) so streaming responses pass through untouched.
"""

import re
import uuid
from typing import Callable

from starlette.datastructures import Headers, MutableHeaders

from app.shared.context import set_request_id

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_MAX_LENGTH = 64
_SAFE_REQUEST_ID = re.compile(rf"[A-Za-z0-9_-]{{1,{REQUEST_ID_MAX_LENGTH}}}")


def resolve_request_id(candidate: str | None) -> str:
    """Keep a client id only when it is short and log-safe."""
    candidate = (candidate or "").strip()
    if _SAFE_REQUEST_ID.fullmatch(candidate):
        return candidate
    return str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = REQUEST_ID_HEADER) -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        request_id = resolve_request_id(Headers(scope=scope).get(header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        set_request_id(request_id)

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[header_name] = request_id
            await send(message)

        try:
            await app(scope, receive, send_with_id)
        finally:
            set_request_id(None)

    return asgi_app
