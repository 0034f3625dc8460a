"""Security headers middleware.

Response headers set here never override a header the route already chose.
Strict-Transport-Security is only added when the request came in over https.
"""

from typing import Callable

from starlette.datastructures import MutableHeaders

DEFAULT_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Cross-Origin-Opener-Policy": "same-origin",
}
HSTS_VALUE = "max-age=31536000; includeSubDomains"


def SecurityHeadersMiddleware(app: Callable, headers: dict[str, str] | None = None) -> Callable:
    base_headers = dict(DEFAULT_HEADERS if headers is None else headers)

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        wanted = dict(base_headers)
        if scope.get("scheme") == "https":
            wanted["Strict-Transport-Security"] = HSTS_VALUE

        async def send_with_headers(message: dict) -> None:
            if message["type"] == "http.response.start":
                response_headers = MutableHeaders(scope=message)
                for name, value in wanted.items():
                    response_headers.setdefault(name, value)
            await send(message)

        await app(scope, receive, send_with_headers)

    return asgi_app
