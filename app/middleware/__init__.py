"""HTTP middleware: request ID, security headers, request size limit.

Applied in main app; order matters (first added = outermost).
Import and use from app.main.
"""

from app.middleware.request_id import RequestIDMiddleware
from app.middleware.request_size_limit import RequestSizeLimitMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
]
