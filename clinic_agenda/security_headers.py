"""
Security Headers Middleware

The API only serves JSON, so responses get a locked-down header set:
no framing, no sniffing, no caching, no resource loading.
"""

import logging
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .config import IS_PRODUCTION

logger = logging.getLogger(__name__)

JSON_API_CSP = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'; form-action 'none'"


def get_security_headers_dict() -> dict:
    headers = {
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Content-Security-Policy": JSON_API_CSP,
        "Permissions-Policy": "camera=(), geolocation=(), microphone=(), payment=(), usb=()",
        "X-Permitted-Cross-Domain-Policies": "none",
    }

    # max-age=31536000 = 1 year
    if IS_PRODUCTION:
        headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the security headers to every response outside `exclude_paths`"""

    def __init__(self, app, exclude_paths: Optional[list[str]] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or []
        self.headers = get_security_headers_dict()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        path = request.url.path
        if any(path.startswith(excluded) for excluded in self.exclude_paths):
            return response

        for name, value in self.headers.items():
            response.headers[name] = value

        # Agenda data is per-user; endpoints may still opt into caching explicitly
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store"

        return response
