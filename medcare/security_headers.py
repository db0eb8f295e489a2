"""
Security Headers Middleware for FastAPI

Adds security headers to every JSON/CSV/XML response of the scheduling API:
- X-Frame-Options: the API is never framed
- X-Content-Type-Options: no MIME sniffing of exported reports
- Referrer-Policy
- Content-Security-Policy: nothing is loaded from an API response
- Strict-Transport-Security: production only
- Cache-Control: patient data must not be cached
"""

import logging
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .config import IS_PRODUCTION

logger = logging.getLogger(__name__)

# Swagger UI pulls its assets from a CDN, so /docs is usually excluded
CSP_DIRECTIVES = [
    "default-src 'none'",
    "frame-ancestors 'none'",
    "base-uri 'none'",
    "form-action 'none'",
]


def get_csp_policy() -> str:
    return "; ".join(CSP_DIRECTIVES)


def get_permissions_policy() -> str:
    features = [
        "camera=()",
        "geolocation=()",
        "microphone=()",
        "payment=()",
        "usb=()",
    ]
    return ", ".join(features)


def get_security_headers_dict() -> dict:
    """Security headers applied to non-excluded responses"""
    headers = {
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "no-referrer",
        "Content-Security-Policy": get_csp_policy(),
        "Permissions-Policy": get_permissions_policy(),
        "X-Permitted-Cross-Domain-Policies": "none",
    }

    if IS_PRODUCTION:
        headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds get_security_headers_dict() to every response outside exclude_paths"""

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

        # Exports set their own Content-Disposition but never their own caching
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store"

        return response
