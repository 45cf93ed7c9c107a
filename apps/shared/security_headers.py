"""Security headers for the API services."""

import os

from fastapi import FastAPI, Request
from fastapi.responses import Response


DEFAULT_CSP = (
    "default-src 'self'; "
    "img-src 'self' data: https:; "
    "font-src 'self' data: https:; "
    "script-src 'self' 'unsafe-inline'; "
    "style-src 'self' 'unsafe-inline'; "
    "connect-src 'self'"
)

BASE_HEADERS = {
    "Content-Security-Policy": DEFAULT_CSP,
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}

HSTS_VALUE = "max-age=31536000; includeSubDomains; preload"

# Admin responses carry unpublished content and backups
NO_STORE = "no-cache, no-store, must-revalidate"


def setup_security_headers(app: FastAPI) -> None:
    """Add CSP, nosniff, frame and (in production) HSTS headers."""
    production = os.getenv("ENVIRONMENT", "development") == "production"

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in BASE_HEADERS.items():
            response.headers.setdefault(name, value)
        if production:
            response.headers.setdefault("Strict-Transport-Security", HSTS_VALUE)
        if "/admin" in request.url.path:
            response.headers.setdefault("Cache-Control", NO_STORE)
        return response
