"""
Admin API Key Authentication

Simple API key-based gate for admin endpoints.
Checks the X-API-Key header and validates it against an environment variable.
"""

import os
import hmac
import logging
from fastapi import HTTPException, status, Security
from fastapi.security import APIKeyHeader

# Setup logging
logger = logging.getLogger(__name__)

# API key header name
API_KEY_HEADER = "X-API-Key"

# Get API key and environment from environment variables
INTERNAL_API_KEY = os.getenv("INTERNAL_API_KEY")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# FastAPI dependency for API key
api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def verify_api_key(api_key, expected_key, environment: str = ENVIRONMENT):
    """
    Check a presented key against the configured one.

    Returns the accepted key, or None when no key is configured outside
    production. Raises HTTPException(401) when the key is wrong or missing.
    """
    if not expected_key:
        if environment == "production":
            raise RuntimeError(
                "INTERNAL_API_KEY must be set in production. "
                "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
            )
        # Development mode - log warning and allow access
        logger.warning(
            "API key authentication disabled - running in development mode. "
            "Set INTERNAL_API_KEY environment variable for security."
        )
        return None

    # Use constant-time comparison to prevent timing attacks
    if api_key is None or not hmac.compare_digest(api_key, expected_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "message": "Invalid or missing API key",
                "category": "security",
            },
        )

    return api_key


async def get_api_key(api_key: str = Security(api_key_header)) -> str:
    """
    Dependency to validate API key from header

    Usage in endpoints:
    @router.get("/admin/sections")
    def list_sections(api_key: str = Depends(get_api_key)):
        # This endpoint requires valid API key
        pass
    """
    return verify_api_key(api_key, INTERNAL_API_KEY)
