"""Service-key authentication for the cleanup trigger — header or Bearer token."""

import secrets

from fastapi import Request

from config import SERVICE_KEY, SERVICE_KEY_ENABLED


def _provided_key(request: Request) -> str:
    key = request.headers.get("X-Service-Key", "")
    if key:
        return key

    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer":
        return token.strip()
    return ""


def is_service(request: Request) -> bool:
    """Check the service key; everything is allowed when none is configured."""
    if not SERVICE_KEY_ENABLED:
        return True

    key = _provided_key(request)
    return bool(key) and secrets.compare_digest(key, SERVICE_KEY)
