"""Request authentication: the shared API key and the caller's user id."""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from ..config import settings
from ..services.permissions import Actor

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def _unauthorized(request: Request, detail: str) -> HTTPException:
    logger.warning(
        detail,
        extra={
            "client_ip": request.client.host if request.client else "unknown",
            "path": request.url.path,
            "method": request.method,
        },
    )
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def verify_api_key(
    request: Request,
    api_key: str | None = Depends(API_KEY_HEADER),
) -> str:
    """Check X-API-Key against API_KEY with a constant-time comparison.

    Without a configured key, development lets everything through and other
    environments only allow reads, so roster and scoring writes fail closed.

    Raises:
        HTTPException: 401 if the key is missing or wrong.
    """
    if not settings.api_key:
        if settings.environment != "development" and request.method not in SAFE_METHODS:
            raise _unauthorized(request, "API key not configured")
        logger.warning("API_KEY not configured - allowing unauthenticated request")
        return ""

    if not api_key:
        raise _unauthorized(request, "Missing API key")
    if not secrets.compare_digest(api_key, settings.api_key):
        raise _unauthorized(request, "Invalid API key")
    return api_key


async def get_actor(
    user_id: str | None = Header(None, alias="X-User-Id"),
) -> Actor:
    """The user the upstream gateway authenticated for this request."""
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return Actor(user_id=user_id.strip())
