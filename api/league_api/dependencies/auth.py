"""Request identity: API key check and the acting user's draft context."""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from ..config import settings
from ..services.draft.models import ActorContext
from ..services.draft.store import DraftStore
from .stores import get_draft_store

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def verify_api_key(
    request: Request,
    api_key: str | None = Depends(API_KEY_HEADER),
) -> str:
    """Check the X-API-Key header against API_KEY.

    Open when API_KEY is unset (local development); production startup
    refuses to run without one.

    Raises:
        HTTPException: 401 if the key is missing or wrong.
    """
    if not settings.api_key:
        logger.warning("api_key_not_configured")
        return ""

    if not api_key:
        logger.warning("api_key_missing", extra={"client_ip": _client_ip(request), "path": request.url.path})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if not secrets.compare_digest(api_key, settings.api_key):
        logger.warning("api_key_invalid", extra={"client_ip": _client_ip(request), "path": request.url.path})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key


async def get_actor(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    store: DraftStore = Depends(get_draft_store),
) -> ActorContext:
    """Resolve the caller's profile once per request.

    The user id is asserted by the upstream auth gateway; the role comes
    from the profile row, never from the client.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    profile = await store.get_profile(x_user_id)
    if profile is None:
        logger.warning("actor_profile_missing", extra={"user_id": x_user_id})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )
    return ActorContext(user_id=profile.id, role=profile.role)


def api_key_accepted(candidate: str | None) -> bool:
    """Key check for transports without headers (browser WebSockets pass ?apiKey=)."""
    if not settings.api_key:
        return True
    return bool(candidate) and secrets.compare_digest(candidate, settings.api_key)
