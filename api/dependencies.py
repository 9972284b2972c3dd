"""
FastAPI dependencies for dependency injection.

Service instances are created during the app lifespan and kept on
``app.state``; these functions hand them to route handlers. The auth
dependencies run before any handler touches the store.
"""

import secrets
from typing import Optional

from fastapi import Depends, Header, Request

from core.config import Settings
from core.errors import AuthError
from core.identity import IdentityProvider
from core.logging import get_logger
from manager.record_service import RecordService
from tools.feed_api import FeedClient
from tools.google_oauth import GoogleOAuthClient


logger = get_logger(__name__)

API_KEY_HEADER = "x-api-key"


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"{name} not initialized")
    return value


def get_app_settings(request: Request) -> Settings:
    return _state(request, "settings")


def get_identity_provider(request: Request) -> IdentityProvider:
    return _state(request, "identity_provider")


def get_record_service(request: Request) -> RecordService:
    """
    Dependency that provides the record service.

    Usage:
        @router.get("/records")
        async def list_records(
            service: RecordService = Depends(get_record_service)
        ):
            ...
    """
    return _state(request, "record_service")


def get_feed_client(request: Request) -> FeedClient:
    return _state(request, "feed_client")


def get_oauth_client(request: Request) -> GoogleOAuthClient:
    return _state(request, "oauth_client")


def require_user(
    request: Request,
    identity: IdentityProvider = Depends(get_identity_provider),
) -> str:
    """Caller's user id; 401 when nobody is logged in."""
    user_id = identity.current_user_id(request)
    if user_id is None:
        logger.info("Auth check failed", path=request.url.path)
        raise AuthError("Unauthorized - please log in", status_code=401)
    return user_id


def require_api_key(
    x_api_key: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Exact match against the configured application key; 403 otherwise."""
    presented = (x_api_key or "").encode("utf-8")
    if not x_api_key or not secrets.compare_digest(presented, settings.api_key.encode("utf-8")):
        logger.info("Invalid API key", key_present=x_api_key is not None)
        raise AuthError("Invalid API Key", status_code=403)


def authorized_user(
    user_id: str = Depends(require_user),
    _api_key: None = Depends(require_api_key),
) -> str:
    """Both checks, session first, then API key."""
    return user_id
