"""
Delegated login endpoints.

Google does the authentication; this module only runs the redirect and
callback legs of the authorization-code flow and keeps the resulting
profile in the signed session cookie.
"""

import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from api.dependencies import get_app_settings, get_oauth_client
from core.config import Settings
from core.identity import SessionIdentityProvider
from core.logging import get_logger
from tools.google_oauth import GoogleOAuthClient, OAuthError


logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["Auth"])

STATE_SESSION_KEY = "oauth_state"


@router.get("/google")
async def login(
    request: Request,
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
) -> RedirectResponse:
    """Send the browser to Google's consent screen."""
    state = secrets.token_urlsafe(24)
    request.session[STATE_SESSION_KEY] = state
    return RedirectResponse(oauth.authorization_url(state))


@router.get("/google/callback")
async def login_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    """Finish the login and land the user on the dashboard."""
    expected_state = request.session.pop(STATE_SESSION_KEY, None)
    if not code or not state or state != expected_state:
        logger.info("Login callback rejected", has_code=bool(code))
        return RedirectResponse(settings.frontend_url)

    try:
        profile = await oauth.fetch_profile(code)
    except OAuthError as e:
        logger.warning("Google login failed", error=str(e))
        return RedirectResponse(settings.frontend_url)

    SessionIdentityProvider.login(request, profile)
    logger.info("Google login successful", user_id=profile["id"])
    return RedirectResponse(f"{settings.frontend_url}/dashboard.html")


@router.get("/user")
async def current_user(request: Request):
    user = SessionIdentityProvider().current_user(request)
    if user is None:
        return JSONResponse(status_code=401, content={"message": "Not logged in"})
    return user


@router.get("/logout")
async def logout(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    user_id = SessionIdentityProvider.logout(request)
    logger.info("User logged out", user_id=user_id)
    return RedirectResponse(settings.frontend_url)
