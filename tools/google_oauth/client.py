"""
Google OAuth 2.0 authorization-code client.

Only the pieces the login flow needs: build the consent URL, swap the
callback code for a token, and read the user's profile.
"""

from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from core.logging import get_logger


logger = get_logger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = ("openid", "profile", "email")


class OAuthError(Exception):
    """Code exchange or profile lookup failed."""
    pass


class GoogleOAuthClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout_s: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._timeout_s = timeout_s
        self._transport = transport

    def authorization_url(self, state: str) -> str:
        query = urlencode({
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "state": state,
        })
        return f"{AUTHORIZE_URL}?{query}"

    async def fetch_profile(self, code: str) -> dict[str, Any]:
        """
        Exchange an authorization code and return the caller's profile.

        The profile is shaped like the one the dashboard client already
        reads: ``{"id", "displayName", "emails": [{"value"}]}``.
        """
        async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
            try:
                token_resp = await client.post(
                    TOKEN_URL,
                    data={
                        "code": code,
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                        "redirect_uri": self._redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
                if token_resp.status_code != 200:
                    raise OAuthError(f"Token exchange failed: {token_resp.status_code}")
                access_token = token_resp.json().get("access_token")
                if not access_token:
                    raise OAuthError("Token response carried no access_token")

                info_resp = await client.get(
                    USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                if info_resp.status_code != 200:
                    raise OAuthError(f"Userinfo request failed: {info_resp.status_code}")
                info = info_resp.json()
            except (httpx.HTTPError, ValueError) as e:
                raise OAuthError(str(e)) from e

        if not info.get("sub"):
            raise OAuthError("Userinfo response carried no subject")

        emails = [{"value": info["email"]}] if info.get("email") else []
        return {
            "id": str(info["sub"]),
            "displayName": info.get("name", ""),
            "emails": emails,
        }
