"""
Caller identity.

The record API only needs to know who the caller is, or that nobody is
logged in. ``IdentityProvider`` is that capability; the session-backed
implementation reads the user the login callback stored in the signed
session cookie.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from starlette.requests import HTTPConnection


SESSION_USER_KEY = "user"


class IdentityProvider(ABC):
    """Resolves the authenticated caller of a request."""

    @abstractmethod
    def current_user_id(self, conn: HTTPConnection) -> Optional[str]:
        """Stable user id of the caller, or None if not authenticated."""
        pass


class SessionIdentityProvider(IdentityProvider):
    """Identity taken from the session cookie set at login."""

    def current_user(self, conn: HTTPConnection) -> Optional[dict[str, Any]]:
        user = conn.session.get(SESSION_USER_KEY)
        if not isinstance(user, dict) or not user.get("id"):
            return None
        return user

    def current_user_id(self, conn: HTTPConnection) -> Optional[str]:
        user = self.current_user(conn)
        return str(user["id"]) if user else None

    @staticmethod
    def login(conn: HTTPConnection, user: dict[str, Any]) -> None:
        conn.session[SESSION_USER_KEY] = user

    @staticmethod
    def logout(conn: HTTPConnection) -> Optional[str]:
        user = conn.session.pop(SESSION_USER_KEY, None)
        conn.session.clear()
        return user.get("id") if isinstance(user, dict) else None
