from tools.google_oauth.client import GoogleOAuthClient, OAuthError

__all__ = ["GoogleOAuthClient", "OAuthError"]
