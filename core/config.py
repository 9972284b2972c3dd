"""
Application configuration management.

Uses pydantic-settings for type-safe environment variable parsing.
All configuration is centralized here to support dependency injection
and avoid scattering os.getenv() calls throughout the codebase.
"""

from functools import lru_cache
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEV_API_KEY = "dev-api-key"
DEV_SESSION_SECRET = "dev-change-this-secret"


class Settings(BaseSettings):
    """
    Application settings with validation and type coercion.

    Values are loaded from environment variables or .env file.
    All fields have sensible defaults for local development.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Backend Selection
    # Options: "mongodb", "memory"
    storage_backend: Literal["mongodb", "memory"] = "mongodb"

    # MongoDB Configuration (default backend)
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "space_dashboard"
    records_collection: str = "records"

    # Records
    records_list_limit: int = 20

    # Application-level access key, sent by clients as x-api-key
    api_key: str = DEV_API_KEY

    # Sessions / delegated login
    session_secret: str = DEV_SESSION_SECRET
    frontend_url: str = "http://localhost:5500"
    google_client_id: str = ""
    google_client_secret: str = ""
    google_callback_url: str = "http://localhost:4000/auth/google/callback"

    # Upstream feeds
    nasa_api_key: str = "DEMO_KEY"
    openweather_api_key: str = ""
    feed_timeout_seconds: float = 15.0

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 4000
    debug: bool = True

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @model_validator(mode="after")
    def _require_production_secrets(self) -> "Settings":
        """Refuse to start production with the published development secrets."""
        if self.environment == "production":
            unset = [
                name
                for name, value, default in (
                    ("API_KEY", self.api_key, DEV_API_KEY),
                    ("SESSION_SECRET", self.session_secret, DEV_SESSION_SECRET),
                )
                if not value or value == default
            ]
            if unset:
                raise ValueError(f"Set {', '.join(unset)} for production")
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings singleton.

    Use this function to get settings instance throughout the application.
    The @lru_cache ensures we only parse environment once.
    """
    return Settings()
