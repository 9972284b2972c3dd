"""
Pytest configuration and fixtures.
"""

import os
import sys
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from starlette.requests import HTTPConnection

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_BACKEND", "memory")

from api.dependencies import get_identity_provider  # noqa: E402
from api.server import create_app  # noqa: E402
from core.config import Settings  # noqa: E402
from core.identity import IdentityProvider  # noqa: E402
from core.storage.memory import MemoryRecordRepository  # noqa: E402
from manager.record_service import RecordService  # noqa: E402


TEST_API_KEY = "test-api-key"
USER_HEADER = "x-test-user"


class HeaderIdentityProvider(IdentityProvider):
    """Takes the caller id from a test header instead of a session cookie."""

    def current_user_id(self, conn: HTTPConnection) -> Optional[str]:
        return conn.headers.get(USER_HEADER) or None


def _auth_headers(user_id: str = "user-1", api_key: str = TEST_API_KEY) -> dict[str, str]:
    return {USER_HEADER: user_id, "x-api-key": api_key}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        storage_backend="memory",
        api_key=TEST_API_KEY,
        session_secret="test-session-secret",
        frontend_url="http://frontend.test",
        environment="development",
    )


@pytest.fixture
def repository() -> MemoryRecordRepository:
    return MemoryRecordRepository()


@pytest.fixture
def service(repository, settings) -> RecordService:
    return RecordService(repository, settings)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client with header-based identity; lifespan runs on the memory store."""
    app.dependency_overrides[get_identity_provider] = lambda: HeaderIdentityProvider()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Header factory: auth_headers("user-2") or auth_headers(api_key="bad")."""
    return _auth_headers
