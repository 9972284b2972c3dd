"""
Database setup script.

Connects to the configured record store and creates its indexes.
Safe to run repeatedly; the API also does this on startup.

Usage:
    python -m scripts.setup_db
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config import get_settings  # noqa: E402
from core.logging import configure_logging, get_logger  # noqa: E402
from core.storage import create_record_repository  # noqa: E402


logger = get_logger(__name__)


async def setup_database() -> None:
    """Create the records collection indexes."""
    settings = get_settings()
    configure_logging(settings)

    repository = create_record_repository(settings)
    await repository.setup()
    try:
        if not await repository.ping():
            raise RuntimeError(f"Record store not reachable at {settings.mongodb_url}")
        logger.info("Database setup complete", backend=settings.storage_backend)
    finally:
        await repository.close()


if __name__ == "__main__":
    asyncio.run(setup_database())
