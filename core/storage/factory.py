"""
Storage factory for creating storage backend instances.

This module provides factory functions to create the appropriate
storage implementations based on configuration.
"""

from enum import Enum
from typing import TYPE_CHECKING

from core.logging import get_logger
from core.storage.base import BaseRecordRepository


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Supported storage backends."""
    MONGODB = "mongodb"
    MEMORY = "memory"


def get_storage_backend(settings: "Settings") -> StorageBackend:
    """
    Determine which storage backend to use based on settings.

    Args:
        settings: Application settings

    Returns:
        The configured storage backend
    """
    backend_str = settings.storage_backend.lower()

    try:
        return StorageBackend(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageBackend]}"
        )


def create_record_repository(settings: "Settings") -> BaseRecordRepository:
    """
    Create a record repository instance based on settings.

    Args:
        settings: Application settings

    Returns:
        Configured repository instance (not yet initialized)
    """
    backend = get_storage_backend(settings)

    if backend == StorageBackend.MONGODB:
        from core.storage.mongodb import MongoDBRecordRepository

        logger.info(
            "Creating MongoDB record repository",
            database=settings.mongodb_database,
            collection=settings.records_collection,
        )
        return MongoDBRecordRepository(
            connection_string=settings.mongodb_url,
            database_name=settings.mongodb_database,
            collection_name=settings.records_collection,
        )

    elif backend == StorageBackend.MEMORY:
        from core.storage.memory import MemoryRecordRepository

        logger.warning("Creating in-memory record repository; data is not persisted")
        return MemoryRecordRepository()

    else:
        raise ValueError(f"Unsupported backend: {backend}")
