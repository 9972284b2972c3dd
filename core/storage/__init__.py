"""
Storage abstraction layer.

Provides pluggable backends for record persistence:
- MongoDB (production)
- In-memory (local development and tests)
"""

from core.storage.base import (
    BaseRecordRepository,
    RecordDocument,
    RecordFormat,
)
from core.storage.factory import (
    create_record_repository,
    get_storage_backend,
    StorageBackend,
)

__all__ = [
    # Abstract interface and model
    "BaseRecordRepository",
    "RecordDocument",
    "RecordFormat",
    # Factory functions
    "create_record_repository",
    "get_storage_backend",
    "StorageBackend",
]
