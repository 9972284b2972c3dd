"""
Abstract base classes for storage backends.

This module defines the contract that every record store must follow,
so the record service never depends on a specific database driver.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordFormat(str, Enum):
    """Which normalization path produced a record's data."""
    STRUCTURED = "structured"
    AGGREGATED = "aggregated"
    LEGACY = "legacy"


@dataclass
class RecordDocument:
    """
    A persisted dashboard snapshot.

    ``id`` is assigned by the store on insert; ``created_at`` and
    ``updated_at`` are stamped by the store as well.
    """
    owner_id: str
    data: Any = field(default_factory=dict)
    format: RecordFormat = RecordFormat.LEGACY
    timestamp: datetime = field(default_factory=utcnow)
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the stored document shape (without the id)."""
        return {
            "user_id": self.owner_id,
            "format": self.format.value,
            "data": self.data,
            "timestamp": self.timestamp,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, doc: dict[str, Any]) -> "RecordDocument":
        """Create from a stored document."""
        return cls(
            id=str(doc["_id"]),
            owner_id=doc["user_id"],
            format=RecordFormat(doc.get("format", RecordFormat.LEGACY.value)),
            data=doc.get("data", {}),
            timestamp=doc.get("timestamp") or doc.get("created_at"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )


class BaseRecordRepository(ABC):
    """
    Abstract base class for record storage.

    Every read and mutation is scoped by ``owner_id``; a record owned by
    someone else is indistinguishable from a missing one. Implementations
    raise ``StoreError`` for driver failures.
    """

    @abstractmethod
    async def setup(self) -> None:
        """
        Initialize the storage (connect, create indexes).

        This should be idempotent.
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the backend is reachable."""
        pass

    @abstractmethod
    async def insert(self, record: RecordDocument) -> RecordDocument:
        """Insert a record and return it with id and timestamps set."""
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: str, limit: int) -> list[RecordDocument]:
        """Newest-first (by created_at) records owned by owner_id, at most limit."""
        pass

    @abstractmethod
    async def get(self, record_id: str, owner_id: str) -> Optional[RecordDocument]:
        """Get a record by id, or None if it doesn't exist for this owner."""
        pass

    @abstractmethod
    async def update(
        self,
        record_id: str,
        owner_id: str,
        *,
        data: Any,
        record_format: RecordFormat,
    ) -> Optional[RecordDocument]:
        """
        Atomically replace data and format of the matching record.

        Also bumps updated_at. Returns the updated record, or None if
        no record matched (id, owner_id).
        """
        pass

    @abstractmethod
    async def delete(self, record_id: str, owner_id: str) -> Optional[RecordDocument]:
        """Atomically delete the matching record and return it, or None."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources."""
        pass
