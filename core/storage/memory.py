"""
In-process storage backend.

Implements the record repository contract with a dict guarded by an
asyncio lock. Used for local development without MongoDB and by the
test suite. Documents are deep-copied in and out so callers never share
state with the store, matching what a real database gives you.
"""

import asyncio
import copy
import itertools
from typing import Any, Optional

from bson import ObjectId

from core.logging import get_logger
from core.storage.base import BaseRecordRepository, RecordDocument, RecordFormat, utcnow


logger = get_logger(__name__)


class MemoryRecordRepository(BaseRecordRepository):
    """Dict-backed record repository with ObjectId-style ids."""

    def __init__(self):
        self._docs: dict[str, dict[str, Any]] = {}
        self._sequence = itertools.count()
        self._lock = asyncio.Lock()

    async def setup(self) -> None:
        logger.info("Memory record repository initialized")

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._docs)

    async def insert(self, record: RecordDocument) -> RecordDocument:
        async with self._lock:
            now = utcnow()
            record.id = str(ObjectId())
            record.created_at = now
            record.updated_at = now

            doc = copy.deepcopy(record.to_dict())
            doc["_id"] = record.id
            doc["_seq"] = next(self._sequence)
            self._docs[record.id] = doc
        return copy.deepcopy(record)

    async def list_by_owner(self, owner_id: str, limit: int) -> list[RecordDocument]:
        async with self._lock:
            owned = [doc for doc in self._docs.values() if doc["user_id"] == owner_id]
            # Insertion order breaks created_at ties
            owned.sort(key=lambda doc: (doc["created_at"], doc["_seq"]), reverse=True)
            return [RecordDocument.from_dict(copy.deepcopy(doc)) for doc in owned[:limit]]

    def _find(self, record_id: str, owner_id: str) -> Optional[dict[str, Any]]:
        doc = self._docs.get(record_id)
        if doc is None or doc["user_id"] != owner_id:
            return None
        return doc

    async def get(self, record_id: str, owner_id: str) -> Optional[RecordDocument]:
        async with self._lock:
            doc = self._find(record_id, owner_id)
            if doc is None:
                return None
            return RecordDocument.from_dict(copy.deepcopy(doc))

    async def update(
        self,
        record_id: str,
        owner_id: str,
        *,
        data: Any,
        record_format: RecordFormat,
    ) -> Optional[RecordDocument]:
        async with self._lock:
            doc = self._find(record_id, owner_id)
            if doc is None:
                return None
            doc["data"] = copy.deepcopy(data)
            doc["format"] = record_format.value
            doc["updated_at"] = max(doc["updated_at"], utcnow())
            return RecordDocument.from_dict(copy.deepcopy(doc))

    async def delete(self, record_id: str, owner_id: str) -> Optional[RecordDocument]:
        async with self._lock:
            if self._find(record_id, owner_id) is None:
                return None
            doc = self._docs.pop(record_id)
            return RecordDocument.from_dict(doc)

    async def close(self) -> None:
        logger.info("Memory record repository closed", records=len(self._docs))
