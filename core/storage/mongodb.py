"""
MongoDB storage backend implementation.

Records live in a single collection keyed by ObjectId and queried by
owner. Update and delete go through find_one_and_* so the (id, owner)
match and the mutation happen in one server-side step.
"""

from typing import Any, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from core.errors import StoreError
from core.logging import get_logger
from core.storage.base import BaseRecordRepository, RecordDocument, RecordFormat, utcnow


logger = get_logger(__name__)


def _owner_filter(record_id: str, owner_id: str) -> Optional[dict[str, Any]]:
    """Build the (id, owner) filter, or None for ids that can't exist."""
    if not ObjectId.is_valid(record_id):
        return None
    return {"_id": ObjectId(record_id), "user_id": owner_id}


class MongoDBRecordRepository(BaseRecordRepository):
    """
    MongoDB-based record repository.

    Uses a tz-aware Motor client so timestamps round-trip as UTC.
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str = "space_dashboard",
        collection_name: str = "records",
    ):
        """
        Initialize MongoDB record repository.

        Args:
            connection_string: MongoDB connection URI
            database_name: Database name
            collection_name: Collection holding the records
        """
        self._connection_string = connection_string
        self._database_name = database_name
        self._collection_name = collection_name
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    async def setup(self) -> None:
        """Initialize connection and create indexes."""
        self._client = AsyncIOMotorClient(self._connection_string, tz_aware=True)
        self._db = self._client[self._database_name]

        try:
            await self._collection.create_index("user_id")
            await self._collection.create_index(
                [("user_id", ASCENDING), ("created_at", DESCENDING)],
                name="idx_user_created",
            )
        except PyMongoError as e:
            raise StoreError(str(e)) from e

        logger.info(
            "MongoDB record repository initialized",
            database=self._database_name,
            collection=self._collection_name,
        )

    @property
    def _collection(self):
        """Get the records collection."""
        if self._db is None:
            raise RuntimeError(
                "Repository not initialized. Call setup() first."
            )
        return self._db[self._collection_name]

    async def ping(self) -> bool:
        if self._db is None:
            return False
        try:
            await self._db.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB ping failed", error=str(e))
            return False
        return True

    async def insert(self, record: RecordDocument) -> RecordDocument:
        now = utcnow()
        record.created_at = now
        record.updated_at = now
        doc = record.to_dict()

        try:
            result = await self._collection.insert_one(doc)
        except PyMongoError as e:
            raise StoreError(str(e)) from e

        record.id = str(result.inserted_id)
        return record

    async def list_by_owner(self, owner_id: str, limit: int) -> list[RecordDocument]:
        cursor = (
            self._collection.find({"user_id": owner_id})
            .sort("created_at", DESCENDING)
            .limit(limit)
        )
        try:
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return [RecordDocument.from_dict(doc) for doc in docs]

    async def get(self, record_id: str, owner_id: str) -> Optional[RecordDocument]:
        query = _owner_filter(record_id, owner_id)
        if query is None:
            return None
        try:
            doc = await self._collection.find_one(query)
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        if doc is None:
            return None
        return RecordDocument.from_dict(doc)

    async def update(
        self,
        record_id: str,
        owner_id: str,
        *,
        data: Any,
        record_format: RecordFormat,
    ) -> Optional[RecordDocument]:
        query = _owner_filter(record_id, owner_id)
        if query is None:
            return None
        try:
            doc = await self._collection.find_one_and_update(
                query,
                {
                    "$set": {"data": data, "format": record_format.value},
                    # $max keeps updated_at from moving backwards under clock skew
                    "$max": {"updated_at": utcnow()},
                },
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        if doc is None:
            return None
        return RecordDocument.from_dict(doc)

    async def delete(self, record_id: str, owner_id: str) -> Optional[RecordDocument]:
        query = _owner_filter(record_id, owner_id)
        if query is None:
            return None
        try:
            doc = await self._collection.find_one_and_delete(query)
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        if doc is None:
            return None
        return RecordDocument.from_dict(doc)

    async def close(self) -> None:
        """Close MongoDB connection."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
        logger.info("MongoDB record repository closed")
