"""
Record service - create, list, update and delete dashboard records.

Sits between the API layer and the record repository. Callers have
already been authenticated; every operation takes the caller's id and
only ever touches records owned by it.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from core.config import Settings
from core.errors import NotFound, ValidationError
from core.logging import get_logger
from core.storage import BaseRecordRepository, RecordDocument, RecordFormat
from records.normalizer import (
    format_for_update,
    has_content,
    normalize_for_create,
    normalize_for_update,
)


logger = get_logger(__name__)


class RecordService:
    """
    Owner-scoped record operations.

    The repository is injected so the service runs against MongoDB in
    production and the in-memory store in tests.
    """

    def __init__(self, repository: BaseRecordRepository, settings: Settings):
        self._repository = repository
        self._list_limit = settings.records_list_limit

    async def create(self, owner_id: str, payload: Mapping[str, Any]) -> RecordDocument:
        """Normalize and insert a new record for owner_id."""
        if not has_content(payload):
            logger.info("Create rejected, no data", user_id=owner_id)
            raise ValidationError(
                "No data provided. Include nasa, weather, news, or data field."
            )

        now = datetime.now(timezone.utc)
        timestamp = payload.get("timestamp")
        record = RecordDocument(
            owner_id=owner_id,
            data=normalize_for_create(payload, now),
            format=RecordFormat.STRUCTURED,
            timestamp=timestamp if isinstance(timestamp, datetime) else now,
        )

        created = await self._repository.insert(record)
        logger.info(
            "Record created",
            user_id=owner_id,
            record_id=created.id,
            payload_keys=sorted(payload.keys()),
        )
        return created

    async def list(self, owner_id: str) -> list[RecordDocument]:
        """Newest records first, capped at the configured limit."""
        records = await self._repository.list_by_owner(owner_id, self._list_limit)
        logger.info("Records listed", user_id=owner_id, count=len(records))
        return records

    async def update(
        self,
        owner_id: str,
        record_id: str,
        payload: Mapping[str, Any],
    ) -> RecordDocument:
        """Replace or patch a record's data depending on the payload shape."""
        if not has_content(payload):
            raise ValidationError("No data to update")

        existing = await self._get_owned(owner_id, record_id)

        data = normalize_for_update(existing.data, payload)
        record_format = format_for_update(payload, existing.format)

        # A concurrent delete between the read and this write surfaces as NotFound
        updated = await self._repository.update(
            record_id,
            owner_id,
            data=data,
            record_format=record_format,
        )
        if updated is None:
            raise NotFound("Record not found")

        logger.info(
            "Record updated",
            user_id=owner_id,
            record_id=record_id,
            format=record_format.value,
        )
        return updated

    async def delete(self, owner_id: str, record_id: str) -> str:
        """Delete a record and return its id."""
        deleted = await self._repository.delete(record_id, owner_id)
        if deleted is None:
            raise NotFound("Record not found")

        logger.info("Record deleted", user_id=owner_id, record_id=deleted.id)
        return deleted.id

    async def ping(self) -> bool:
        return await self._repository.ping()

    async def _get_owned(self, owner_id: str, record_id: str) -> RecordDocument:
        record: Optional[RecordDocument] = await self._repository.get(record_id, owner_id)
        if record is None:
            logger.info("Record not found", user_id=owner_id, record_id=record_id)
            raise NotFound("Record not found")
        return record
