"""
Record management endpoints.

Provides CRUD operations for saved dashboard snapshots:
- POST /api/records - Save a snapshot
- GET /api/records - List the caller's latest snapshots
- PUT /api/records/{record_id} - Replace or patch a snapshot
- DELETE /api/records/{record_id} - Delete a snapshot

Every route requires a logged-in session and the application API key.
Errors are raised as core.errors exceptions and rendered by the
handler registered in api.server.
"""

from fastapi import APIRouter, Depends

from api.dependencies import authorized_user, get_record_service
from api.schemas.record import (
    RecordDeleteResponse,
    RecordListItem,
    RecordPayload,
    RecordResponse,
)
from core.logging import get_logger
from manager.record_service import RecordService


logger = get_logger(__name__)
router = APIRouter(prefix="/api/records", tags=["Records"])


@router.post("", response_model=RecordResponse)
async def create_record(
    payload: RecordPayload,
    user_id: str = Depends(authorized_user),
    service: RecordService = Depends(get_record_service),
) -> RecordResponse:
    """
    Save a dashboard snapshot.

    Accepts the unified ``data`` envelope, ``aggregatedData``, or the
    legacy flat ``nasa``/``weather``/``news`` fields.
    """
    record = await service.create(user_id, payload.explicit_fields())
    return RecordResponse.from_document(record)


@router.get("", response_model=list[RecordListItem])
async def list_records(
    user_id: str = Depends(authorized_user),
    service: RecordService = Depends(get_record_service),
) -> list[RecordListItem]:
    """Newest snapshots first, at most 20."""
    records = await service.list(user_id)
    return [RecordListItem.from_document(record) for record in records]


@router.put("/{record_id}", response_model=RecordResponse)
async def update_record(
    record_id: str,
    payload: RecordPayload,
    user_id: str = Depends(authorized_user),
    service: RecordService = Depends(get_record_service),
) -> RecordResponse:
    """
    Update a snapshot.

    ``data`` and ``aggregatedData`` replace the stored data; legacy
    fields patch only the keys they carry.
    """
    record = await service.update(user_id, record_id, payload.explicit_fields())
    return RecordResponse.from_document(record)


@router.delete("/{record_id}", response_model=RecordDeleteResponse)
async def delete_record(
    record_id: str,
    user_id: str = Depends(authorized_user),
    service: RecordService = Depends(get_record_service),
) -> RecordDeleteResponse:
    deleted_id = await service.delete(user_id, record_id)
    return RecordDeleteResponse(deletedId=deleted_id)
