"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.record import (
    RecordPayload,
    RecordResponse,
    RecordListItem,
    RecordDeleteResponse,
)

__all__ = [
    "RecordPayload",
    "RecordResponse",
    "RecordListItem",
    "RecordDeleteResponse",
]
