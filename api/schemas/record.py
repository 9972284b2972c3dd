"""
Record request and response schemas.

Wire names follow what the dashboard client already reads
(``_id``, ``userId``, ``createdAt``); Python attributes stay snake_case
and the aliases take care of the JSON side.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.storage import RecordDocument, RecordFormat
from records.normalizer import mirror_feeds


class RecordPayload(BaseModel):
    """
    Body for creating or updating a record.

    Every field is optional; which ones are set decides how the payload
    is normalized. Unknown fields are accepted and ignored.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "examples": [
                {"data": {"nasa": {"title": "Pillars of Creation"}, "weather": None}},
                {"weather": {"name": "Oslo", "main": {"temp": 4.2}}},
            ]
        },
    )

    data: Any = Field(default=None, description="Unified client envelope, stored verbatim")
    aggregatedData: Optional[dict[str, Any]] = Field(
        default=None,
        description="Aggregated dashboard snapshot, stored verbatim",
    )
    nasa: Any = Field(default=None, description="Legacy flat NASA APOD payload")
    weather: Any = Field(default=None, description="Legacy flat weather payload")
    news: Any = Field(default=None, description="Legacy flat news payload")
    timestamp: Optional[datetime] = Field(default=None, description="Client capture time")

    def explicit_fields(self) -> dict[str, Any]:
        """Only the fields the client actually sent, explicit nulls included."""
        return self.model_dump(exclude_unset=True)


class RecordResponse(BaseModel):
    """A stored record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Record identifier")
    owner_id: str = Field(..., alias="userId", description="Owning user")
    format: RecordFormat = Field(..., description="Normalization path that produced data")
    data: Any = Field(default_factory=dict)
    timestamp: Optional[datetime] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_document(cls, record: RecordDocument) -> "RecordResponse":
        return cls(
            id=record.id,
            owner_id=record.owner_id,
            format=record.format,
            data=record.data,
            timestamp=record.timestamp,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class RecordListItem(RecordResponse):
    """Record plus flat nasa/weather/news copies for older clients."""

    nasa: Any = None
    weather: Any = None
    news: Any = None

    @classmethod
    def from_document(cls, record: RecordDocument) -> "RecordListItem":
        return cls(
            id=record.id,
            owner_id=record.owner_id,
            format=record.format,
            data=record.data,
            timestamp=record.timestamp,
            created_at=record.created_at,
            updated_at=record.updated_at,
            **mirror_feeds(record.data),
        )


class RecordDeleteResponse(BaseModel):
    message: str = "Record deleted successfully"
    deletedId: str
