"""
Payload normalization for dashboard records.

Clients from three eras post records in different shapes:

- unified:    {"data": {...}}
- aggregated: {"aggregatedData": {...}}
- legacy:     {"nasa": ..., "weather": ..., "news": ...}

The shape is resolved once into a payload variant; create and update
then map each variant onto the persisted ``data`` value. Nothing here
performs I/O.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from core.storage.base import RecordFormat


FEED_KEYS = ("nasa", "weather", "news")
LEGACY_SOURCE = "Legacy Format"


def _filled(value: Any) -> bool:
    """Present and non-empty: None, False and empty containers/strings don't count."""
    if value is None or value is False:
        return False
    if isinstance(value, (dict, list, str)):
        return len(value) > 0
    return True


def _isoformat(now: datetime) -> str:
    return now.isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class DataPayload:
    """Unified client envelope; ``data`` is stored as-is."""
    data: Any


@dataclass(frozen=True)
class AggregatedPayload:
    """Aggregated dashboard snapshot; stored as-is."""
    data: Any


@dataclass(frozen=True)
class LegacyPayload:
    """
    Flat legacy fields.

    ``fields`` holds only the feed keys the client actually sent,
    explicit nulls included, so partial updates can tell "set to null"
    apart from "leave alone".
    """
    fields: dict[str, Any] = field(default_factory=dict)


Payload = Union[DataPayload, AggregatedPayload, LegacyPayload]


def has_content(payload: Mapping[str, Any]) -> bool:
    """True if the payload carries anything worth saving."""
    if any(_filled(payload.get(key)) for key in ("data",) + FEED_KEYS):
        return True
    aggregated = payload.get("aggregatedData")
    return isinstance(aggregated, Mapping) and len(aggregated) > 0


def resolve_payload(payload: Mapping[str, Any]) -> Payload:
    """Pick the payload variant; data wins over aggregatedData wins over legacy."""
    if _filled(payload.get("data")):
        return DataPayload(payload["data"])
    if _filled(payload.get("aggregatedData")):
        return AggregatedPayload(payload["aggregatedData"])
    return LegacyPayload({key: payload[key] for key in FEED_KEYS if key in payload})


def normalize_for_create(
    payload: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> Any:
    """Build the ``data`` value for a new record."""
    now = now or datetime.now(timezone.utc)
    resolved = resolve_payload(payload)

    if isinstance(resolved, (DataPayload, AggregatedPayload)):
        return copy.deepcopy(resolved.data)

    data: dict[str, Any] = {}
    for key in FEED_KEYS:
        # Only an absent or null feed becomes null; empty lists and objects are kept
        data[key] = copy.deepcopy(resolved.fields.get(key))
    data["metadata"] = {
        "savedAt": _isoformat(now),
        "source": LEGACY_SOURCE,
    }
    return data


def normalize_for_update(
    existing: Any,
    payload: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> Any:
    """
    Compute the new ``data`` for an update.

    Unified and aggregated payloads replace the existing data wholesale,
    existing metadata included. Legacy payloads patch only the feed keys
    they define and stamp ``metadata.updatedAt``.
    """
    now = now or datetime.now(timezone.utc)
    resolved = resolve_payload(payload)

    if isinstance(resolved, (DataPayload, AggregatedPayload)):
        return copy.deepcopy(resolved.data)

    updated = dict(existing) if isinstance(existing, Mapping) else {}
    for key, value in resolved.fields.items():
        updated[key] = copy.deepcopy(value)

    metadata = updated.get("metadata")
    metadata = dict(metadata) if isinstance(metadata, Mapping) else {}
    metadata["updatedAt"] = _isoformat(now)
    updated["metadata"] = metadata
    return updated


def format_for_update(payload: Mapping[str, Any], existing: RecordFormat) -> RecordFormat:
    """Any payload carrying aggregatedData, even empty, retags the record."""
    if payload.get("aggregatedData") is not None:
        return RecordFormat.AGGREGATED
    return existing


def mirror_feeds(data: Any) -> dict[str, Any]:
    """Top-level nasa/weather/news copies for clients reading the flat shape."""
    if not isinstance(data, Mapping):
        return {key: None for key in FEED_KEYS}
    return {key: data.get(key) for key in FEED_KEYS}
