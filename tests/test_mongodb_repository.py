"""
Tests for the MongoDB record repository.

The Motor collection is replaced by mocks, so these check the queries
the repository sends rather than a live server.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from core.errors import StoreError
from core.storage import RecordDocument, RecordFormat
from core.storage.mongodb import MongoDBRecordRepository, _owner_filter


RECORD_ID = ObjectId()
CREATED = datetime(2024, 5, 4, 12, 0, tzinfo=timezone.utc)


def _stored(**overrides):
    doc = {
        "_id": RECORD_ID,
        "user_id": "u",
        "format": "structured",
        "data": {"nasa": {"title": "M31"}},
        "timestamp": CREATED,
        "created_at": CREATED,
        "updated_at": CREATED,
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def collection():
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.find_one_and_delete = AsyncMock()
    return collection


@pytest.fixture
def mongo_repo(collection):
    repo = MongoDBRecordRepository("mongodb://unused", collection_name="records")
    db = MagicMock()
    db.__getitem__.return_value = collection
    db.command = AsyncMock()
    repo._db = db
    return repo


def test_owner_filter():
    assert _owner_filter(str(RECORD_ID), "u") == {"_id": RECORD_ID, "user_id": "u"}
    assert _owner_filter("not-an-object-id", "u") is None


def test_from_dict_maps_stored_fields():
    record = RecordDocument.from_dict(_stored())

    assert record.id == str(RECORD_ID)
    assert record.owner_id == "u"
    assert record.format == RecordFormat.STRUCTURED
    assert record.data == {"nasa": {"title": "M31"}}
    assert record.created_at == CREATED


def test_from_dict_defaults_for_old_documents():
    doc = _stored()
    del doc["format"], doc["timestamp"]

    record = RecordDocument.from_dict(doc)

    assert record.format == RecordFormat.LEGACY
    assert record.timestamp == CREATED


@pytest.mark.asyncio
async def test_insert_assigns_id(mongo_repo, collection):
    collection.insert_one.return_value = MagicMock(inserted_id=RECORD_ID)

    record = await mongo_repo.insert(RecordDocument(owner_id="u", data={"a": 1}))

    assert record.id == str(RECORD_ID)
    stored = collection.insert_one.await_args.args[0]
    assert stored["user_id"] == "u"
    assert stored["created_at"] == stored["updated_at"] == record.created_at


@pytest.mark.asyncio
async def test_list_sorts_newest_first_with_limit(mongo_repo, collection):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[_stored()])
    collection.find.return_value = cursor

    records = await mongo_repo.list_by_owner("u", 20)

    assert [r.id for r in records] == [str(RECORD_ID)]
    collection.find.assert_called_once_with({"user_id": "u"})
    cursor.sort.assert_called_once_with("created_at", DESCENDING)
    cursor.limit.assert_called_once_with(20)


@pytest.mark.asyncio
async def test_update_is_owner_scoped_and_returns_new_document(mongo_repo, collection):
    collection.find_one_and_update.return_value = _stored(format="aggregated", data={"b": 2})

    record = await mongo_repo.update(
        str(RECORD_ID), "u", data={"b": 2}, record_format=RecordFormat.AGGREGATED
    )

    assert record.format == RecordFormat.AGGREGATED
    assert record.data == {"b": 2}

    call = collection.find_one_and_update.await_args
    query, change = call.args
    assert query == {"_id": RECORD_ID, "user_id": "u"}
    assert change["$set"] == {"data": {"b": 2}, "format": "aggregated"}
    assert set(change["$max"]) == {"updated_at"}
    assert call.kwargs["return_document"] == ReturnDocument.AFTER


@pytest.mark.asyncio
async def test_update_no_match_returns_none(mongo_repo, collection):
    collection.find_one_and_update.return_value = None

    assert await mongo_repo.update(
        str(RECORD_ID), "someone-else", data={}, record_format=RecordFormat.STRUCTURED
    ) is None


@pytest.mark.asyncio
async def test_malformed_id_never_reaches_the_driver(mongo_repo, collection):
    assert await mongo_repo.get("nope", "u") is None
    assert await mongo_repo.update("nope", "u", data={}, record_format=RecordFormat.STRUCTURED) is None
    assert await mongo_repo.delete("nope", "u") is None

    collection.find_one.assert_not_awaited()
    collection.find_one_and_update.assert_not_awaited()
    collection.find_one_and_delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_is_owner_scoped(mongo_repo, collection):
    collection.find_one_and_delete.return_value = _stored()

    record = await mongo_repo.delete(str(RECORD_ID), "u")

    assert record.id == str(RECORD_ID)
    collection.find_one_and_delete.assert_awaited_once_with({"_id": RECORD_ID, "user_id": "u"})


@pytest.mark.asyncio
async def test_driver_errors_become_store_errors(mongo_repo, collection):
    collection.find_one.side_effect = PyMongoError("connection reset")
    collection.find_one_and_delete.side_effect = PyMongoError("connection reset")
    collection.insert_one.side_effect = PyMongoError("connection reset")

    with pytest.raises(StoreError, match="connection reset"):
        await mongo_repo.get(str(RECORD_ID), "u")
    with pytest.raises(StoreError):
        await mongo_repo.delete(str(RECORD_ID), "u")
    with pytest.raises(StoreError):
        await mongo_repo.insert(RecordDocument(owner_id="u"))


@pytest.mark.asyncio
async def test_ping(mongo_repo):
    assert await mongo_repo.ping() is True

    mongo_repo._db.command.side_effect = PyMongoError("down")
    assert await mongo_repo.ping() is False
