# =============================================================================
# core/services/common.py - Shared Service Helpers
# =============================================================================
# Lookups and updates every resource service repeats:
# - parse a path id into an ObjectId (400 when malformed)
# - fetch-or-404
# - list with filter/sort/pagination, returning (items, total)
# =============================================================================

from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument

from app.exceptions import InvalidObjectIdError, ResourceNotFoundError
from lib.mongo_client import MongoClient
from lib.utils import page_offset, serialize_document, serialize_documents, to_object_id, utcnow


def require_object_id(value: str) -> ObjectId:
    """Parse an id or raise InvalidObjectIdError."""
    oid = to_object_id(value)
    if oid is None:
        raise InvalidObjectIdError(str(value))
    return oid


def find_by_id(collection: str, doc_id: str, resource: str) -> dict[str, Any]:
    """
    Fetch a raw document by id.

    Raises:
        InvalidObjectIdError: malformed id
        ResourceNotFoundError: no such document
    """
    doc = MongoClient.collection(collection).find_one({"_id": require_object_id(doc_id)})
    if doc is None:
        raise ResourceNotFoundError(resource, doc_id)
    return doc


def insert_document(collection: str, data: dict[str, Any]) -> dict[str, Any]:
    """Stamp timestamps, insert, and return the serialized document."""
    now = utcnow()
    doc = {**data, "created_at": now, "updated_at": now}
    result = MongoClient.collection(collection).insert_one(doc)
    doc["_id"] = result.inserted_id
    return serialize_document(doc)


def update_document(
    collection: str,
    doc_id: str,
    changes: dict[str, Any],
    resource: str,
) -> dict[str, Any]:
    """
    Apply `$set` changes and return the updated, serialized document.

    Raises:
        ResourceNotFoundError: no such document
    """
    updated = MongoClient.collection(collection).find_one_and_update(
        {"_id": require_object_id(doc_id)},
        {"$set": {**changes, "updated_at": utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise ResourceNotFoundError(resource, doc_id)
    return serialize_document(updated)


def delete_document(collection: str, doc_id: str, resource: str) -> dict[str, Any]:
    """Delete a document and return what was deleted."""
    deleted = MongoClient.collection(collection).find_one_and_delete(
        {"_id": require_object_id(doc_id)}
    )
    if deleted is None:
        raise ResourceNotFoundError(resource, doc_id)
    return deleted


def paginate(
    collection: str,
    query: dict[str, Any],
    sort: list[tuple[str, int]],
    page: int,
    limit: int,
) -> tuple[list[dict[str, Any]], int]:
    """
    Run a paged find.

    Returns:
        Tuple of (serialized documents, total matching count)
    """
    coll = MongoClient.collection(collection)
    cursor = coll.find(query).sort(sort).skip(page_offset(page, limit)).limit(limit)
    items = serialize_documents(list(cursor))
    total = coll.count_documents(query)
    return items, total
