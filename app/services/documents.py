"""
Bike Parts API — Generic document repository over one MongoDB collection.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from app.core.exceptions import InvalidFieldNameError

# Keys a client may never write directly
PROTECTED_KEYS = frozenset({"_id"})


# ─── Rendering ────────────────────────────────────────────────────────────────


def render_document(doc: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copy ``doc`` with its ObjectId rendered as a string."""
    if doc is None:
        return None
    out = dict(doc)
    if isinstance(out.get("_id"), ObjectId):
        out["_id"] = str(out["_id"])
    return out


def _id_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def render_insert(result: InsertOneResult) -> Dict[str, Any]:
    return {
        "acknowledged": result.acknowledged,
        "insertedId": _id_str(result.inserted_id),
    }


def render_update(result: UpdateResult) -> Dict[str, Any]:
    upserted_id = result.upserted_id
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "upsertedId": _id_str(upserted_id),
        "upsertedCount": 0 if upserted_id is None else 1,
    }


def render_noop(matched: int) -> Dict[str, Any]:
    return {
        "acknowledged": True,
        "matchedCount": matched,
        "modifiedCount": 0,
        "upsertedId": None,
        "upsertedCount": 0,
    }


def render_delete(result: DeleteResult) -> Dict[str, Any]:
    return {
        "acknowledged": result.acknowledged,
        "deletedCount": result.deleted_count,
    }


def strip_keys(fields: Mapping[str, Any], keys=PROTECTED_KEYS) -> Dict[str, Any]:
    """
    Copy ``fields`` without ``keys``.
    Raises InvalidFieldNameError for operator (``$``) or dotted field names.
    """
    for name in fields:
        if not isinstance(name, str) or name.startswith("$") or "." in name:
            raise InvalidFieldNameError(str(name))
    return {k: v for k, v in fields.items() if k not in keys}


# ─── Repository ───────────────────────────────────────────────────────────────


class DocumentRepository:
    """Create/read/update/delete for a single collection, keyed by ObjectId."""

    def __init__(self, collection: AsyncCollection) -> None:
        self.collection = collection

    async def insert(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        doc = strip_keys(fields)
        result = await self.collection.insert_one(doc)
        return render_insert(result)

    async def get(self, oid: ObjectId) -> Optional[Dict[str, Any]]:
        return render_document(await self.collection.find_one({"_id": oid}))

    async def list(
        self, query: Optional[Mapping[str, Any]] = None, limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        # limit=0 means unbounded for the driver
        cursor = self.collection.find(dict(query or {}), limit=limit or 0)
        docs = await cursor.to_list(length=None)
        return [render_document(d) for d in docs]

    async def update(self, oid: ObjectId, fields: Mapping[str, Any]) -> Dict[str, Any]:
        changes = strip_keys(fields)
        if not changes:
            # An empty $set is rejected by the server
            existing = await self.collection.find_one({"_id": oid}, {"_id": 1})
            return render_noop(matched=0 if existing is None else 1)
        result = await self.collection.update_one({"_id": oid}, {"$set": changes})
        return render_update(result)

    async def delete(self, oid: ObjectId) -> Dict[str, Any]:
        result = await self.collection.delete_one({"_id": oid})
        return render_delete(result)
