"""
Bike Parts API — Identity Store
User records keyed by email, with upsert-based creation and role lookup.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from app.services.documents import render_document, render_noop, render_update, strip_keys

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

# Clients never write these through profile endpoints; role changes go through set_role
_RESERVED_PROFILE_KEYS = frozenset({"_id", "email", "role"})


def sanitize_profile(fields: Mapping[str, Any]) -> Dict[str, Any]:
    return strip_keys(fields, _RESERVED_PROFILE_KEYS)


class IdentityStore:
    """Reads and writes the users collection. Exactly one record per email."""

    def __init__(self, collection: AsyncCollection) -> None:
        self.collection = collection

    async def upsert_user(self, email: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Insert a record for ``email`` or overwrite the given top-level fields.

        Relies on the unique email index: if two upserts race, the loser gets a
        DuplicateKeyError and is retried once as a plain update of the winner.
        """
        update = {"$set": {**sanitize_profile(fields), "email": email}}
        try:
            result = await self.collection.update_one({"email": email}, update, upsert=True)
        except DuplicateKeyError:
            logger.info("Concurrent upsert for %s, retrying as update", email)
            result = await self.collection.update_one({"email": email}, update, upsert=True)

        if result.upserted_id is not None:
            logger.info("Created user %s", email)
        else:
            logger.info("Updated user %s", email)
        return render_update(result)

    async def update_user(self, email: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge ``fields`` into an existing record. No-op result if none matches."""
        changes = sanitize_profile(fields)
        if not changes:
            existing = await self.collection.find_one({"email": email}, {"_id": 1})
            return render_noop(matched=0 if existing is None else 1)
        result = await self.collection.update_one({"email": email}, {"$set": changes})
        return render_update(result)

    async def set_role(self, email: str, role: Optional[str]) -> Dict[str, Any]:
        result = await self.collection.update_one({"email": email}, {"$set": {"role": role}})
        logger.info("Role of %s set to %r (matched=%d)", email, role, result.matched_count)
        return render_update(result)

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return render_document(await self.collection.find_one({"email": email}))

    async def list_all(self) -> List[Dict[str, Any]]:
        docs = await self.collection.find({}).to_list(length=None)
        return [render_document(d) for d in docs]

    async def is_admin(self, email: str) -> bool:
        """A missing record or a missing role field both mean "not admin"."""
        user = await self.find_by_email(email)
        return user is not None and user.get("role") == ADMIN_ROLE
