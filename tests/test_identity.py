"""
Bike Parts API — Identity store, document repository and authorization guard.
Store coroutines are driven with asyncio.run against the in-memory store.
"""

from __future__ import annotations

import asyncio

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import ForbiddenError, InvalidFieldNameError
from app.core.security import Identity
from app.database import Collections
from app.services.documents import DocumentRepository
from app.services.identity import ADMIN_ROLE, IdentityStore
from app.services.rbac import AuthorizationGuard


def run(coro):
    return asyncio.run(coro)


class _RacingCollection:
    """Wraps a collection so the first update_one hits the unique email index."""

    def __init__(self, inner) -> None:
        self._inner = inner
        self.failures = 1

    async def update_one(self, *args, **kwargs):
        if self.failures:
            self.failures -= 1
            raise DuplicateKeyError("E11000 duplicate key error collection: users")
        return await self._inner.update_one(*args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._inner, name)


# ─── Identity store ───────────────────────────────────────────────────────────


class TestIdentityStore:
    def test_first_upsert_creates(self, identities):
        result = run(identities.upsert_user("u@x.com", {"name": "First"}))
        assert result["upsertedCount"] == 1
        assert result["upsertedId"] is not None

    def test_second_upsert_replaces_fields_in_single_record(self, identities):
        run(identities.upsert_user("u@x.com", {"name": "First", "city": "Dhaka"}))
        result = run(identities.upsert_user("u@x.com", {"name": "Second"}))

        assert result["matchedCount"] == 1
        assert result["upsertedCount"] == 0
        users = run(identities.list_all())
        assert len(users) == 1
        assert users[0]["name"] == "Second"
        assert users[0]["email"] == "u@x.com"

    def test_upsert_cannot_self_promote_or_rename(self, identities):
        run(identities.upsert_user("u@x.com", {"role": "admin", "email": "other@x.com"}))
        user = run(identities.find_by_email("u@x.com"))
        assert "role" not in user
        assert run(identities.find_by_email("other@x.com")) is None

    def test_update_user_merges(self, identities):
        run(identities.upsert_user("u@x.com", {"name": "First", "city": "Dhaka"}))
        run(identities.update_user("u@x.com", {"phone": "123"}))
        user = run(identities.find_by_email("u@x.com"))
        assert user["name"] == "First"
        assert user["phone"] == "123"

    def test_update_missing_user_is_noop(self, identities):
        result = run(identities.update_user("ghost@x.com", {"name": "Nobody"}))
        assert result["matchedCount"] == 0
        assert run(identities.find_by_email("ghost@x.com")) is None

    def test_set_role_and_is_admin(self, identities):
        run(identities.upsert_user("u@x.com", {}))
        assert run(identities.is_admin("u@x.com")) is False
        run(identities.set_role("u@x.com", ADMIN_ROLE))
        assert run(identities.is_admin("u@x.com")) is True

    def test_missing_user_is_not_admin(self, identities):
        assert run(identities.is_admin("ghost@x.com")) is False

    def test_rendered_id_is_string(self, identities):
        run(identities.upsert_user("u@x.com", {}))
        user = run(identities.find_by_email("u@x.com"))
        assert isinstance(user["_id"], str)

    def test_losing_concurrent_upsert_retries_as_update(self, identities):
        # Another login for the same email won the insert first
        run(identities.upsert_user("u@x.com", {"name": "Winner"}))
        racing = IdentityStore(_RacingCollection(identities.collection))

        result = run(racing.upsert_user("u@x.com", {"name": "Loser"}))

        assert racing.collection.failures == 0
        assert result["matchedCount"] == 1
        assert result["upsertedCount"] == 0
        users = run(identities.list_all())
        assert len(users) == 1
        assert users[0]["name"] == "Loser"

    def test_simultaneous_logins_leave_one_record(self, identities):
        async def _login_many():
            await asyncio.gather(
                *(identities.upsert_user("u@x.com", {"attempt": i}) for i in range(10))
            )

        run(_login_many())
        assert len(run(identities.list_all())) == 1

    @pytest.mark.parametrize("bad_key", ["$set", "profile.role"])
    def test_operator_and_dotted_keys_rejected(self, identities, bad_key):
        with pytest.raises(InvalidFieldNameError):
            run(identities.upsert_user("u@x.com", {bad_key: "admin"}))
        assert run(identities.find_by_email("u@x.com")) is None


# ─── Document repository ──────────────────────────────────────────────────────


class TestDocumentRepository:
    @pytest.fixture
    def products(self, mongo_db):
        return DocumentRepository(mongo_db[Collections.PRODUCTS])

    def test_insert_and_get(self, products):
        result = run(products.insert({"name": "Chain", "price": 25}))
        assert result["acknowledged"] is True
        doc = run(products.get(ObjectId(result["insertedId"])))
        assert doc["name"] == "Chain"

    def test_client_cannot_choose_id(self, products):
        forced = str(ObjectId())
        result = run(products.insert({"_id": forced, "name": "Chain"}))
        assert result["insertedId"] != forced

    def test_list_respects_limit(self, products):
        for i in range(5):
            run(products.insert({"name": f"Part {i}"}))
        assert len(run(products.list(limit=2))) == 2
        assert len(run(products.list())) == 5

    def test_update_and_delete(self, products):
        oid = ObjectId(run(products.insert({"name": "Chain"}))["insertedId"])
        assert run(products.update(oid, {"price": 30}))["modifiedCount"] == 1
        assert run(products.get(oid))["price"] == 30
        assert run(products.delete(oid))["deletedCount"] == 1
        assert run(products.get(oid)) is None

    def test_empty_update_reports_match(self, products):
        oid = ObjectId(run(products.insert({"name": "Chain"}))["insertedId"])
        result = run(products.update(oid, {}))
        assert result["matchedCount"] == 1
        assert result["modifiedCount"] == 0


# ─── Authorization guard ──────────────────────────────────────────────────────


class TestAuthorizationGuard:
    def test_admin_passes(self, identities, admin_user):
        guard = AuthorizationGuard(identities)
        identity = Identity(email=admin_user)
        assert run(guard.require_admin(identity)) == identity

    def test_non_admin_forbidden(self, identities):
        run(identities.upsert_user("u@x.com", {}))
        guard = AuthorizationGuard(identities)
        with pytest.raises(ForbiddenError):
            run(guard.require_admin(Identity(email="u@x.com")))

    def test_missing_record_forbidden_not_crash(self, identities):
        guard = AuthorizationGuard(identities)
        with pytest.raises(ForbiddenError):
            run(guard.require_admin(Identity(email="deleted@x.com")))

    def test_owner_check(self):
        identity = Identity(email="a@x.com")
        assert AuthorizationGuard.require_owner(identity, "a@x.com") == identity
        with pytest.raises(ForbiddenError):
            AuthorizationGuard.require_owner(identity, "b@x.com")
