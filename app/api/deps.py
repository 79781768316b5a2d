"""
Shared FastAPI dependencies: stores, repositories and the admin guard.
"""

from __future__ import annotations

from fastapi import Depends
from pymongo.asynchronous.database import AsyncDatabase

from app.core.security import Identity, get_current_identity
from app.database import Collections, get_db
from app.services.documents import DocumentRepository
from app.services.identity import IdentityStore
from app.services.rbac import AuthorizationGuard


def get_identity_store(db: AsyncDatabase = Depends(get_db)) -> IdentityStore:
    return IdentityStore(db[Collections.USERS])


def get_guard(identities: IdentityStore = Depends(get_identity_store)) -> AuthorizationGuard:
    return AuthorizationGuard(identities)


def repository(collection_name: str):
    """Build a dependency yielding a DocumentRepository for ``collection_name``."""

    def _repo(db: AsyncDatabase = Depends(get_db)) -> DocumentRepository:
        return DocumentRepository(db[collection_name])

    return _repo


get_products = repository(Collections.PRODUCTS)
get_orders = repository(Collections.ORDERS)
get_reviews = repository(Collections.REVIEWS)


async def require_admin(
    identity: Identity = Depends(get_current_identity),
    guard: AuthorizationGuard = Depends(get_guard),
) -> Identity:
    """Authenticated *and* admin. Runs before any handler logic."""
    return await guard.require_admin(identity)
