"""
Bike Parts API — Shared pytest fixtures.
"""

from __future__ import annotations

import asyncio
import os
import secrets
import uuid
from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

# ─── Environment setup (before any app imports) ───────────────────────────────

os.environ.setdefault("ACCESS_TOKEN_SECRET", secrets.token_hex(32))
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("ENVIRONMENT", "development")

# ─── App imports (after env is set) ───────────────────────────────────────────

from app.database import Collections, get_db, init_db  # noqa: E402
from app.services.identity import ADMIN_ROLE, IdentityStore  # noqa: E402

ADMIN_EMAIL = "admin@bikeparts.test"


# ─────────────────────────────────────────────────────────────────────────────
# STORE FIXTURES
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(scope="function")
def mongo_db():
    """In-memory document store — fresh database for every test function."""
    client = AsyncMongoMockClient()
    db = client[f"bikeparts_{uuid.uuid4().hex}"]
    asyncio.run(init_db(db))
    return db


@pytest.fixture(scope="function")
def identities(mongo_db) -> IdentityStore:
    return IdentityStore(mongo_db[Collections.USERS])


@pytest.fixture(scope="function")
def admin_user(identities: IdentityStore) -> str:
    """An existing user record holding the admin role."""

    async def _create():
        await identities.upsert_user(ADMIN_EMAIL, {"name": "Shop Admin"})
        await identities.set_role(ADMIN_EMAIL, ADMIN_ROLE)

    asyncio.run(_create())
    return ADMIN_EMAIL


# ─────────────────────────────────────────────────────────────────────────────
# FASTAPI CLIENT FIXTURE
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(scope="function")
def client(mongo_db) -> Generator[TestClient, None, None]:
    """
    FastAPI TestClient with the store dependency overridden.

    Used without a ``with`` block so the lifespan (which dials the real
    store) never runs.
    """
    from app.main import app

    app.dependency_overrides[get_db] = lambda: mongo_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ─────────────────────────────────────────────────────────────────────────────
# JWT HELPERS
# ─────────────────────────────────────────────────────────────────────────────


def token_for(email: str) -> str:
    from app.core.security import get_token_service

    return get_token_service().issue(email)


def auth_headers(email: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token_for(email)}"}


@pytest.fixture
def admin_headers(admin_user: str) -> Dict[str, str]:
    return auth_headers(admin_user)
