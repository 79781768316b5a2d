"""
Bike Parts API — Document Store Client & Collections
One pooled asyncio MongoDB client per process, opened in the app lifespan.
"""

from __future__ import annotations

import logging

from fastapi import Request
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.server_api import ServerApi

from app.config import Settings

logger = logging.getLogger(__name__)


class Collections:
    """Collection names in the catalog database."""

    USERS = "users"
    PRODUCTS = "products"
    ORDERS = "orders"
    REVIEWS = "reviews"


def build_client(settings: Settings) -> AsyncMongoClient:
    """Construct the client. No network I/O happens until the first command."""
    return AsyncMongoClient(settings.mongodb_uri, server_api=ServerApi("1"))


async def init_db(db: AsyncDatabase) -> None:
    """
    Create the indexes the access layer relies on.

    The unique index on users.email is what makes two concurrent upsert-logins
    for the same address collapse onto a single record.
    """
    await db[Collections.USERS].create_index(
        [("email", ASCENDING)], unique=True, name="users_email_unique"
    )
    await db[Collections.ORDERS].create_index(
        [("addedBy", ASCENDING)], name="orders_added_by"
    )
    logger.info("Indexes ensured on database %s", db.name)


async def ping(db: AsyncDatabase) -> bool:
    result = await db.command("ping")
    return bool(result.get("ok"))


def get_db(request: Request) -> AsyncDatabase:
    """
    FastAPI dependency returning the database handle opened at startup.

    Usage:
        @router.get("/example")
        async def example(db: AsyncDatabase = Depends(get_db)):
            ...
    """
    return request.app.state.db
