#!/usr/bin/env python3
"""
Initialize the bike parts database.
Creates the indexes the API relies on (unique user email, order owner).
"""

import asyncio
import sys
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import get_settings
from app.database import build_client, init_db


async def _init() -> None:
    settings = get_settings()
    print("Initializing database...")
    print(f"  DB_NAME: {settings.DB_NAME}")
    print(f"  Environment: {settings.ENVIRONMENT}")

    client = build_client(settings)
    try:
        await init_db(client[settings.DB_NAME])
    finally:
        await client.close()

    print("Database initialized successfully.")


def main():
    asyncio.run(_init())


if __name__ == "__main__":
    main()
