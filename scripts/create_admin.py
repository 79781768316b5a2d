"""
One-time script to promote your first admin user.
Run from the project root:

    python scripts/create_admin.py

You will be prompted for an email. The user record is created if it does not
exist yet, then given the admin role. After that, admins can promote others
through PUT /users/admin/{email}.
"""

import asyncio
import os
import sys

# Make sure the project root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import get_settings
from app.database import Collections, build_client, init_db
from app.services.identity import ADMIN_ROLE, IdentityStore


async def promote(email: str) -> None:
    settings = get_settings()
    client = build_client(settings)
    try:
        db = client[settings.DB_NAME]
        await init_db(db)
        identities = IdentityStore(db[Collections.USERS])

        existing = await identities.find_by_email(email)
        if existing and existing.get("role") == ADMIN_ROLE:
            print(f"User {email} is already an admin.")
            return

        if existing is None:
            await identities.upsert_user(email, {})
        await identities.set_role(email, ADMIN_ROLE)
        print(f"\n✓ {email} now has role '{ADMIN_ROLE}'\n")
    finally:
        await client.close()


def main():
    print("\n── Bike Parts · Promote Admin User ──\n")

    email = input("Email: ").strip()
    if not email:
        print("Email cannot be empty.")
        return

    asyncio.run(promote(email))


if __name__ == "__main__":
    main()
