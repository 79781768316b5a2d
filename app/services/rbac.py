"""
Bike Parts API — Authorization Guard
Admin-role and ownership checks on an already verified identity.
"""

from __future__ import annotations

import logging

from app.core.exceptions import ForbiddenError
from app.core.security import Identity
from app.services.identity import IdentityStore

logger = logging.getLogger(__name__)


class AuthorizationGuard:
    """Decides whether a verified identity may act as admin or as a resource owner."""

    def __init__(self, identities: IdentityStore) -> None:
        self.identities = identities

    async def require_admin(self, identity: Identity) -> Identity:
        """
        Return ``identity`` if its user record holds the admin role.
        Raise ForbiddenError otherwise, including when no record exists.
        """
        if await self.identities.is_admin(identity.email):
            return identity
        logger.warning("Admin check failed for %s", identity.email)
        raise ForbiddenError(reason="admin role required")

    @staticmethod
    def require_owner(identity: Identity, owner_email: str) -> Identity:
        """Compare the token's email with the owner declared by the path or resource."""
        if identity.email == owner_email:
            return identity
        logger.warning("Ownership mismatch: %s acting on %s", identity.email, owner_email)
        raise ForbiddenError(reason="resource belongs to another user")
