"""
Bike Parts API — Users: profile updates, role management and lookups.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from app.api.deps import get_identity_store, require_admin
from app.core.exceptions import NotFoundError
from app.core.security import Identity, get_current_identity
from app.models.users import RoleUpdate
from app.services.identity import IdentityStore
from app.services.rbac import AuthorizationGuard

router = APIRouter(prefix="/users", tags=["users"])


@router.put("/admin/{email}", dependencies=[Depends(require_admin)])
async def set_user_role(
    email: str,
    body: RoleUpdate,
    identities: IdentityStore = Depends(get_identity_store),
) -> Dict[str, Any]:
    return await identities.set_role(email, body.role)


@router.put("/{email}")
async def update_profile(
    email: str,
    fields: Optional[Dict[str, Any]] = Body(None),
    identity: Identity = Depends(get_current_identity),
    identities: IdentityStore = Depends(get_identity_store),
) -> Dict[str, Any]:
    AuthorizationGuard.require_owner(identity, email)
    return await identities.update_user(email, fields or {})


@router.get("")
async def list_users(
    identity: Identity = Depends(get_current_identity),
    identities: IdentityStore = Depends(get_identity_store),
) -> List[Dict[str, Any]]:
    """Admins see every user; anyone else sees only their own record."""
    if await identities.is_admin(identity.email):
        return await identities.list_all()
    own = await identities.find_by_email(identity.email)
    return [own] if own else []


@router.get("/{email}", dependencies=[Depends(get_current_identity)])
async def get_user(
    email: str,
    identities: IdentityStore = Depends(get_identity_store),
) -> Dict[str, Any]:
    user = await identities.find_by_email(email)
    if user is None:
        raise NotFoundError("user", email)
    return user
