"""
Bike Parts API — Login and admin-check endpoints.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from app.api.deps import get_identity_store
from app.core.security import TokenService, get_current_identity, get_token_service
from app.models.users import AdminStatus, LoginResponse
from app.services.identity import IdentityStore

router = APIRouter(tags=["auth"])


@router.put("/login/{email}", response_model=LoginResponse)
async def login(
    email: str,
    fields: Optional[Dict[str, Any]] = Body(None),
    identities: IdentityStore = Depends(get_identity_store),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Create or refresh the user record for ``email`` and hand back a token.
    Public: possession of the email is the only credential.
    """
    result = await identities.upsert_user(email, fields or {})
    return LoginResponse(result=result, accessToken=tokens.issue(email))


@router.get(
    "/admin/{email}",
    response_model=AdminStatus,
    dependencies=[Depends(get_current_identity)],
)
async def check_admin(
    email: str,
    identities: IdentityStore = Depends(get_identity_store),
):
    return AdminStatus(admin=await identities.is_admin(email))
