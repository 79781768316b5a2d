"""
User request/response schemas.

Users live in the ``users`` collection, one document per email. Profile fields
are free-form; only ``email`` and ``role`` carry meaning for access control.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class RoleUpdate(BaseModel):
    role: Optional[str] = Field(None, description="'admin' grants admin rights")


class LoginResponse(BaseModel):
    result: Dict[str, Any]
    accessToken: str


class AdminStatus(BaseModel):
    admin: bool
