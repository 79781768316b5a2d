"""
Bike Parts API — Security Layer
JWT issuance/verification and the bearer-token request dependency.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends, Header
from jose import JWTError, jwt

from app.config import get_settings
from app.core.exceptions import ForbiddenError, InvalidTokenError, UnauthorizedError

logger = logging.getLogger(__name__)

# ─── JWT ──────────────────────────────────────────────────────────────────────


class TokenService:
    """Issues and verifies signed, expiring identity tokens. Stateless."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=24),
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, email: str) -> str:
        """
        Create a signed access token for ``email``.

        :param email: The subject; the only claim authorization relies on.
        """
        now = datetime.now(tz=timezone.utc)
        payload: Dict[str, Any] = {
            "sub": email,
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """
        Return the subject email embedded in ``token``.
        Raises InvalidTokenError on a bad signature, malformed structure or expiry.
        """
        if not token:
            raise InvalidTokenError("empty token")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("token missing 'sub' claim")
        return subject


@lru_cache()
def get_token_service() -> TokenService:
    """Process-wide token service built from settings."""
    settings = get_settings()
    return TokenService(
        secret=settings.ACCESS_TOKEN_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expires_in=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
    )


# ─── FastAPI dependency ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Identity:
    """The verified caller, as attached to a request by get_current_identity."""

    email: str


def get_current_identity(
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """
    FastAPI dependency: reads ``Authorization: Bearer <token>`` and verifies it.

    No header -> 401. A header whose second part does not verify -> 403.
    The identity store is not consulted here.
    """
    if not authorization:
        raise UnauthorizedError()

    parts = authorization.split()
    token = parts[1] if len(parts) > 1 else ""
    try:
        email = tokens.verify(token)
    except InvalidTokenError as exc:
        logger.debug("Rejected bearer token: %s", exc.reason)
        raise ForbiddenError(reason="invalid or expired token")

    return Identity(email=email)
