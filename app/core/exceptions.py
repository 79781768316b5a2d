"""
Bike Parts API — Custom Exceptions.
Each exception carries: message, error_code, http_status_code, optional detail dict.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

# ─────────────────────────────────────────────────────────────────────────────
# BASE
# ─────────────────────────────────────────────────────────────────────────────


class BikePartsError(Exception):
    """Root exception for all errors surfaced to API clients."""

    http_status_code: int = 400
    error_code: str = "BIKE_PARTS_ERROR"

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.detail = detail or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error_code": self.error_code,
            "message": self.message,
            "detail": self.detail,
        }


# ─────────────────────────────────────────────────────────────────────────────
# AUTHENTICATION / AUTHORIZATION
# ─────────────────────────────────────────────────────────────────────────────


class UnauthorizedError(BikePartsError):
    """No credential was presented."""

    http_status_code = 401
    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized Access") -> None:
        super().__init__(message=message)


class ForbiddenError(BikePartsError):
    """A credential was presented but it is invalid or lacks privilege."""

    http_status_code = 403
    error_code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden Access", reason: str = "") -> None:
        super().__init__(message=message, detail={"reason": reason} if reason else None)


class InvalidTokenError(Exception):
    """Raised by the token service; the auth dependency maps it to ForbiddenError."""

    def __init__(self, reason: str = "invalid token") -> None:
        self.reason = reason
        super().__init__(reason)


# ─────────────────────────────────────────────────────────────────────────────
# RESOURCES
# ─────────────────────────────────────────────────────────────────────────────


class InvalidIdentifierError(BikePartsError):
    http_status_code = 400
    error_code = "INVALID_IDENTIFIER"

    def __init__(self, identifier: str, resource: str = "resource") -> None:
        self.identifier = identifier
        self.resource = resource
        super().__init__(
            message=f"Invalid {resource} id: {identifier!r}",
            detail={"id": identifier, "resource": resource},
        )


class InvalidFieldNameError(BikePartsError):
    http_status_code = 400
    error_code = "INVALID_FIELD_NAME"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(
            message=f"Invalid field name {field!r}: must not start with '$' or contain '.'",
            detail={"field": field},
        )


class NotFoundError(BikePartsError):
    # Reported as 400, not 404
    http_status_code = 400
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, key: str) -> None:
        self.resource = resource
        self.key = key
        super().__init__(
            message=f"{resource} not found",
            detail={"resource": resource, "key": key},
        )


class InternalFaultError(BikePartsError):
    http_status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str = "An internal error occurred.") -> None:
        super().__init__(message=message)
