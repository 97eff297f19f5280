from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def __init__(self, message: str, *, payload: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.payload = dict(payload or {})


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised when a unique value or a state transition collides with existing data."""

    status_code = 409


class GoneError(DomainError):
    status_code = 410


class ShortageError(ConflictError):
    """Raised when a delivery asks for more stock than is READY.

    The caller may resubmit with ``forceRefund`` to deliver what is available and
    refund the rest.
    """

    code = "DELIVERY_REFUND_CONFIRM"

    def __init__(self, shortages: list[dict[str, Any]]):
        super().__init__(
            "Insufficient stock for some items",
            payload={"code": self.code, "shortages": shortages},
        )
        self.shortages = shortages
