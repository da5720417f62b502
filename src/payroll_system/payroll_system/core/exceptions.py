from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class QuotaExceededError(ValidationError):
    """Raised when approving/submitting a leave would exceed the category quota."""

    def __init__(self, message: str, *, count: int, limit: int, window: str):
        super().__init__(message)
        self.count = count
        self.limit = limit
        self.window = window


class GeofenceViolationError(ValidationError):
    """Raised when a GPS log falls outside the allowed radius band."""

    def __init__(self, message: str, *, distance: float):
        super().__init__(message)
        self.distance = distance


class PayrollLockedError(ValidationError):
    """Raised when regenerating a payroll that is no longer a draft."""

    def __init__(self, message: str, *, status: str):
        super().__init__(message)
        self.status = status


class ConflictError(DomainError):
    """Raised when a uniqueness rule (session slot, attendance day, ...) is violated."""


class NotFoundError(DomainError):
    """Raised when a referenced employee/recap/payroll does not exist."""

    def __init__(self, message: str, *, resource: Optional[str] = None):
        super().__init__(message)
        self.resource = resource


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when an actor lacks the capability or ownership for an action."""
