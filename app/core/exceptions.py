"""
Error taxonomy for the scheduling core.

Validation errors mean the request broke a scheduling rule and the user can
fix the input. Authorization errors mean the user is not allowed to do this
at all. Both are kept apart so callers can answer "bad input" and "forbidden"
differently.
"""

from typing import Optional


class SchedulingError(Exception):
    """Base exception for scheduling and approval errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SchedulingError):
    """Raised when a scheduling rule is violated."""

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.reason = reason


class BookingConflictError(ValidationError):
    """Raised when a booking cannot be admitted to the master schedule."""

    pass


class EntryConflictError(ValidationError):
    """Raised when a learning summary or support entry clashes with another entry."""

    pass


class InvalidTransitionError(ValidationError):
    """Raised when an approval action is not allowed from the entry's current status."""

    pass


class AuthorizationError(SchedulingError):
    """Raised when the user's role, ownership or department does not permit the action."""

    pass


class NotFoundError(SchedulingError):
    """Raised when a booking or entry does not exist."""

    pass
