class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRange(ValidationError):
    """Raised when a date range ends before it starts."""


class DuplicateCheckIn(DomainError):
    """Raised when the user already checked in for the day."""


class NoActiveCheckIn(DomainError):
    """Raised on check-out without an open check-in for the day."""


class AlreadyReviewed(DomainError):
    """Raised when reviewing a leave request that is no longer pending."""


class NotFound(DomainError):
    """Raised when a record required for a mutation does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
