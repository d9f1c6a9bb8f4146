class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed (bad month, page, decision...)."""


class InvalidRange(DomainError):
    """Raised when a date or time range ends before it starts."""


class OverlappingRequest(DomainError):
    """Raised when a leave overlaps a pending or approved leave of the same employee."""


class AlreadyCheckedIn(DomainError):
    pass


class AlreadyCheckedOut(DomainError):
    pass


class NoCheckInFound(DomainError):
    pass


class AlreadyDecided(DomainError):
    """Raised when deciding a leave that is no longer pending."""


class NotFound(DomainError):
    pass


class StoreFailure(DomainError):
    """Raised when the record store fails (connection loss, unexpected constraint)."""
