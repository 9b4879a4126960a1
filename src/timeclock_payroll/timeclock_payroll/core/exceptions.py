class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when a time or date range is inverted or too long."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a shift, team member or rate record does not exist."""


class StateConflictError(DomainError):
    """Raised when an operation does not fit the current shift status."""


class AlreadyActiveError(StateConflictError):
    pass


class InvalidStateError(StateConflictError):
    pass


class StillOnBreakError(StateConflictError):
    pass


class AlreadyCompletedError(StateConflictError):
    pass


class BreakAlreadyOpenError(StateConflictError):
    pass


class BreakNotStartedError(StateConflictError):
    pass
