class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"


class NotFoundError(DomainError):
    code = "not_found"


class ClockStateError(DomainError):
    """The caller's clock session is not in the state the operation needs."""

    code = "clock_state_error"


class AlreadyClockedIn(ClockStateError):
    code = "already_clocked_in"

    def __init__(self, message: str = "You already have an active time entry"):
        super().__init__(message)


class NoActiveSession(ClockStateError):
    code = "no_active_session"

    def __init__(self, message: str = "You are not currently clocked in"):
        super().__init__(message)


class NoPausedSession(ClockStateError):
    code = "no_paused_session"

    def __init__(self, message: str = "You do not have a paused time entry"):
        super().__init__(message)


class ReasonRequired(ClockStateError, ValidationError):
    code = "reason_required"

    def __init__(self, message: str = "A reason is required to pause"):
        super().__init__(message)


class RepositoryError(Exception):
    """Raised by storage adapters when the database driver fails."""


class DuplicateKeyError(RepositoryError):
    """A write collided with a unique index."""
