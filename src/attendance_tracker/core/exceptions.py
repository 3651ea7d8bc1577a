class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class EmptyNoteError(ValidationError):
    code = "empty_note"

    def __init__(self, message: str = "Note cannot be empty"):
        super().__init__(message)


class AuthenticationError(DomainError):
    """Raised when there is no valid identity (bad credentials, no session)."""

    code = "unauthorized"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"


class InvalidTransitionError(DomainError):
    """Raised when an action is not allowed from the record's current state."""

    code = "invalid_transition"


class AlreadyCheckedInError(InvalidTransitionError):
    code = "already_checked_in"

    def __init__(self, message: str = "Already checked in"):
        super().__init__(message)


class InvalidBreakStartError(InvalidTransitionError):
    code = "invalid_break_start"

    def __init__(self, message: str = "Invalid break start"):
        super().__init__(message)


class InvalidBreakEndError(InvalidTransitionError):
    code = "invalid_break_end"

    def __init__(self, message: str = "Invalid break end"):
        super().__init__(message)


class InvalidCheckOutError(InvalidTransitionError):
    code = "invalid_check_out"

    def __init__(self, message: str = "Invalid check out"):
        super().__init__(message)


class NotFoundError(DomainError):
    code = "not_found"


class NoRecordForTodayError(NotFoundError):
    code = "no_record_for_today"

    def __init__(self, message: str = "No attendance record found for today"):
        super().__init__(message)


class StoreError(Exception):
    """Raised when the underlying persistence fails. Surfaced as a server error."""

    code = "store_failure"


class DuplicateRecordError(StoreError):
    """Unique key (employee, date) violated on insert."""

    code = "duplicate_record"
