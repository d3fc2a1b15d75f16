from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the caller. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class ForbiddenError(UserError):
    """Raised when an operation is refused by a business rule."""


class ConflictError(UserError):
    """Raised when a resource conflicts with an existing one."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class AccountNotFoundError(NotFoundError):
    """Raised when no account matches the given id or email."""

    def __init__(self, message: str = "Account not found") -> None:
        super().__init__(message)


class SessionNotFoundError(NotFoundError):
    """Raised when no open session matches the given id."""

    def __init__(self, message: str = "Active session not found") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when email or password is wrong.

    The boundary reports unknown emails with this error as well,
    so callers cannot probe which accounts exist.
    """

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class TimeLimitExceededError(ForbiddenError):
    """Raised on login when the daily playtime budget is used up."""

    def __init__(self, message: str = "Daily time limit exceeded") -> None:
        super().__init__(message)


class AccountInactiveError(ValidationError):
    """Raised when an operation requires an account with an open session."""

    def __init__(self, message: str = "Cannot set time limit for inactive account") -> None:
        super().__init__(message)


class AlreadyExistsError(ConflictError):
    """Raised when registering an email that is already taken."""
