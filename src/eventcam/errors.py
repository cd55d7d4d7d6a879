from abc import ABC
from typing import Any


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """

    code = "BAD_REQUEST"
    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message or self.default_message)
        self.details = details or {}


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    code = "NOT_FOUND"
    status_code = 404
    default_message = "Document not found"


class AuthenticationError(UserError):
    """Raised when a credential of any kind is missing, invalid or expired.

    Deliberately coarse: callers must not be able to tell an unknown token
    from an expired one.
    """

    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Authentication failed"


class CsrfCheckFailedError(UserError):
    """Raised when a cookie-authenticated mutation comes from an untrusted origin."""

    code = "CSRF_CHECK_FAILED"
    status_code = 403
    default_message = "CSRF check failed for organizer session request"


class InvalidPinError(UserError):
    """Raised when a PIN-gated event is joined with a missing or wrong PIN."""

    code = "INVALID_PIN"
    status_code = 403
    default_message = "A valid event PIN is required"


class TooManyPinAttemptsError(UserError):
    """Raised when too many wrong PINs were tried for one event."""

    code = "TOO_MANY_PIN_ATTEMPTS"
    status_code = 429
    default_message = "Too many PIN attempts, try again later"


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""

    code = "FORBIDDEN"
    status_code = 403
    default_message = "Access denied"


class EventNotJoinableError(UserError):
    """Raised when guests try to join or upload to an event that is not active."""

    code = "EVENT_NOT_ACTIVE"
    status_code = 409
    default_message = "Event is not accepting guests"


class ValidationError(UserError):
    """Raised when user input fails validation."""

    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Invalid request"


class BackendError(Exception):
    """Base class for faults of an external collaborator (storage, database).

    The message is safe to show; `cause` keeps the underlying error for logs
    and is never sent to the client.
    """

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    @property
    def cause_message(self) -> str:
        return str(self.cause) if self.cause is not None else ""


class StorageSignError(BackendError):
    code = "STORAGE_SIGN_FAILED"


class StorageCheckError(BackendError):
    code = "STORAGE_CHECK_FAILED"


class StorageDeleteError(BackendError):
    code = "STORAGE_DELETE_FAILED"


class WriteFailedError(BackendError):
    code = "DB_WRITE_FAILED"
