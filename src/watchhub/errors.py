from abc import ABC
from enum import StrEnum


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthErrorKind(StrEnum):
    """Which stage of bearer authentication rejected the request."""

    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_TOKEN = "invalid_token"
    SESSION_NOT_FOUND = "session_not_found"
    UNKNOWN_USER = "unknown_user"
    CAPTCHA_FAILED = "captcha_failed"


class ChallengeErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    FLOW_MISMATCH = "flow_mismatch"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"


class AuthenticationError(UserError):
    """Raised when authentication fails.

    The kind is for logs and tests only; every kind renders as the same 401.
    """

    def __init__(
        self, message: str = "Authentication failed", kind: AuthErrorKind | ChallengeErrorKind | None = None
    ) -> None:
        super().__init__(message)
        self.kind = kind


class ChallengeError(AuthenticationError):
    """Raised when a challenge code cannot be consumed.

    The message is identical for every kind so callers cannot tell which check failed.
    """

    def __init__(self, kind: ChallengeErrorKind) -> None:
        super().__init__("Invalid challenge code", kind=kind)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class MissingUserAgentError(ValidationError):
    """Raised when a session is requested without a User-Agent."""

    def __init__(self) -> None:
        super().__init__("User agent is required")


class ConflictError(UserError):
    """Raised when a unique resource already exists."""


class ConfigurationError(Exception):
    """Raised at startup when the server cannot run with the given configuration."""
