"""Tagged results returned by the authentication service.

Every authentication operation returns an ``AuthResult`` holding either a
value or an ``AuthFailure``. The failure kinds form a closed set so callers
can map each one explicitly instead of catching exceptions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class AuthErrorKind(str, Enum):
    """Classified authentication failures."""

    VALIDATION_ERROR = "ValidationError"
    DUPLICATE_EMAIL = "DuplicateEmail"
    INVALID_CREDENTIALS = "InvalidCredentials"
    INVALID_OR_EXPIRED_TOKEN = "InvalidOrExpiredToken"
    INVALID_TOKEN = "InvalidToken"
    MISSING_TOKEN = "MissingToken"
    REFRESH_TOKEN_MISMATCH = "RefreshTokenMismatch"
    NO_ACTIVE_SESSION = "NoActiveSession"
    ACCOUNT_NOT_FOUND = "AccountNotFound"
    UNEXPECTED = "Unexpected"


@dataclass(frozen=True)
class FieldError:
    """A single input validation problem.

    Attributes:
        field: The field name that failed validation.
        message: Human-readable error message.
        code: Machine-readable error code.
    """

    field: str
    message: str
    code: str


@dataclass(frozen=True)
class AuthFailure:
    """A classified failure with a client-safe message."""

    kind: AuthErrorKind
    message: str
    details: tuple[FieldError, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AuthResult(Generic[T]):
    """Outcome of an authentication operation."""

    value: T | None = None
    failure: AuthFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "AuthResult[T]":
        return cls(value=value)

    @classmethod
    def fail(
        cls,
        kind: AuthErrorKind,
        message: str,
        details: tuple[FieldError, ...] | list[FieldError] = (),
    ) -> "AuthResult[T]":
        return cls(failure=AuthFailure(kind=kind, message=message, details=tuple(details)))
