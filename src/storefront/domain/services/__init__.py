"""Domain services for Storefront.

Services contain business logic that doesn't naturally fit within a single entity.
"""

from storefront.domain.services.auth_result import (
    AuthErrorKind,
    AuthFailure,
    AuthResult,
    FieldError,
)
from storefront.domain.services.auth_service import AuthService, RefreshHashConflictError
from storefront.domain.services.credential_validator import (
    CredentialValidator,
    default_credential_validator,
    normalize_email,
)

__all__ = [
    "AuthErrorKind",
    "AuthFailure",
    "AuthResult",
    "AuthService",
    "CredentialValidator",
    "FieldError",
    "RefreshHashConflictError",
    "default_credential_validator",
    "normalize_email",
]
