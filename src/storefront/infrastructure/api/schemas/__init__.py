"""API request and response schemas."""

from storefront.infrastructure.api.schemas.auth_schemas import (
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    ValidationErrorDetail,
)
from storefront.infrastructure.api.schemas.users_schemas import UpdateProfileRequest

__all__ = [
    "ErrorResponse",
    "LoginRequest",
    "MessageResponse",
    "ProfileResponse",
    "RegisterRequest",
    "UpdateProfileRequest",
    "ValidationErrorDetail",
]
