"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.domain.entities import AccountProfile


class RegisterRequest(BaseModel):
    """Request body for account registration.

    Field rules beyond presence are checked by the credential validator so
    that all problems are reported together in one response.
    """

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password, at least 8 characters")


class LoginRequest(BaseModel):
    """Request body for password login."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class ProfileResponse(BaseModel):
    """Public account information."""

    id: int = Field(..., description="Account ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    role: str = Field(..., description="ADMIN or CUSTOMER")
    image: str | None = Field(None, description="Avatar URL")
    created_at: datetime = Field(..., description="When the account was created")
    updated_at: datetime = Field(..., description="When the account was last updated")

    @classmethod
    def from_profile(cls, profile: AccountProfile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            role=profile.role.value,
            image=profile.image,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str = Field(..., description="Human-readable message")


class ValidationErrorDetail(BaseModel):
    """Detail for a single validation error."""

    field: str = Field(..., description="Field name that failed validation")
    message: str = Field(..., description="Human-readable error message")
    code: str | None = Field(None, description="Machine-readable error code")


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    error: str = Field(..., description="Error kind")
    message: str = Field(..., description="Human-readable error message")
    details: list[ValidationErrorDetail] | None = Field(
        None, description="Per-field validation errors"
    )
