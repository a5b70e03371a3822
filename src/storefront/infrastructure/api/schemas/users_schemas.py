"""Pydantic schemas for the current-user endpoints."""

from pydantic import BaseModel, Field


class UpdateProfileRequest(BaseModel):
    """Request body for updating the caller's own profile.

    Omitted fields are left unchanged. The role is not accepted here.
    """

    name: str | None = Field(None, description="New display name")
    password: str | None = Field(None, description="New password, at least 8 characters")
    image: str | None = Field(None, description="New avatar URL")
