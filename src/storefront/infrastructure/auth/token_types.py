"""Token purposes and claim models for signed tokens."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TokenPurpose(str, Enum):
    """What a signed token may be used for."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenClaims(BaseModel):
    """Identity carried inside every signed token."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int = Field(..., description="Account ID")
    email: str = Field(..., min_length=1, description="Account email address")
    role: str = Field(..., min_length=1, description="Account role name")
