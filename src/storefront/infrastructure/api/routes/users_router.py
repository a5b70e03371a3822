"""Current-user API routes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from storefront.infrastructure.api.dependencies import AuthenticatedAccount, AuthServiceDep
from storefront.infrastructure.api.errors import failure_response
from storefront.infrastructure.api.schemas import (
    ErrorResponse,
    ProfileResponse,
    UpdateProfileRequest,
)

router = APIRouter()


@router.get(
    "/current",
    response_model=ProfileResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Account not found"},
    },
)
async def get_current_profile(
    current_account: AuthenticatedAccount,
    auth_service: AuthServiceDep,
) -> ProfileResponse | JSONResponse:
    """Return the authenticated account's profile."""
    result = await auth_service.get_profile(current_account.account_id)
    if not result.ok:
        return failure_response(result.failure)
    return ProfileResponse.from_profile(result.value)


@router.patch(
    "/current",
    response_model=ProfileResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Account not found"},
    },
)
async def update_current_profile(
    request: UpdateProfileRequest,
    current_account: AuthenticatedAccount,
    auth_service: AuthServiceDep,
) -> ProfileResponse | JSONResponse:
    """Update the authenticated account's name, password or avatar."""
    result = await auth_service.update_profile(
        current_account.account_id,
        name=request.name,
        password=request.password,
        image=request.image,
    )
    if not result.ok:
        return failure_response(result.failure)
    return ProfileResponse.from_profile(result.value)
