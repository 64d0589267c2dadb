# =============================================================================
# app/routers/users.py - User Lookup Endpoints
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path

from app.auth import AuthUser, get_current_user
from app.dependencies import AccountServiceDep
from core.models.account import UserProfile

router = APIRouter()


@router.get("/{user_id}", response_model=UserProfile)
async def get_user(
    user_id: Annotated[UUID, Path(description="User UUID")],
    service: AccountServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Get a user's public profile.

    Requires authentication.
    """
    return service.get_profile(user_id)
