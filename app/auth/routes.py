# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Account signup/login through Supabase Auth, plus endpoints for the
# authenticated user's own profile.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser
from app.dependencies import AccountServiceDep
from core.models.account import LoginRequest, LoginResponse, SignupRequest, UserProfile

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest, service: AccountServiceDep):
    """
    Create an account.

    Creates a confirmed Supabase Auth user and its profile row.

    Raises:
        400: Invalid email, short password or missing fields
        409: Email already registered
    """
    profile = service.signup(request)
    return {
        "message": "Signup successful",
        "user": profile,
    }


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, service: AccountServiceDep):
    """
    Log in with email and password.

    Returns an access token to send as "Authorization: Bearer <token>".

    Raises:
        401: Wrong email or password
    """
    return service.login(request.email, request.password)


@router.get("/me", response_model=UserProfile)
async def get_current_user_info(
    service: AccountServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
        404: If the user has no profile yet
    """
    return service.get_profile(user.id, email=user.email)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
