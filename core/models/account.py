# =============================================================================
# core/models/account.py - Account Schemas
# =============================================================================
# Signup/login request and response models plus the public profile.
# =============================================================================

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
MIN_PASSWORD_LENGTH = 6


class SignupRequest(BaseModel):
    """
    Schema for creating an account.

    Example:
        {
            "email": "owner@bluedoor.cafe",
            "password": "s3cret!",
            "business_name": "Blue Door Cafe",
            "industry": "hospitality"
        }
    """

    model_config = {"str_strip_whitespace": True}

    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    business_name: str = Field(..., min_length=1, max_length=255)
    industry: str = Field(..., min_length=1, max_length=100)


class LoginRequest(BaseModel):
    """Email/password login."""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Access token returned after a successful login."""
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    user_id: UUID
    email: str | None = None


class UserProfile(BaseModel):
    """
    Public profile of an account.

    Built from the profiles table; email comes from the auth user.
    """
    user_id: UUID
    email: str | None = None
    business_name: str | None = None
    industry: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any], email: str | None = None) -> "UserProfile":
        return cls(
            user_id=row["user_id"],
            email=email or row.get("email"),
            business_name=row.get("business_name"),
            industry=row.get("industry"),
            created_at=row.get("created_at"),
        )
