# =============================================================================
# core/services/account_service.py - User Accounts
# =============================================================================
# Accounts live in Supabase Auth. Each account also has a row in the
# profiles table holding its business name and industry.
#
# - signup: admin API creates a confirmed user, then the profile row;
#   if the profile insert fails the user is deleted again
# - login: password sign-in on a throwaway anon client
# - get_profile: profile row lookup by user id
# =============================================================================

import logging
from typing import Any, Callable
from uuid import UUID

from supabase import Client

from app.exceptions import (
    AccountError,
    AccountExistsError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from core.models.account import LoginResponse, SignupRequest, UserProfile
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

# Supabase Auth error codes for an already registered email
EXISTING_ACCOUNT_CODES = frozenset({"email_exists", "user_already_exists"})
INVALID_CREDENTIALS_CODES = frozenset({"invalid_credentials", "invalid_grant"})


class AccountService:
    """
    Service for account signup, login and profile lookups.

    Example:
        service = AccountService(client, lambda: create_auth_client(settings))
        profile = service.signup(SignupRequest(email=..., password=..., ...))
    """

    def __init__(
        self,
        client: Client,
        auth_client_factory: Callable[[], Client],
        profiles_table: str = "profiles",
    ):
        self._client = client
        self._auth_client_factory = auth_client_factory
        self._profiles_table = profiles_table

    def signup(self, request: SignupRequest) -> UserProfile:
        """
        Create a confirmed account and its profile.

        Raises:
            AccountExistsError: Email already registered
            AccountError: Auth provider rejected the account
        """
        email = request.email.lower()

        try:
            response = self._client.auth.admin.create_user({
                "email": email,
                "password": request.password,
                "email_confirm": True,
            })
        except Exception as e:
            if getattr(e, "code", None) in EXISTING_ACCOUNT_CODES:
                raise AccountExistsError(email) from e
            logger.error(f"User creation failed: {e}")
            raise AccountError("Failed to create user account") from e

        user = response.user
        logger.info(f"Created user: {user.id}")

        profile_row = {
            "user_id": str(user.id),
            "business_name": request.business_name,
            "industry": request.industry,
        }
        try:
            result = self._client.table(self._profiles_table).insert(profile_row).execute()
        except Exception as e:
            logger.error(f"Profile creation failed for user {user.id}: {e}")
            self._discard_user(user.id)
            raise AccountError("Failed to create user profile") from e

        row = result.data[0] if result.data else profile_row
        return UserProfile.from_row(row, email=user.email)

    def _discard_user(self, user_id: Any) -> bool:
        """
        Best-effort delete of an auth user whose profile couldn't be created,
        so the email can sign up again. Never raises.
        """
        try:
            self._client.auth.admin.delete_user(str(user_id))
        except Exception as e:
            logger.error(f"Failed to clean up auth user {user_id} after profile error: {e}")
            return False
        logger.info(f"Cleaned up auth user {user_id} after profile error")
        return True

    def login(self, email: str, password: str) -> LoginResponse:
        """
        Sign in with email and password.

        Raises:
            InvalidCredentialsError: Wrong email or password
            AccountError: Auth provider failed
        """
        auth_client = self._auth_client_factory()
        try:
            response = auth_client.auth.sign_in_with_password({
                "email": email.lower().strip(),
                "password": password,
            })
        except Exception as e:
            if getattr(e, "code", None) in INVALID_CREDENTIALS_CODES:
                logger.warning("Login rejected: invalid credentials")
                raise InvalidCredentialsError() from e
            logger.error(f"Login failed: {e}")
            raise AccountError("Login failed") from e

        if response.session is None or response.user is None:
            raise InvalidCredentialsError()

        logger.info(f"Login successful for user: {response.user.id}")
        return LoginResponse(
            access_token=response.session.access_token,
            user_id=response.user.id,
            email=response.user.email,
        )

    def get_profile(self, user_id: UUID | str, email: str | None = None) -> UserProfile:
        """
        Fetch the profile of a user.

        Raises:
            UserNotFoundError: No profile row for this user
        """
        user_id_str = normalize_uuid(user_id)
        try:
            response = (
                self._client.table(self._profiles_table)
                .select("*")
                .eq("user_id", user_id_str)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch profile for user {user_id_str}: {e}")
            raise AccountError("Failed to fetch user profile") from e

        rows: list[dict[str, Any]] = response.data or []
        if not rows:
            raise UserNotFoundError(user_id_str)
        return UserProfile.from_row(rows[0], email=email)
