# =============================================================================
# lib/supabase_client.py - Supabase Client Factory
# =============================================================================
# Builds the Supabase clients used by the application:
# - Service client: service_role key, used for database and storage operations
# - Auth client: anon key, used only for password sign-in
#
# The service client is created once per process (see app/dependencies.py)
# and handed to the stores that need it. Nothing here holds global state.
#
# Usage:
#   from lib.supabase_client import create_service_client
#   client = create_service_client(settings)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from postgrest.exceptions import APIError
from supabase import Client, ClientOptions, create_client

from app.config import Settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST error codes the stores branch on
FUNCTION_NOT_FOUND_CODES = frozenset({"PGRST202", "42883"})


class SupabaseClientError(Exception):
    """
    Error while creating a Supabase client.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def create_service_client(settings: Settings) -> Client:
    """
    Create a Supabase client with the service_role key.

    The service key bypasses Row Level Security (RLS), which is appropriate
    for server-side operations; ownership is enforced by the services.

    Raises:
        SupabaseClientError: If client creation fails
    """
    try:
        client = create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_KEY,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )
    except Exception as e:
        raise SupabaseClientError(
            message=f"Failed to create Supabase client: {e}",
            code="CLIENT_INIT_FAILED",
            suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
        ) from e

    logger.info("Supabase service client initialized successfully")
    return client


def create_auth_client(settings: Settings) -> Client:
    """
    Create a short-lived anon client for password sign-in.

    A fresh client is used per sign-in so one user's session never
    leaks into another request.

    Raises:
        SupabaseClientError: If client creation fails
    """
    try:
        return create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_ANON_KEY,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )
    except Exception as e:
        raise SupabaseClientError(
            message=f"Failed to create Supabase auth client: {e}",
            code="CLIENT_INIT_FAILED",
            suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
        ) from e


def postgrest_error_code(exc: BaseException) -> str | None:
    """Return the PostgREST/Postgres error code of an SDK exception, if any."""
    if isinstance(exc, APIError):
        return exc.code
    return None
