# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase client factories and PostgREST error codes
# - utils.py: Shared utilities (UUID normalization)
# =============================================================================

from lib.supabase_client import (
    SupabaseClientError,
    create_auth_client,
    create_service_client,
    postgrest_error_code,
)
from lib.utils import normalize_uuid, same_id

__all__ = [
    # Supabase
    "SupabaseClientError",
    "create_auth_client",
    "create_service_client",
    "postgrest_error_code",
    # Utils
    "normalize_uuid",
    "same_id",
]
