# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        business_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        business_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def same_id(left: str | UUID | None, right: str | UUID | None) -> bool:
    """Compare two ids that may be UUID objects or strings (case-insensitive)."""
    if left is None or right is None:
        return False
    return normalize_uuid(left).lower() == normalize_uuid(right).lower()
