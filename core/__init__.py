# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for data validation
# - stores/: Record and blob store interfaces plus their Supabase adapters
# - services/: Business CRUD, the image workflow, and accounts
#
# Services receive their stores through the constructor; nothing here
# reaches for a global client.
# =============================================================================
