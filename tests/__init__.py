# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Business Listings API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_image_service.py: Image upload/remove/validate workflow
# - test_business_service.py: Business CRUD and ownership
# - test_account_service.py: Signup, login and profiles (mocked Supabase)
# - test_supabase_stores.py: Supabase store adapters (mocked client)
# - test_api.py: HTTP endpoints through TestClient
# - fakes.py: In-memory RecordStore/BlobStore with failure injection
#
# Run tests with: pytest
# =============================================================================
