# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides in-memory stores and services wired to them
# - Provides an API client whose stores and auth are overridden
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from uuid import uuid4

import pytest

from core.services.business_service import BusinessService
from core.services.image_service import ImageService
from tests.fakes import InMemoryBlobStore, InMemoryRecordStore

BUCKET = "business-images"


# =============================================================================
# Identity Fixtures
# =============================================================================

@pytest.fixture
def owner_id():
    """ID of the user who owns the sample business."""
    return uuid4()


@pytest.fixture
def other_user_id():
    """ID of a user who owns nothing."""
    return uuid4()


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def records():
    """Empty in-memory business table."""
    return InMemoryRecordStore()


@pytest.fixture
def blobs():
    """Empty in-memory image bucket."""
    return InMemoryBlobStore(BUCKET)


@pytest.fixture
def business_row(records, owner_id):
    """A business owned by `owner_id` with no images yet."""
    row = records.insert({
        "user_id": str(owner_id),
        "name": "Blue Door Cafe",
        "category": "cafe",
        "address": "12 Harbour St",
        "contact": None,
        "description": None,
        "images": [],
        "rating": 0.0,
    })
    records.calls.clear()
    return row


@pytest.fixture
def business_id(business_row):
    return business_row["id"]


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def image_service(records, blobs):
    return ImageService(records, blobs, bucket=BUCKET)


@pytest.fixture
def business_service(records):
    return BusinessService(records)
