# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the Pydantic models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from core.models import (
    BusinessCreate,
    BusinessRecord,
    BusinessUpdate,
    SignupRequest,
    UploadedImage,
    UserProfile,
)


# =============================================================================
# Business Model Tests
# =============================================================================

class TestBusinessRecord:
    """Tests for BusinessRecord model."""

    def test_from_row_with_user_id_column(self):
        """Test that the table's user_id column maps to owner_id."""
        # Arrange: Row as returned by PostgREST
        owner = uuid4()
        row = {
            "id": str(uuid4()),
            "user_id": str(owner),
            "name": "Blue Door Cafe",
            "category": "cafe",
            "images": ["business-images/a.jpg"],
            "rating": 4.0,
            "created_at": "2024-01-15T10:30:00+00:00",
        }

        # Act
        business = BusinessRecord.from_row(row)

        # Assert
        assert business.owner_id == owner
        assert business.image_count == 1
        assert business.created_at.year == 2024

    def test_null_images_become_empty_list(self):
        business = BusinessRecord.from_row({
            "id": str(uuid4()),
            "owner_id": str(uuid4()),
            "name": "n",
            "category": "c",
            "images": None,
        })

        assert business.images == []
        assert business.image_count == 0

    def test_null_image_entries_kept(self):
        """Test that NULL elements of the images array don't break parsing."""
        business = BusinessRecord.from_row({
            "id": str(uuid4()),
            "owner_id": str(uuid4()),
            "name": "n",
            "category": "c",
            "images": [None, "business-images/a.jpg"],
        })

        assert business.images == [None, "business-images/a.jpg"]
        assert business.image_count == 2

    def test_rating_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            BusinessRecord(id=uuid4(), owner_id=uuid4(), name="n", category="c", rating=5.5)


class TestBusinessCreate:
    """Tests for BusinessCreate model."""

    def test_blank_optional_text_becomes_none(self):
        data = BusinessCreate(name="Shop", category="retail", contact="  ", description="")

        assert data.contact is None
        assert data.description is None

    def test_name_required(self):
        with pytest.raises(ValidationError):
            BusinessCreate(name="   ", category="retail")

    def test_to_row(self):
        owner = uuid4()
        row = BusinessCreate(name="Shop", category="retail").to_row(owner)

        assert row["user_id"] == str(owner)
        assert row["images"] == []
        assert row["rating"] == 0.0


class TestBusinessUpdate:
    """Tests for BusinessUpdate model."""

    def test_rating_upper_bound_inclusive(self):
        assert BusinessUpdate(rating=5.0).rating == 5.0
        assert BusinessUpdate(rating=0.0).rating == 0.0

    def test_rating_two_decimals_accepted(self):
        assert BusinessUpdate(rating=4.75).rating == 4.75

    @pytest.mark.parametrize("rating", [4.755, 3.001])
    def test_rating_extra_decimals_rejected(self, rating):
        """Test that ratings the NUMERIC(3, 2) column would round are rejected."""
        with pytest.raises(ValidationError):
            BusinessUpdate(rating=rating)

    @pytest.mark.parametrize("rating", [5.0001, -0.1, 6])
    def test_rating_out_of_range(self, rating):
        with pytest.raises(ValidationError):
            BusinessUpdate(rating=rating)

    def test_to_fields_only_sent(self):
        assert BusinessUpdate(description="Open Sundays").to_fields() == {"description": "Open Sundays"}

    def test_to_fields_drops_null_required_columns(self):
        assert BusinessUpdate(name=None, address="  ").to_fields() == {"address": None}

    def test_images_not_updatable(self):
        assert "images" not in BusinessUpdate.model_fields


# =============================================================================
# Image Model Tests
# =============================================================================

class TestUploadedImage:

    @pytest.mark.parametrize("content_type,extension", [
        ("image/jpeg", "jpg"),
        ("image/PNG", "png"),
        ("image/gif", "gif"),
        ("image/webp", "webp"),
        ("application/pdf", "bin"),
        (None, "bin"),
    ])
    def test_extension(self, content_type, extension):
        assert UploadedImage(content=b"", content_type=content_type).extension == extension

    def test_size(self):
        assert UploadedImage(content=b"12345", content_type="image/png").size == 5


# =============================================================================
# Account Model Tests
# =============================================================================

class TestSignupRequest:

    def test_valid(self):
        request = SignupRequest(
            email="owner@bluedoor.cafe",
            password="secret1",
            business_name="Blue Door Cafe",
            industry="hospitality",
        )
        assert request.email == "owner@bluedoor.cafe"

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            SignupRequest(email="not-an-email", password="secret1", business_name="b", industry="i")

    def test_short_password(self):
        with pytest.raises(ValidationError):
            SignupRequest(email="a@b.co", password="12345", business_name="b", industry="i")


class TestUserProfile:

    def test_from_row_prefers_auth_email(self):
        user_id = uuid4()
        profile = UserProfile.from_row(
            {"user_id": str(user_id), "business_name": "Shop", "industry": "retail"},
            email="owner@shop.com",
        )

        assert profile.user_id == user_id
        assert isinstance(profile.user_id, UUID)
        assert profile.email == "owner@shop.com"
