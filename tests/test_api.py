# =============================================================================
# tests/test_api.py - HTTP Endpoint Tests
# =============================================================================
# Drives the FastAPI app through TestClient. Stores are replaced with the
# in-memory fakes and auth with a fixed user via app.dependency_overrides,
# so no Supabase project is needed.
#
# The client is used without a `with` block: the lifespan (which builds the
# real Supabase client) never runs.
# =============================================================================

import time
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser
from app.config import settings
from app.dependencies import (
    get_account_service,
    get_business_store,
    get_image_store,
    get_supabase_client,
)
from app.main import app

FIVE_MIB = 5 * 1024 * 1024


@pytest.fixture
def api(records, blobs):
    """App with in-memory stores; overrides are removed after each test."""
    app.dependency_overrides[get_business_store] = lambda: records
    app.dependency_overrides[get_image_store] = lambda: blobs
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(api):
    return TestClient(api)


@pytest.fixture
def login_as(api):
    """Return a function that makes every request come from the given user."""
    def _login_as(user_id):
        api.dependency_overrides[get_current_user] = lambda: AuthUser(id=user_id, email="user@example.com")
        return TestClient(api)
    return _login_as


@pytest.fixture
def client(login_as, owner_id):
    """Client authenticated as the owner of the sample business."""
    return login_as(owner_id)


def _image_files(size: int = 128, content_type: str = "image/jpeg"):
    return {"image": ("storefront.jpg", b"\x89" * size, content_type)}


# =============================================================================
# Image Upload
# =============================================================================

class TestUploadImage:

    def test_upload_success(self, client, business_id, owner_id, blobs):
        response = client.post(f"/api/v1/upload-image/business/{business_id}", files=_image_files())

        assert response.status_code == 200
        body = response.json()
        assert body["image_path"].startswith(f"business-images/{owner_id}/{business_id}/")
        assert body["public_url"].startswith("https://")
        assert body["business"]["images"] == [body["image_path"]]
        assert body["image_path"] in blobs.objects

    def test_upload_requires_auth(self, anonymous_client, business_id, blobs):
        response = anonymous_client.post(
            f"/api/v1/upload-image/business/{business_id}", files=_image_files()
        )

        assert response.status_code == 401
        assert blobs.objects == {}

    def test_upload_by_non_owner(self, login_as, business_id, records):
        client = login_as(uuid4())

        response = client.post(f"/api/v1/upload-image/business/{business_id}", files=_image_files())

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"
        assert records.rows[business_id]["images"] == []

    def test_upload_unknown_business(self, client):
        response = client.post(f"/api/v1/upload-image/business/{uuid4()}", files=_image_files())

        assert response.status_code == 404
        assert response.json()["code"] == "BUSINESS_NOT_FOUND"

    def test_upload_invalid_type(self, client, business_id):
        response = client.post(
            f"/api/v1/upload-image/business/{business_id}",
            files=_image_files(content_type="application/pdf"),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILE_TYPE"

    def test_upload_too_large(self, client, business_id):
        response = client.post(
            f"/api/v1/upload-image/business/{business_id}", files=_image_files(size=FIVE_MIB + 1)
        )

        assert response.status_code == 413
        assert response.json()["code"] == "FILE_TOO_LARGE"

    def test_upload_missing_file_field(self, client, business_id):
        response = client.post(f"/api/v1/upload-image/business/{business_id}")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_upload_malformed_business_id(self, client):
        response = client.post("/api/v1/upload-image/business/not-a-uuid", files=_image_files())

        assert response.status_code == 400

    def test_record_failure_reports_cleanup(self, client, business_id, records, blobs):
        records.fail_on.add("append_to_array_field")

        response = client.post(f"/api/v1/upload-image/business/{business_id}", files=_image_files())

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "RECORD_UPDATE_FAILED"
        assert body["details"]["cleanup_succeeded"] is True
        assert blobs.objects == {}

    def test_storage_failure(self, client, business_id, blobs):
        blobs.fail_on.add("put")

        response = client.post(f"/api/v1/upload-image/business/{business_id}", files=_image_files())

        assert response.status_code == 500
        assert response.json()["code"] == "STORAGE_WRITE_FAILED"

    def test_public_url_failure_after_commit(self, client, business_id, records, blobs):
        blobs.fail_on.add("get_public_url")

        response = client.post(f"/api/v1/upload-image/business/{business_id}", files=_image_files())

        assert response.status_code == 200
        body = response.json()
        assert body["public_url"] is None
        assert records.rows[business_id]["images"] == [body["image_path"]]


class TestUnassignedUpload:

    def test_upload_without_business(self, client, owner_id, records, blobs):
        response = client.post("/api/v1/upload-image", files=_image_files())

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Image uploaded successfully"
        assert body["business"] is None
        assert body["image_path"].startswith(f"business-images/{owner_id}/")
        assert body["image_path"] in blobs.objects
        assert records.writes() == []

    def test_upload_with_business_field(self, client, business_id, records):
        response = client.post(
            "/api/v1/upload-image", files=_image_files(), data={"business_id": business_id}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Image uploaded and associated with business successfully"
        assert records.rows[business_id]["images"] == [body["image_path"]]

    def test_requires_auth(self, anonymous_client, blobs):
        response = anonymous_client.post("/api/v1/upload-image", files=_image_files())

        assert response.status_code == 401
        assert blobs.objects == {}

    def test_invalid_type(self, client, blobs):
        response = client.post("/api/v1/upload-image", files=_image_files(content_type="text/plain"))

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILE_TYPE"
        assert blobs.objects == {}


# =============================================================================
# Image Removal + Validation
# =============================================================================

class TestRemoveAndValidate:

    def test_remove_image(self, client, business_id, records):
        records.rows[business_id]["images"] = ["business-images/a.jpg", "business-images/b.jpg"]

        response = client.delete(
            f"/api/v1/upload-image/business/{business_id}",
            params={"path": "business-images/a.jpg"},
        )

        assert response.status_code == 200
        assert response.json()["business"]["images"] == ["business-images/b.jpg"]

    def test_remove_requires_path(self, client, business_id):
        response = client.delete(f"/api/v1/upload-image/business/{business_id}")

        assert response.status_code == 400

    def test_validate_images_is_public(self, anonymous_client, business_id, records):
        records.rows[business_id]["images"] = ["business-images/a.jpg", "elsewhere/b.jpg"]

        response = anonymous_client.get(f"/api/v1/business/validate-images/{business_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["valid_count"] == 1
        assert body["images"][1] == {"path": "elsewhere/b.jpg", "is_valid": False, "public_url": None}

    def test_remove_store_failure(self, client, business_id, records):
        records.rows[business_id]["images"] = ["business-images/a.jpg"]
        records.fail_on.add("remove_from_array_field")

        response = client.delete(
            f"/api/v1/upload-image/business/{business_id}",
            params={"path": "business-images/a.jpg"},
        )

        assert response.status_code == 500
        assert response.json()["code"] == "IMAGE_REMOVAL_FAILED"
        assert records.rows[business_id]["images"] == ["business-images/a.jpg"]

    def test_validate_reports_null_entries(self, anonymous_client, business_id, records):
        records.rows[business_id]["images"] = [None, "business-images/a/b/c.jpg"]

        response = anonymous_client.get(f"/api/v1/business/validate-images/{business_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["valid_count"] == 1
        assert body["images"][0] == {"path": None, "is_valid": False, "public_url": None}

    def test_validate_unknown_business(self, anonymous_client):
        response = anonymous_client.get(f"/api/v1/business/validate-images/{uuid4()}")

        assert response.status_code == 404


# =============================================================================
# Business CRUD
# =============================================================================

class TestBusinessEndpoints:

    def test_create_business(self, client, owner_id):
        response = client.post("/api/v1/business", json={"name": "Corner Books", "category": "books"})

        assert response.status_code == 201
        business = response.json()["business"]
        assert business["owner_id"] == str(owner_id)
        assert business["images"] == []
        assert business["image_count"] == 0

    def test_create_requires_auth(self, anonymous_client):
        response = anonymous_client.post("/api/v1/business", json={"name": "x", "category": "y"})

        assert response.status_code == 401

    def test_list_businesses(self, anonymous_client, business_id):
        response = anonymous_client.get("/api/v1/business")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["businesses"][0]["id"] == business_id

    def test_get_business(self, anonymous_client, business_id):
        response = anonymous_client.get(f"/api/v1/business/{business_id}")

        assert response.status_code == 200
        assert response.json()["business"]["name"] == "Blue Door Cafe"

    def test_update_rating(self, client, business_id):
        response = client.put(f"/api/v1/business/{business_id}", json={"rating": 5.0})

        assert response.status_code == 200
        assert response.json()["business"]["rating"] == 5.0

    def test_update_rating_out_of_range(self, client, business_id, records):
        response = client.put(f"/api/v1/business/{business_id}", json={"rating": 5.0001})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert records.rows[business_id]["rating"] == 0.0

    def test_update_rating_extra_decimals(self, client, business_id, records):
        response = client.put(f"/api/v1/business/{business_id}", json={"rating": 4.755})

        assert response.status_code == 400
        assert records.rows[business_id]["rating"] == 0.0

    def test_delete_by_non_owner(self, login_as, business_id, records):
        response = login_as(uuid4()).delete(f"/api/v1/business/{business_id}")

        assert response.status_code == 403
        assert business_id in records.rows

    def test_delete_business(self, client, business_id, records):
        response = client.delete(f"/api/v1/business/{business_id}")

        assert response.status_code == 200
        assert response.json()["business_id"] == business_id
        assert business_id not in records.rows

    def test_store_failure_is_500(self, anonymous_client, records):
        records.fail_on.add("list_all")

        response = anonymous_client.get("/api/v1/business")

        assert response.status_code == 500
        assert response.json()["code"] == "STORE_ERROR"


# =============================================================================
# Auth + Users
# =============================================================================

def _token(sub: str, expires_in: int = 3600) -> str:
    now = int(time.time())
    return jwt.encode(
        {"sub": sub, "email": "owner@shop.com", "aud": "authenticated", "iat": now, "exp": now + expires_in},
        settings.SUPABASE_JWT_SECRET,
        algorithm="HS256",
    )


class TestAuthEndpoints:

    def test_verify_valid_token(self, anonymous_client):
        user_id = str(uuid4())

        response = anonymous_client.get(
            "/api/v1/auth/verify", headers={"Authorization": f"Bearer {_token(user_id)}"}
        )

        assert response.status_code == 200
        assert response.json() == {"valid": True, "user_id": user_id, "email": "owner@shop.com"}

    def test_verify_expired_token(self, anonymous_client):
        response = anonymous_client.get(
            "/api/v1/auth/verify",
            headers={"Authorization": f"Bearer {_token(str(uuid4()), expires_in=-60)}"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_verify_garbage_token(self, anonymous_client):
        response = anonymous_client.get(
            "/api/v1/auth/verify", headers={"Authorization": "Bearer not.a.jwt"}
        )

        assert response.status_code == 401

    def test_verify_without_token(self, anonymous_client):
        response = anonymous_client.get("/api/v1/auth/verify")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_signup_invalid_email(self, api):
        api.dependency_overrides[get_account_service] = lambda: MagicMock()

        response = TestClient(api).post("/api/v1/auth/signup", json={
            "email": "nope",
            "password": "secret1",
            "business_name": "b",
            "industry": "i",
        })

        assert response.status_code == 400

    def test_get_user_profile(self, client):
        user_id = uuid4()
        service = MagicMock()
        service.get_profile.return_value = {
            "user_id": str(user_id),
            "email": None,
            "business_name": "Corner Books",
            "industry": "retail",
            "created_at": None,
        }
        app.dependency_overrides[get_account_service] = lambda: service

        response = client.get(f"/api/v1/users/{user_id}")

        assert response.status_code == 200
        assert response.json()["business_name"] == "Corner Books"
        service.get_profile.assert_called_once_with(user_id)


# =============================================================================
# Health
# =============================================================================

class TestHealth:

    def test_health(self, anonymous_client):
        response = anonymous_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness_degraded_when_bucket_missing(self, api):
        supabase = MagicMock()
        supabase.storage.get_bucket.side_effect = RuntimeError("bucket missing")
        api.dependency_overrides[get_supabase_client] = lambda: supabase

        response = TestClient(api).get("/api/v1/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["checks"] == {
            "business_table": "healthy",
            "profiles_table": "healthy",
            "image_bucket": "unhealthy",
        }
        supabase.storage.get_bucket.assert_called_once_with("business-images")

    def test_root(self, anonymous_client):
        assert anonymous_client.get("/").json()["name"] == "Business Listings API"
