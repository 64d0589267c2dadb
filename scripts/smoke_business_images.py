#!/usr/bin/env python3
"""
Smoke test of the business image workflow against a live Supabase project.

Creates a throwaway business, uploads a 1x1 PNG, validates and removes it,
then deletes the business and the uploaded file.

Needs SUPABASE_URL / SUPABASE_ANON_KEY / SUPABASE_SERVICE_KEY in .env and
SMOKE_OWNER_ID set to the id of an existing auth user.

Usage:
    python scripts/smoke_business_images.py
"""

import base64
import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.config import settings
from app.dependencies import BUSINESS_IMAGE_FUNCTIONS
from core.models.business import BusinessCreate
from core.models.image import UploadedImage
from core.services.business_service import BusinessService
from core.services.image_service import ImageService
from core.stores.supabase_blobs import SupabaseBlobStore
from core.stores.supabase_records import SupabaseRecordStore
from lib.supabase_client import create_service_client

# 1x1 transparent PNG
PIXEL_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def main():
    owner_id = os.environ.get("SMOKE_OWNER_ID")
    if not owner_id:
        print("Set SMOKE_OWNER_ID to the id of an existing auth user")
        return 1

    client = create_service_client(settings)
    records = SupabaseRecordStore(
        client,
        settings.BUSINESS_TABLE,
        array_functions={"images": BUSINESS_IMAGE_FUNCTIONS} if settings.USE_ARRAY_FUNCTIONS else {},
    )
    blobs = SupabaseBlobStore(client, settings.IMAGE_BUCKET)
    businesses = BusinessService(records)
    images = ImageService(
        records,
        blobs,
        bucket=settings.IMAGE_BUCKET,
        allowed_types=settings.allowed_image_types_list,
        max_bytes=settings.max_image_size_bytes,
    )

    print(f"\n{'='*60}")
    print("BUSINESS IMAGE SMOKE TEST")
    print(f"{'='*60}")

    business = businesses.create_business(owner_id, BusinessCreate(name="Smoke Test Cafe", category="test"))
    print(f"Created business {business.id}")

    path = None
    try:
        path, business = images.attach_image(
            owner_id, business.id, UploadedImage(PIXEL_PNG, "image/png", "pixel.png")
        )
        print(f"Uploaded: {path}")
        print(f"Public URL: {images.public_url(path)}")
        assert business.images == [path], business.images

        report = images.validate_images(business.id)
        print(f"Validation: {report.valid_count}/{report.total} valid")
        assert report.valid_count == 1

        business = images.remove_image(owner_id, business.id, path)
        assert business.images == [], business.images
        print("Removed image from business")
    finally:
        businesses.delete_business(owner_id, business.id)
        print(f"Deleted business {business.id}")
        if path:
            blobs.delete(path)
            print("Deleted uploaded file")

    print("\n✓ Smoke test passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
