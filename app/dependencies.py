# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for clients, stores and services.
# These are injected into route handlers using Depends().
#
# The Supabase service client is built once per process (lru_cache) and
# passed down explicitly. Tests replace the store/service dependencies
# through app.dependency_overrides.
# =============================================================================

from functools import lru_cache, partial
from typing import Annotated

from fastapi import Depends
from supabase import Client

from app.config import settings
from core.services.account_service import AccountService
from core.services.business_service import BusinessService
from core.services.image_service import ImageService
from core.stores.base import BlobStore, RecordStore
from core.stores.supabase_blobs import SupabaseBlobStore
from core.stores.supabase_records import ArrayFunctions, SupabaseRecordStore
from lib.supabase_client import create_auth_client, create_service_client

# Postgres functions that mutate business.images atomically (sql/schema.sql)
BUSINESS_IMAGE_FUNCTIONS = ArrayFunctions(
    append="add_image_to_business",
    remove="remove_image_from_business",
)


@lru_cache
def get_supabase_client() -> Client:
    """
    Get the process-wide Supabase service client.

    Built on first use (warmed at startup by the app lifespan).
    """
    return create_service_client(settings)


def get_business_store(
    client: Annotated[Client, Depends(get_supabase_client)],
) -> RecordStore:
    """Record store for the business table."""
    array_functions = {"images": BUSINESS_IMAGE_FUNCTIONS} if settings.USE_ARRAY_FUNCTIONS else {}
    return SupabaseRecordStore(client, settings.BUSINESS_TABLE, array_functions=array_functions)


def get_image_store(
    client: Annotated[Client, Depends(get_supabase_client)],
) -> BlobStore:
    """Blob store for the business image bucket."""
    return SupabaseBlobStore(client, settings.IMAGE_BUCKET)


def get_business_service(
    records: Annotated[RecordStore, Depends(get_business_store)],
) -> BusinessService:
    return BusinessService(records)


def get_image_service(
    records: Annotated[RecordStore, Depends(get_business_store)],
    blobs: Annotated[BlobStore, Depends(get_image_store)],
) -> ImageService:
    return ImageService(
        records,
        blobs,
        bucket=settings.IMAGE_BUCKET,
        allowed_types=settings.allowed_image_types_list,
        max_bytes=settings.max_image_size_bytes,
    )


def get_account_service(
    client: Annotated[Client, Depends(get_supabase_client)],
) -> AccountService:
    return AccountService(
        client,
        partial(create_auth_client, settings),
        profiles_table=settings.PROFILES_TABLE,
    )


# Type aliases for dependency injection
SupabaseDep = Annotated[Client, Depends(get_supabase_client)]
BusinessServiceDep = Annotated[BusinessService, Depends(get_business_service)]
ImageServiceDep = Annotated[ImageService, Depends(get_image_service)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
