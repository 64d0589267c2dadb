# =============================================================================
# core/stores/__init__.py - Store Exports
# =============================================================================

from .base import (
    BlobStore,
    BlobStoreError,
    RecordNotFoundError,
    RecordStore,
    RecordStoreError,
    StoreError,
)
from .supabase_blobs import SupabaseBlobStore
from .supabase_records import ArrayFunctions, SupabaseRecordStore

__all__ = [
    "BlobStore",
    "BlobStoreError",
    "RecordNotFoundError",
    "RecordStore",
    "RecordStoreError",
    "StoreError",
    "SupabaseBlobStore",
    "ArrayFunctions",
    "SupabaseRecordStore",
]
