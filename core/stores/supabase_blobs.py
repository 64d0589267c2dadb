# =============================================================================
# core/stores/supabase_blobs.py - Supabase Storage Blob Store
# =============================================================================
# BlobStore backed by one Supabase Storage bucket.
#
# Paths handed to this store are full paths: "<bucket>/<object key>", the
# same shape Supabase reports as `fullPath`. The bucket segment is stripped
# before talking to the Storage API.
# =============================================================================

import logging

from supabase import Client

from core.stores.base import BlobStore, BlobStoreError

logger = logging.getLogger(__name__)


class SupabaseBlobStore(BlobStore):
    """
    Service for Supabase Storage operations on a single bucket.

    Example:
        blobs = SupabaseBlobStore(client, bucket="business-images")
        blobs.put("business-images/u1/b1/photo.png", data, "image/png")
        url = blobs.get_public_url("business-images/u1/b1/photo.png")
    """

    def __init__(self, client: Client, bucket: str):
        self._client = client
        self._bucket = bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    def object_key(self, path: str) -> str:
        """Strip the bucket segment from a full path."""
        prefix = f"{self._bucket}/"
        return path[len(prefix):] if path.startswith(prefix) else path

    def put(self, path: str, content: bytes, content_type: str) -> dict[str, str]:
        """
        Upload raw bytes to storage.

        Raises:
            BlobStoreError: If upload fails
        """
        key = self.object_key(path)
        try:
            self._client.storage.from_(self._bucket).upload(
                path=key,
                file=content,
                file_options={"content-type": content_type, "upsert": "false"}
            )
        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise BlobStoreError(
                message="Failed to upload object",
                code="BLOB_PUT_FAILED",
                details={"bucket": self._bucket, "error": str(e)},
            ) from e

        logger.info(f"Uploaded {len(content)} bytes to bucket {self._bucket}")
        return {"path": path}

    def delete(self, path: str) -> None:
        """
        Delete a file from storage.

        Raises:
            BlobStoreError: If deletion fails
        """
        key = self.object_key(path)
        try:
            self._client.storage.from_(self._bucket).remove([key])
        except Exception as e:
            logger.error(f"Failed to delete file: {e}")
            raise BlobStoreError(
                message="Failed to delete object",
                code="BLOB_DELETE_FAILED",
                details={"bucket": self._bucket, "error": str(e)},
            ) from e

        logger.info(f"Deleted object from bucket {self._bucket}")

    def get_public_url(self, path: str) -> str:
        """
        Get a public URL for a storage file.

        Raises:
            BlobStoreError: If the URL can't be built
        """
        key = self.object_key(path)
        try:
            url = self._client.storage.from_(self._bucket).get_public_url(key)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise BlobStoreError(
                message="Failed to build public URL",
                code="BLOB_URL_FAILED",
                details={"bucket": self._bucket, "error": str(e)},
            ) from e

        # Some SDK versions return the URL with a dangling "?" when no
        # transform options are passed
        return url.rstrip("?") if isinstance(url, str) else url
