# =============================================================================
# core/services/image_service.py - Business Image Workflow
# =============================================================================
# Attaches uploaded images to business records, removes them, and reports
# on the stored image paths.
#
# Uploading touches two stores without a shared transaction. The blob is
# written first and the record second; if the record write fails the blob
# is deleted again (best effort). An orphaned blob costs storage, a record
# pointing at a missing blob shows a broken image.
# =============================================================================

import logging
from datetime import datetime, timezone
from uuid import UUID, uuid4

from app.exceptions import (
    BusinessNotFoundError,
    FileTooLargeError,
    ForbiddenError,
    ImageRemovalError,
    InvalidFileTypeError,
    RecordUpdateError,
    StorageWriteError,
)
from core.models.business import BusinessRecord
from core.models.image import ImageCheck, ImageValidationReport, UploadedImage
from core.stores.base import (
    BlobStore,
    BlobStoreError,
    RecordNotFoundError,
    RecordStore,
    RecordStoreError,
)
from lib.utils import normalize_uuid, same_id

logger = logging.getLogger(__name__)

IMAGES_FIELD = "images"
DEFAULT_ALLOWED_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
DEFAULT_MAX_BYTES = 5 * 1024 * 1024


def _unique_file_name(extension: str) -> str:
    """<utc timestamp>-<uuid hex>.<ext>; never reused."""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    return f"{timestamp}-{uuid4().hex}.{extension}"


class ImageService:
    """
    Service for business image operations.

    Both stores are injected; the service keeps no state between calls
    and re-reads the business on every operation.

    Example:
        service = ImageService(records, blobs, bucket="business-images")
        business = service.associate_image(user.id, business_id, image)
    """

    def __init__(
        self,
        records: RecordStore,
        blobs: BlobStore,
        bucket: str,
        allowed_types: list[str] | tuple[str, ...] = DEFAULT_ALLOWED_TYPES,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ):
        self._records = records
        self._blobs = blobs
        self._bucket = bucket
        self._allowed_types = [t.lower() for t in allowed_types]
        self._max_bytes = max_bytes

    @property
    def namespace_marker(self) -> str:
        """Substring every valid image path contains."""
        return self._bucket

    # -------------------------------------------------------------------------
    # Upload + Associate
    # -------------------------------------------------------------------------

    def associate_image(
        self,
        caller_id: UUID | str,
        business_id: UUID | str,
        image: UploadedImage,
    ) -> BusinessRecord:
        """Store an uploaded image and append its path to the business."""
        _, business = self.attach_image(caller_id, business_id, image)
        return business

    def attach_image(
        self,
        caller_id: UUID | str,
        business_id: UUID | str,
        image: UploadedImage,
    ) -> tuple[str, BusinessRecord]:
        """
        Store an uploaded image and append its path to the business.

        Steps run strictly in this order:
        1. Check MIME type and size
        2. Load the business and check ownership
        3. Write the blob under a fresh path
        4. Append the path to the business images
        5. On append failure, delete the blob and report the failure

        Returns:
            Tuple of (stored image path, updated business record)

        Raises:
            InvalidFileTypeError: MIME type not allowed
            FileTooLargeError: More than the configured maximum bytes
            BusinessNotFoundError: Business doesn't exist
            ForbiddenError: Caller doesn't own the business
            StorageWriteError: Blob write failed (business unchanged)
            RecordUpdateError: Append failed; carries cleanup outcome
        """
        business_id_str = normalize_uuid(business_id)

        self._check_image(image)
        business = self._load_owned(caller_id, business_id_str, action="upload images to")

        path = self.build_image_path(business.owner_id, business_id_str, image.extension)

        try:
            self._blobs.put(path, image.content, image.content_type or "application/octet-stream")
        except BlobStoreError as e:
            logger.error(f"Image upload failed for business {business_id_str}: {e}")
            raise StorageWriteError() from e

        try:
            row = self._records.append_to_array_field(business_id_str, IMAGES_FIELD, path)
        except RecordStoreError as e:
            logger.error(f"Failed to attach image to business {business_id_str}: {e}")
            cleanup_succeeded = self._discard_blob(path)
            raise RecordUpdateError(business_id_str, cleanup_succeeded) from e

        updated = BusinessRecord.from_row(row)
        logger.info(
            f"Attached image to business {business_id_str} "
            f"({updated.image_count} images)"
        )
        return path, updated

    def upload_image(
        self,
        caller_id: UUID | str,
        image: UploadedImage,
        business_id: UUID | str | None = None,
    ) -> tuple[str, BusinessRecord | None]:
        """
        Store an image for the caller, optionally attaching it to a business.

        With `business_id` this is exactly `attach_image`. Without it the
        image is only stored, under the caller's own folder, and no
        record is touched.

        Returns:
            Tuple of (stored image path, updated business or None)

        Raises:
            InvalidFileTypeError: MIME type not allowed
            FileTooLargeError: More than the configured maximum bytes
            StorageWriteError: Blob write failed
            (plus the errors of `attach_image` when `business_id` is given)
        """
        if business_id is not None:
            return self.attach_image(caller_id, business_id, image)

        self._check_image(image)
        path = self.build_unassigned_path(caller_id, image.extension)

        try:
            self._blobs.put(path, image.content, image.content_type or "application/octet-stream")
        except BlobStoreError as e:
            logger.error(f"Image upload failed for user {caller_id}: {e}")
            raise StorageWriteError() from e

        logger.info(f"Stored unassigned image for user {caller_id} ({image.size} bytes)")
        return path, None

    def build_image_path(self, owner_id: UUID | str, business_id: UUID | str, extension: str) -> str:
        """
        Generate a new, never reused image path.

        Format: <bucket>/<owner_id>/<business_id>/<utc timestamp>-<uuid>.<ext>
        """
        return (
            f"{self._bucket}/{normalize_uuid(owner_id)}/{normalize_uuid(business_id)}/"
            f"{_unique_file_name(extension)}"
        )

    def build_unassigned_path(self, owner_id: UUID | str, extension: str) -> str:
        """
        Generate a new path for an image not attached to any business.

        Format: <bucket>/<owner_id>/<utc timestamp>-<uuid>.<ext>
        """
        return f"{self._bucket}/{normalize_uuid(owner_id)}/{_unique_file_name(extension)}"

    # -------------------------------------------------------------------------
    # Remove
    # -------------------------------------------------------------------------

    def remove_image(
        self,
        caller_id: UUID | str,
        business_id: UUID | str,
        path: str,
    ) -> BusinessRecord:
        """
        Remove every occurrence of `path` from the business images.

        Removing a path that isn't there returns the business unchanged.
        The blob itself is left in storage.

        Raises:
            BusinessNotFoundError: Business doesn't exist
            ForbiddenError: Caller doesn't own the business
            ImageRemovalError: The record store rejected the write
        """
        business_id_str = normalize_uuid(business_id)
        business = self._load_owned(caller_id, business_id_str, action="remove images from")

        if path not in business.images:
            logger.debug(f"Image not on business {business_id_str}, nothing to remove")
            return business

        try:
            row = self._records.remove_from_array_field(business_id_str, IMAGES_FIELD, path)
        except RecordNotFoundError as e:
            # Deleted between the ownership check and the write
            raise BusinessNotFoundError(business_id_str) from e
        except RecordStoreError as e:
            logger.error(f"Failed to remove image from business {business_id_str}: {e}")
            raise ImageRemovalError(business_id_str) from e

        updated = BusinessRecord.from_row(row)
        logger.info(
            f"Removed image from business {business_id_str} "
            f"({updated.image_count} images left)"
        )
        return updated

    # -------------------------------------------------------------------------
    # Validation Report
    # -------------------------------------------------------------------------

    def is_valid_path(self, path: str | None) -> bool:
        """A path is valid when it is non-empty and inside the image bucket."""
        return bool(path) and self.namespace_marker in path

    def validate_images(self, business_id: UUID | str) -> ImageValidationReport:
        """
        Report which stored image paths belong to the image bucket.

        Public URLs are only computed for valid paths. Never mutates.

        Raises:
            BusinessNotFoundError: Business doesn't exist
        """
        business_id_str = normalize_uuid(business_id)
        business = self._load(business_id_str)

        checks = []
        for path in business.images:
            is_valid = self.is_valid_path(path)
            checks.append(ImageCheck(
                path=path,
                is_valid=is_valid,
                public_url=self._blobs.get_public_url(path) if is_valid else None,
            ))

        valid_count = sum(1 for check in checks if check.is_valid)
        logger.info(
            f"Image validation for business {business_id_str}: "
            f"{valid_count}/{len(checks)} valid"
        )

        return ImageValidationReport(
            business_id=business.id,
            business_name=business.name,
            total=len(checks),
            valid_count=valid_count,
            images=checks,
        )

    def public_url(self, path: str) -> str:
        """Public URL of a stored image."""
        return self._blobs.get_public_url(path)

    def try_public_url(self, path: str) -> str | None:
        """
        Public URL of a stored image, or None if it can't be built.

        Used after a write has already succeeded, where a URL failure
        must not turn the response into an error.
        """
        try:
            return self._blobs.get_public_url(path)
        except BlobStoreError as e:
            logger.warning(f"Stored image has no public URL yet: {e}")
            return None

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_image(self, image: UploadedImage) -> None:
        content_type = (image.content_type or "").lower()
        if content_type not in self._allowed_types:
            raise InvalidFileTypeError(image.content_type, self._allowed_types)

        if image.size > self._max_bytes:
            raise FileTooLargeError(image.size, self._max_bytes)

    def _load(self, business_id: str) -> BusinessRecord:
        row = self._records.get_by_id(business_id)
        if row is None:
            raise BusinessNotFoundError(business_id)
        return BusinessRecord.from_row(row)

    def _load_owned(self, caller_id: UUID | str, business_id: str, action: str) -> BusinessRecord:
        business = self._load(business_id)
        if not same_id(business.owner_id, caller_id):
            logger.warning(f"User {caller_id} tried to {action} business {business_id} they don't own")
            raise ForbiddenError(business_id, action=action)
        return business

    def _discard_blob(self, path: str) -> bool:
        """Best-effort delete of an orphaned blob. Never raises."""
        try:
            self._blobs.delete(path)
        except BlobStoreError as e:
            logger.error(f"Failed to clean up uploaded image after record error: {e}")
            return False
        logger.info("Cleaned up uploaded image after record error")
        return True
