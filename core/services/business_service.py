# =============================================================================
# core/services/business_service.py - Business Business Logic
# =============================================================================
# Handles business CRUD operations and ownership checks.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from uuid import UUID

from app.exceptions import BusinessNotFoundError, ForbiddenError
from core.models.business import BusinessCreate, BusinessRecord, BusinessUpdate
from core.stores.base import RecordNotFoundError, RecordStore
from lib.utils import normalize_uuid, same_id

logger = logging.getLogger(__name__)


class BusinessService:
    """
    Service for business record management.

    Provides a clean interface between API routes and the record store.
    Deleting a business leaves its images in storage.
    """

    def __init__(self, records: RecordStore):
        self._records = records

    def create_business(self, owner_id: UUID | str, data: BusinessCreate) -> BusinessRecord:
        """
        Create a new business owned by `owner_id`.

        New businesses start with no images and a 0.0 rating.
        """
        row = self._records.insert(data.to_row(owner_id))
        business = BusinessRecord.from_row(row)
        logger.info(f"Created business: {business.id} for user: {owner_id}")
        return business

    def list_businesses(self) -> list[BusinessRecord]:
        """All businesses, newest first."""
        rows = self._records.list_all()
        logger.debug(f"Fetched {len(rows)} businesses")
        return [BusinessRecord.from_row(row) for row in rows]

    def get_business(self, business_id: UUID | str) -> BusinessRecord:
        """
        Get a business by ID.

        Raises:
            BusinessNotFoundError: If the business doesn't exist
        """
        business_id_str = normalize_uuid(business_id)
        row = self._records.get_by_id(business_id_str)
        if row is None:
            raise BusinessNotFoundError(business_id_str)
        return BusinessRecord.from_row(row)

    def get_owned_business(
        self,
        business_id: UUID | str,
        user_id: UUID | str,
        action: str = "modify",
    ) -> BusinessRecord:
        """
        Get a business and verify `user_id` owns it.

        Raises:
            BusinessNotFoundError: If the business doesn't exist
            ForbiddenError: If the user doesn't own it
        """
        business = self.get_business(business_id)
        if not same_id(business.owner_id, user_id):
            logger.warning(f"User {user_id} tried to {action} business {business.id} they don't own")
            raise ForbiddenError(str(business.id), action=action)
        return business

    def update_business(
        self,
        user_id: UUID | str,
        business_id: UUID | str,
        data: BusinessUpdate,
    ) -> BusinessRecord:
        """
        Update the fields present in `data`.

        Raises:
            BusinessNotFoundError: If the business doesn't exist
            ForbiddenError: If the user doesn't own it
        """
        business = self.get_owned_business(business_id, user_id, action="update")

        fields = data.to_fields()
        if not fields:
            return business  # Nothing to update

        try:
            row = self._records.update(str(business.id), fields)
        except RecordNotFoundError:
            # Deleted between the ownership check and the write
            raise BusinessNotFoundError(str(business.id))

        logger.info(f"Updated business: {business.id} ({', '.join(sorted(fields))})")
        return BusinessRecord.from_row(row)

    def delete_business(self, user_id: UUID | str, business_id: UUID | str) -> BusinessRecord:
        """
        Delete a business. Its images stay in storage.

        Returns:
            The business as it was before deletion

        Raises:
            BusinessNotFoundError: If the business doesn't exist
            ForbiddenError: If the user doesn't own it
        """
        business = self.get_owned_business(business_id, user_id, action="delete")
        self._records.delete(str(business.id))
        logger.info(f"Deleted business: {business.id} ({business.image_count} images left in storage)")
        return business
