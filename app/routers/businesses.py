# =============================================================================
# app/routers/businesses.py - Business CRUD Endpoints
# =============================================================================
# Listing and reading businesses is public.
# Creating requires authentication; updating and deleting require ownership.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status

from app.auth import AuthUser, get_current_user
from app.dependencies import BusinessServiceDep
from core.models.business import BusinessCreate, BusinessRecord, BusinessUpdate

router = APIRouter()


def _with_image_count(business: BusinessRecord) -> dict:
    return {**business.model_dump(mode="json"), "image_count": business.image_count}


@router.get("")
async def list_businesses(service: BusinessServiceDep):
    """
    List all businesses, newest first.

    Each business includes an `image_count`.
    """
    businesses = service.list_businesses()
    return {
        "businesses": [_with_image_count(b) for b in businesses],
        "total": len(businesses),
    }


@router.get("/{business_id}")
async def get_business(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    service: BusinessServiceDep,
):
    """Get a single business with its image paths."""
    business = service.get_business(business_id)
    return {"business": _with_image_count(business)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_business(
    request: BusinessCreate,
    service: BusinessServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a new business owned by the authenticated user.

    Starts with no images and a 0.0 rating.
    """
    business = service.create_business(user.id, request)
    return {
        "message": "Business created successfully",
        "business": _with_image_count(business),
    }


@router.put("/{business_id}")
async def update_business(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    request: BusinessUpdate,
    service: BusinessServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Update business details.

    Only the fields sent are changed. Rating must be between 0 and 5.
    User must own the business.
    """
    business = service.update_business(user.id, business_id, request)
    return {
        "message": "Business updated successfully",
        "business": _with_image_count(business),
    }


@router.delete("/{business_id}")
async def delete_business(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    service: BusinessServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete a business.

    Images already uploaded stay in storage.
    User must own the business.
    """
    business = service.delete_business(user.id, business_id)
    return {
        "business_id": str(business.id),
        "message": "Business deleted successfully",
    }
