# =============================================================================
# app/routers/images.py - Business Image Endpoints
# =============================================================================
# Upload an image to a business, remove it again, and report on the
# stored image paths.
#
#   POST   /upload-image                           (multipart "image", optional "business_id")
#   POST   /upload-image/business/{business_id}   (multipart field "image")
#   DELETE /upload-image/business/{business_id}?path=...
#   GET    /business/validate-images/{business_id}
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile

from app.auth import AuthUser, get_current_user
from app.dependencies import ImageServiceDep
from core.models.image import ImageUploadResponse, ImageValidationReport, UploadedImage

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_upload(image: UploadFile) -> UploadedImage:
    return UploadedImage(
        content=await image.read(),
        content_type=image.content_type,
        filename=image.filename,
    )


@router.post("/upload-image", response_model=ImageUploadResponse)
async def upload_image(
    image: Annotated[UploadFile, File(description="JPEG, PNG, GIF or WebP image (max 5MB)")],
    service: ImageServiceDep,
    business_id: Annotated[UUID | None, Form(description="Business to attach the image to")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload an image, optionally attaching it to a business.

    Without `business_id` the image is stored under the user's folder and
    no business changes. With it, this behaves like
    `POST /upload-image/business/{business_id}`.
    """
    uploaded = await _read_upload(image)
    logger.info(f"Processing image upload for user {user.id} ({uploaded.size} bytes)")

    path, business = service.upload_image(user.id, uploaded, business_id=business_id)

    return ImageUploadResponse(
        message=(
            "Image uploaded and associated with business successfully"
            if business is not None else "Image uploaded successfully"
        ),
        image_path=path,
        public_url=service.try_public_url(path),
        business=business,
    )


@router.post("/upload-image/business/{business_id}", response_model=ImageUploadResponse)
async def upload_business_image(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    image: Annotated[UploadFile, File(description="JPEG, PNG, GIF or WebP image (max 5MB)")],
    service: ImageServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload an image and append it to a business.

    This endpoint:
    1. Validates the file (type, size)
    2. Verifies the business exists and the user owns it
    3. Uploads the image to storage
    4. Appends the storage path to the business images
    5. Deletes the uploaded file again if step 4 fails

    Returns the stored path, its public URL and the updated business.
    """
    uploaded = await _read_upload(image)

    logger.info(f"Processing image upload for business {business_id} ({uploaded.size} bytes)")

    path, business = service.attach_image(user.id, business_id, uploaded)

    return ImageUploadResponse(
        image_path=path,
        public_url=service.try_public_url(path),
        business=business,
    )


@router.delete("/upload-image/business/{business_id}")
async def remove_business_image(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    path: Annotated[str, Query(min_length=1, description="Stored image path to remove")],
    service: ImageServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Remove an image path from a business.

    Removing a path the business doesn't have is a no-op.
    The file stays in storage. User must own the business.
    """
    business = service.remove_image(user.id, business_id, path)
    return {
        "message": "Image removed from business",
        "business": business,
    }


@router.get("/business/validate-images/{business_id}", response_model=ImageValidationReport)
async def validate_business_images(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    service: ImageServiceDep,
):
    """
    Check the stored image paths of a business.

    A path is valid when it points into the business image bucket;
    valid paths include their public URL.
    """
    return service.validate_images(business_id)
