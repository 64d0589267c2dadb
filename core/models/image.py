# =============================================================================
# core/models/image.py - Image Upload and Validation Schemas
# =============================================================================
# - UploadedImage: An image received in a request, before it is stored
# - ImageCheck / ImageValidationReport: Output of the image validation report
# - ImageUploadResponse: Output of the upload endpoint
# =============================================================================

from dataclasses import dataclass
from uuid import UUID

from pydantic import BaseModel, Field

from .business import BusinessRecord

# File extension used for each accepted MIME type
IMAGE_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


@dataclass(frozen=True)
class UploadedImage:
    """
    An uploaded image held in memory for one request.

    Never persisted outside the blob store.
    """
    content: bytes
    content_type: str | None
    filename: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """File extension derived from the MIME type (not the client filename)."""
        return IMAGE_EXTENSIONS.get((self.content_type or "").lower(), "bin")


class ImageCheck(BaseModel):
    """Validation result for one stored image path."""
    path: str | None = Field(..., description="Stored image path (null entries are reported as invalid)")
    is_valid: bool = Field(..., description="Path is non-empty and inside the image bucket")
    public_url: str | None = Field(
        default=None,
        description="Public URL (only for valid paths)"
    )


class ImageValidationReport(BaseModel):
    """
    Read-only report over a business's image list.

    Example:
        {
            "business_id": "550e8400-...",
            "business_name": "Blue Door Cafe",
            "total": 2,
            "valid_count": 1,
            "images": [
                {"path": "business-images/...", "is_valid": true, "public_url": "https://..."},
                {"path": "https://elsewhere/x.png", "is_valid": false, "public_url": null}
            ]
        }
    """
    business_id: UUID
    business_name: str
    total: int = Field(..., ge=0)
    valid_count: int = Field(..., ge=0)
    images: list[ImageCheck] = Field(default_factory=list)


class ImageUploadResponse(BaseModel):
    """
    Response after an image was stored.

    `business` is the updated business when the image was attached to one.
    `public_url` is null if the URL couldn't be built after the image was saved.
    """
    message: str = "Image uploaded and associated with business successfully"
    image_path: str = Field(..., description="Stored path, as saved on the business")
    public_url: str | None = Field(default=None, description="Public URL for display")
    business: BusinessRecord | None = None
