# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - business.py: Business record, create and update schemas
# - image.py: Uploaded image and image validation report schemas
# - account.py: Signup/login and profile schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Business Models
# -----------------------------------------------------------------------------
from .business import (
    MAX_RATING,
    MIN_RATING,
    BusinessCreate,
    BusinessRecord,
    BusinessUpdate,
)

# -----------------------------------------------------------------------------
# Image Models
# -----------------------------------------------------------------------------
from .image import (
    IMAGE_EXTENSIONS,
    ImageCheck,
    ImageUploadResponse,
    ImageValidationReport,
    UploadedImage,
)

# -----------------------------------------------------------------------------
# Account Models
# -----------------------------------------------------------------------------
from .account import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    UserProfile,
)

__all__ = [
    # Business
    "MAX_RATING",
    "MIN_RATING",
    "BusinessCreate",
    "BusinessRecord",
    "BusinessUpdate",
    # Image
    "IMAGE_EXTENSIONS",
    "ImageCheck",
    "ImageUploadResponse",
    "ImageValidationReport",
    "UploadedImage",
    # Account
    "LoginRequest",
    "LoginResponse",
    "SignupRequest",
    "UserProfile",
]
