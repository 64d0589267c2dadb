# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .account_service import AccountService
from .business_service import BusinessService
from .image_service import ImageService

__all__ = [
    "AccountService",
    "BusinessService",
    "ImageService",
]
