# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - businesses.py: Business CRUD endpoints
# - images.py: Business image upload, removal and validation endpoints
# - users.py: User profile lookup
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import businesses
from . import images
from . import users

__all__ = [
    "health",
    "businesses",
    "images",
    "users",
]
