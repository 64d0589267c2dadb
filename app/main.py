# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Business Listings API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth import routes as auth_routes
from app.config import settings
from app.dependencies import get_supabase_client
from app.exceptions import (
    BusinessApiException,
    business_api_exception_handler,
    validation_exception_handler,
)
from app.routers import businesses, health, images, users
from core.stores.base import StoreError
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = health.API_VERSION


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: Build the shared Supabase client once
    - Shutdown: Log
    """
    logger.info(f"Starting Business Listings API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    get_supabase_client()

    yield

    logger.info("Shutting down Business Listings API")


# Create FastAPI application
app = FastAPI(
    title="Business Listings API",
    description="""
## Business listings with image uploads

Manage business records, user accounts and the images attached to each business.

### Image Uploads

1. **Create a business** - `POST /api/v1/business`
2. **Upload images** - `POST /api/v1/upload-image/business/{id}` (multipart field `image`)
3. **Check images** - `GET /api/v1/business/validate-images/{id}`
4. **Remove an image** - `DELETE /api/v1/upload-image/business/{id}?path=...`

Images are JPEG, PNG, GIF or WebP, at most 5MB. If an image can't be
attached to the business after it was stored, the stored file is deleted again.

### Quick Start

```bash
# 1. Log in
curl -X POST http://localhost:8000/api/v1/auth/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "owner@example.com", "password": "secret1"}'

# 2. Create a business
curl -X POST http://localhost:8000/api/v1/business \\
  -H "Authorization: Bearer $TOKEN" \\
  -H "Content-Type: application/json" \\
  -d '{"name": "Blue Door Cafe", "category": "cafe"}'

# 3. Upload an image
curl -X POST http://localhost:8000/api/v1/upload-image/business/{id} \\
  -H "Authorization: Bearer $TOKEN" \\
  -F "image=@storefront.jpg"
```
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Signup, login and token verification",
        },
        {
            "name": "Users",
            "description": "User profile lookup",
        },
        {
            "name": "Business",
            "description": "Create and manage business records",
        },
        {
            "name": "Images",
            "description": "Upload, remove and validate business images",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(BusinessApiException)
async def handle_business_api_exception(request: Request, exc: BusinessApiException):
    """Handle custom Business API exceptions."""
    return await business_api_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle invalid request bodies, paths and queries."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(StoreError)
async def handle_store_error(request: Request, exc: StoreError):
    """Handle store failures that no service translated."""
    logger.error(f"Store error on {request.method} {request.url.path}: {exc} {exc.details}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "A storage backend request failed",
            "code": "STORE_ERROR",
            "suggestion": "Try again later or contact support if the issue persists",
        }
    )


@app.exception_handler(SupabaseClientError)
async def handle_client_error(request: Request, exc: SupabaseClientError):
    """Handle a misconfigured Supabase client."""
    logger.error(f"Supabase client error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Backend service is not configured correctly",
            "code": exc.code,
        }
    )


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# User lookup endpoints
app.include_router(
    users.router,
    prefix="/api/v1/users",
    tags=["Users"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Business image endpoints (registered before the CRUD routes)
app.include_router(
    images.router,
    prefix="/api/v1",
    tags=["Images"]
)

# Business CRUD endpoints
app.include_router(
    businesses.router,
    prefix="/api/v1/business",
    tags=["Business"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Business Listings API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
        "endpoints": {
            "users": "/api/v1/users",
            "business": "/api/v1/business",
            "upload": "/api/v1/upload-image",
        },
    }
