# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error tells the caller HOW to fix it, not just WHAT failed.
# Messages never include storage paths or credentials.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class BusinessApiException(Exception):
    """
    Base exception for the Business API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "BUSINESS_API_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Business Exceptions
# =============================================================================

class BusinessNotFoundError(BusinessApiException):
    """Raised when a business ID doesn't exist."""

    def __init__(self, business_id: str):
        super().__init__(
            message=f"Business not found: {business_id}",
            code="BUSINESS_NOT_FOUND",
            status_code=404,
            suggestion="Check that the business_id is correct and the business hasn't been deleted",
            details={"business_id": business_id}
        )


class ForbiddenError(BusinessApiException):
    """Raised when the caller does not own the business they are modifying."""

    def __init__(self, business_id: str, action: str = "modify"):
        super().__init__(
            message=f"Permission denied: you can only {action} your own businesses",
            code="FORBIDDEN",
            status_code=403,
            suggestion="Sign in as the owner of this business",
            details={"business_id": business_id}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(BusinessApiException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, content_type: str | None, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {content_type or 'unknown'}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"content_type": content_type, "allowed_types": allowed}
        )


class FileTooLargeError(BusinessApiException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_bytes: int, max_bytes: int):
        size_mb = size_bytes / (1024 * 1024)
        max_mb = max_bytes / (1024 * 1024)
        super().__init__(
            message=f"File too large: {size_mb:.2f}MB (max: {max_mb:g}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload an image no larger than {max_mb:g}MB",
            details={"size_bytes": size_bytes, "max_bytes": max_bytes}
        )


class StorageWriteError(BusinessApiException):
    """Raised when writing image bytes to storage fails."""

    def __init__(self):
        super().__init__(
            message="Failed to upload image to storage",
            code="STORAGE_WRITE_FAILED",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
        )


class RecordUpdateError(BusinessApiException):
    """
    Raised when the uploaded image could not be attached to the business.

    `cleanup_succeeded` reports whether the uploaded file was removed again.
    """

    def __init__(self, business_id: str, cleanup_succeeded: bool):
        super().__init__(
            message="Image uploaded but failed to associate with business",
            code="RECORD_UPDATE_FAILED",
            status_code=500,
            suggestion="Retry the upload; the business was not changed",
            details={"business_id": business_id, "cleanup_succeeded": cleanup_succeeded}
        )
        self.cleanup_succeeded = cleanup_succeeded


class ImageRemovalError(BusinessApiException):
    """Raised when an image path could not be removed from a business."""

    def __init__(self, business_id: str):
        super().__init__(
            message="Failed to remove image from business",
            code="IMAGE_REMOVAL_FAILED",
            status_code=500,
            suggestion="Retry the request; the business was not changed",
            details={"business_id": business_id}
        )


# =============================================================================
# Account Exceptions
# =============================================================================

class UserNotFoundError(BusinessApiException):
    """Raised when a user profile doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            status_code=404,
            suggestion="Check that the user_id is correct",
            details={"user_id": user_id}
        )


class AccountExistsError(BusinessApiException):
    """Raised when signing up with an email that is already registered."""

    def __init__(self, email: str):
        super().__init__(
            message="User with this email already exists",
            code="ACCOUNT_EXISTS",
            status_code=409,
            suggestion="Log in instead, or sign up with a different email",
            details={"email": email}
        )


class InvalidCredentialsError(BusinessApiException):
    """Raised when login fails."""

    def __init__(self):
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
            suggestion="Check your email and password and try again",
        )


class AccountError(BusinessApiException):
    """Raised when the auth provider rejects an account operation."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="ACCOUNT_ERROR",
            status_code=400,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def business_api_exception_handler(
    request: Request,
    exc: BusinessApiException
) -> JSONResponse:
    """
    Convert BusinessApiException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Missing upload fields, malformed UUIDs and out-of-range values
    (e.g. rating above 5) are all client errors.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        }
    )
