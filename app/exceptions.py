# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error body carries a human-readable `detail`, a machine-readable
# `code`, and where possible a suggestion on how to fix the request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class CMSException(Exception):
    """
    Base exception for the CMS API.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "CMS_ERROR",
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
            "success": False,
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Resource Exceptions
# =============================================================================

class ResourceNotFoundError(CMSException):
    """Raised when a document doesn't exist."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {resource.lower()} id is correct",
            details={"id": identifier},
        )


class InvalidObjectIdError(CMSException):
    """Raised when a path parameter isn't a valid MongoDB ObjectId."""

    def __init__(self, value: str):
        super().__init__(
            message=f"Invalid id: {value}",
            code="INVALID_ID",
            status_code=400,
            suggestion="Ids are 24-character hexadecimal strings",
            details={"id": value},
        )


class DuplicateResourceError(CMSException):
    """Raised when a unique key (slug, email) is already taken."""

    def __init__(self, resource: str, field: str, value: str):
        super().__init__(
            message=f"{resource} with {field} '{value}' already exists",
            code="DUPLICATE_RESOURCE",
            status_code=409,
            suggestion=f"Choose a different {field}",
            details={"field": field, "value": value},
        )


class RequestValidationFailed(CMSException):
    """Raised when a request passes schema parsing but breaks a business rule."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_FAILED",
            status_code=400,
            details=details,
        )


class FormValidationError(CMSException):
    """Raised when a dynamic form submission fails field validation."""

    def __init__(self, errors: dict[str, str]):
        super().__init__(
            message="Form submission is invalid",
            code="FORM_VALIDATION_FAILED",
            status_code=400,
            suggestion="Fix the fields listed in details.errors and resubmit",
            details={"errors": errors},
        )
        self.errors = errors


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(CMSException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: str):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only {allowed} files are allowed",
            details={"filename": filename, "allowed": allowed},
        )


class FileTooLargeError(CMSException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb},
        )


class MissingFileError(CMSException):
    """Raised when a multipart request lacks its required file."""

    def __init__(self, field: str, label: str):
        super().__init__(
            message=f"{label} is required",
            code="FILE_REQUIRED",
            status_code=400,
            details={"field": field},
        )


# =============================================================================
# Payment Exceptions
# =============================================================================

class PaymentGatewayNotConfiguredError(CMSException):
    """Raised when Razorpay credentials are missing."""

    def __init__(self):
        super().__init__(
            message="Payment gateway not configured. Please contact administrator.",
            code="PAYMENT_GATEWAY_NOT_CONFIGURED",
            status_code=503,
            suggestion="Set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET",
        )


class PaymentGatewayError(CMSException):
    """Raised when the payment gateway rejects or fails a call."""

    def __init__(self, error: str):
        super().__init__(
            message="Payment gateway error. Please try again later.",
            code="PAYMENT_GATEWAY_ERROR",
            status_code=502,
            details={"error": error},
        )


class PaymentSignatureError(CMSException):
    """Raised when a payment signature doesn't match."""

    def __init__(self, order_id: str):
        super().__init__(
            message="Invalid payment signature",
            code="INVALID_PAYMENT_SIGNATURE",
            status_code=400,
            details={"order_id": order_id},
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationError(CMSException):
    """Raised on bad credentials."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(
            message=message,
            code="AUTHENTICATION_FAILED",
            status_code=401,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def cms_exception_handler(
    request: Request,
    exc: CMSException
) -> JSONResponse:
    """
    Convert CMSException to JSON response.

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
    exc: Exception
) -> JSONResponse:
    """
    Handle request validation errors raised by FastAPI/pydantic.

    Reported as 400 like every other validation failure.
    """
    errors = exc.errors() if hasattr(exc, "errors") else str(exc)
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": _jsonable_errors(errors),
        }
    )


def _jsonable_errors(errors: Any) -> Any:
    """Pydantic error dicts can embed exception objects under `ctx`."""
    if not isinstance(errors, list):
        return errors
    cleaned = []
    for err in errors:
        item = {k: v for k, v in err.items() if k not in ("ctx", "input", "url")}
        if "loc" in item:
            item["loc"] = [str(part) for part in item["loc"]]
        cleaned.append(item)
    return cleaned
