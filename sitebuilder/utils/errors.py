"""
Standardized error response utilities for the site builder API.

Provides consistent error response format across all endpoints:
{
    "error": {
        "message": "User-friendly error message",
        "code": "ERROR_CODE",
        "kind": "PositionNotAllowed"
    }
}

Usage:
    from sitebuilder.utils.errors import error_response, ErrorCode

    return error_response("Site not found", ErrorCode.NOT_FOUND, 404)
"""
import logging
from enum import Enum
from flask import jsonify
from typing import Optional

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Validation Errors (400)
    INVALID_REQUEST = "INVALID_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Not Found (404)
    NOT_FOUND = "NOT_FOUND"
    SITE_NOT_FOUND = "SITE_NOT_FOUND"
    INSTANCE_NOT_FOUND = "INSTANCE_NOT_FOUND"

    # Placement rules (409, 422)
    UNKNOWN_WIDGET = "UNKNOWN_WIDGET"
    UNKNOWN_POSITION = "UNKNOWN_POSITION"
    POSITION_NOT_ALLOWED = "POSITION_NOT_ALLOWED"
    WIDGET_NOT_ALLOWED = "WIDGET_NOT_ALLOWED"
    DUPLICATE_POSITION = "DUPLICATE_POSITION"
    INVALID_CONFIG = "INVALID_CONFIG"
    WIDGET_IN_USE = "WIDGET_IN_USE"

    # Server Errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


def error_response(
    message: str,
    code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    status_code: int = 500,
    log_error: bool = True,
    details: Optional[dict] = None,
    kind: Optional[str] = None
) -> tuple:
    """
    Create a standardized error response.

    Args:
        message: User-friendly error message
        code: Error code from ErrorCode enum (or a plain string code)
        status_code: HTTP status code
        log_error: Whether to log the error
        details: Optional additional details (only logged, not returned to user)
        kind: Machine-readable error kind, defaults to the code

    Returns:
        Tuple of (response, status_code) for Flask
    """
    code_value = code.value if isinstance(code, ErrorCode) else code

    if log_error and status_code >= 500:
        logger.error(f"API Error [{code_value}]: {message}", extra={"details": details})
    elif log_error and status_code >= 400:
        logger.warning(f"API Error [{code_value}]: {message}", extra={"details": details})

    response = {
        "error": {
            "message": message,
            "code": code_value,
            "kind": kind or code_value,
        }
    }

    return jsonify(response), status_code


def exception_response(error) -> tuple:
    """Turn a SiteBuilderError into the standard envelope."""
    return error_response(
        error.message,
        error.code,
        error.status_code,
        kind=error.kind,
    )
