"""
API Exceptions - Error Taxonomy for the Careers Platform

This module provides the exception classes raised by the interview,
feedback, process and credential services, plus the DRF exception handler
that renders them:
- ResourceNotFoundError: referenced record does not exist (404)
- InvalidInputError: request failed a domain rule (400)
- PermissionDeniedError: actor may not perform the write (403)
- ConcurrentUpdateError: optimistic locking retries exhausted (409)

All errors follow a consistent format:
{
    "success": false,
    "data": null,
    "message": "Human-readable message",
    "error_code": "MACHINE_READABLE_CODE",
    "errors": [...],
    "meta": {...}
}
"""

import logging
from typing import Any, Dict

from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.db.exceptions import ConcurrentModificationError

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class CareersAPIException(APIException):
    """
    Base exception for all platform errors.

    Attributes:
        status_code: HTTP status code
        default_detail: Default error message
        default_code: Machine-readable error code
        error_code: Specific error code for this instance
        extra_data: Additional data to include in response
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = _("An unexpected error occurred.")
    default_code = "ERROR"

    def __init__(
        self,
        detail: str = None,
        code: str = None,
        extra_data: Dict = None,
    ):
        self.error_code = code or self.default_code
        self.extra_data = extra_data or {}

        if detail is None:
            detail = str(self.default_detail)

        super().__init__(detail=detail, code=code)

    @property
    def message(self) -> str:
        return str(self.detail)


# =============================================================================
# RESOURCE EXCEPTIONS
# =============================================================================

class ResourceNotFoundError(CareersAPIException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _("The requested resource was not found.")
    default_code = "NOT_FOUND"

    def __init__(self, resource_type: str = None, resource_id: Any = None, detail: str = None):
        extra_data = {}

        if resource_type:
            extra_data['resource_type'] = resource_type
        if resource_id:
            extra_data['resource_id'] = str(resource_id)

        if detail is None:
            if resource_id:
                detail = f"{resource_type or 'Resource'} with ID '{resource_id}' not found."
            elif resource_type:
                detail = f"{resource_type} not found."

        super().__init__(detail=detail, extra_data=extra_data)


class ConcurrentUpdateError(CareersAPIException):
    """Raised when a write keeps losing the optimistic-locking race."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = _("The record was modified by another request. Please retry.")
    default_code = "CONCURRENT_MODIFICATION"


# =============================================================================
# PERMISSION EXCEPTIONS
# =============================================================================

class PermissionDeniedError(CareersAPIException):
    """Raised when user doesn't have permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("You do not have permission to perform this action.")
    default_code = "PERMISSION_DENIED"


# =============================================================================
# VALIDATION EXCEPTIONS
# =============================================================================

class InvalidInputError(CareersAPIException):
    """Raised for input that breaks a domain rule."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Invalid input provided.")
    default_code = "INVALID_INPUT"

    def __init__(self, detail: str = None, field_name: str = None):
        extra_data = {'field': field_name} if field_name else None
        super().__init__(detail=detail, extra_data=extra_data)


# =============================================================================
# EXCEPTION HANDLER
# =============================================================================

def careers_exception_handler(exc, context):
    """
    Custom exception handler for standardized error responses.

    All errors are formatted as:
    {
        "success": false,
        "data": null,
        "message": "Error description",
        "error_code": "MACHINE_CODE",
        "errors": [...],
        "meta": {
            "timestamp": "ISO8601"
        }
    }
    """
    if isinstance(exc, ConcurrentModificationError):
        exc = ConcurrentUpdateError(extra_data={'object_id': str(exc.object_id)})

    response = exception_handler(exc, context)

    # Handle unhandled exceptions
    if response is None:
        logger.exception(f"Unhandled exception: {exc}")
        return Response(
            {
                "success": False,
                "data": None,
                "message": "An unexpected error occurred.",
                "error_code": "INTERNAL_ERROR",
                "errors": [],
                "meta": {
                    "timestamp": timezone.now().isoformat(),
                }
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    error_data = {
        "success": False,
        "data": None,
        "message": "",
        "error_code": "ERROR",
        "errors": [],
        "meta": {
            "timestamp": timezone.now().isoformat(),
        }
    }

    if isinstance(exc, CareersAPIException):
        error_data["message"] = str(exc.detail)
        error_data["error_code"] = exc.error_code
        if exc.extra_data:
            error_data["meta"].update(exc.extra_data)

    elif isinstance(exc, ValidationError):
        error_data["error_code"] = "VALIDATION_ERROR"
        if isinstance(exc.detail, dict):
            error_data["errors"] = [
                {"field": field, "messages": msgs if isinstance(msgs, list) else [str(msgs)]}
                for field, msgs in exc.detail.items()
            ]
            error_data["message"] = "Validation failed."
        elif isinstance(exc.detail, list):
            error_data["errors"] = [{"field": "non_field_errors", "messages": [str(e) for e in exc.detail]}]
            error_data["message"] = str(exc.detail[0]) if exc.detail else "Validation failed."
        else:
            error_data["message"] = str(exc.detail)

    else:
        error_data["message"] = str(exc.detail) if hasattr(exc, 'detail') else str(exc)
        error_data["error_code"] = getattr(exc, 'default_code', 'ERROR')

    response.data = error_data
    return response
