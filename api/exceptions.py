"""
API Exceptions - Custom Exception Classes for the Recruiter API

This module provides the exception taxonomy shared by every app:
- Tenant resolution exceptions
- Authentication and identity exceptions
- Application lifecycle exceptions
- Input and storage exceptions
- The global DRF exception handler producing the response envelope

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
from typing import Dict

from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTIONS
# =============================================================================

class RecruiterAPIException(APIException):
    """
    Base exception for all recruiter API errors.

    Attributes:
        status_code: HTTP status code
        default_detail: Default error message
        default_code: Machine-readable error code
        error_code: Specific error code for this instance
        extra_data: Additional data to include in the response meta
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

    def get_full_details(self) -> Dict:
        """Get full error details for response."""
        return {
            'message': str(self.detail),
            'error_code': self.error_code,
            'extra_data': self.extra_data,
        }


# =============================================================================
# TENANT EXCEPTIONS
# =============================================================================

class MissingTenantError(RecruiterAPIException):
    """Raised when a tenant-scoped identity or route carries no tenant key."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Tenant is required for this user type")
    default_code = "MISSING_TENANT"


class UnknownTenantError(RecruiterAPIException):
    """Raised when a tenant key does not match an active tenant."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _("Tenant not found")
    default_code = "UNKNOWN_TENANT"

    def __init__(self, tenant_key: str = None, **kwargs):
        self.tenant_key = tenant_key
        super().__init__(**kwargs)


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthenticationFailedError(RecruiterAPIException):
    """Generic authentication failure."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = _("Authentication failed")
    default_code = "AUTHENTICATION_FAILED"


class TokenMissingError(AuthenticationFailedError):
    default_detail = _("Token missing")
    default_code = "TOKEN_MISSING"


class InvalidTokenError(AuthenticationFailedError):
    default_detail = _("Invalid token")
    default_code = "INVALID_TOKEN"


class IdentityNotFoundError(AuthenticationFailedError):
    default_detail = _("User not found")
    default_code = "IDENTITY_NOT_FOUND"


class AccountInactiveError(AuthenticationFailedError):
    default_detail = _("Account is inactive")
    default_code = "ACCOUNT_INACTIVE"


class InvalidCredentialsError(AuthenticationFailedError):
    default_detail = _("Invalid credentials")
    default_code = "INVALID_CREDENTIALS"


class AccountLockedError(RecruiterAPIException):
    """Raised on login while the account lock is still in force."""

    status_code = status.HTTP_423_LOCKED
    default_detail = _("Account is temporarily locked due to too many failed login attempts")
    default_code = "ACCOUNT_LOCKED"

    def __init__(self, lock_until=None, **kwargs):
        extra_data = kwargs.pop('extra_data', None) or {}
        if lock_until is not None:
            extra_data['lock_until'] = lock_until.isoformat()
        super().__init__(extra_data=extra_data, **kwargs)


# =============================================================================
# PERMISSION EXCEPTIONS
# =============================================================================

class IdentityTypeForbiddenError(RecruiterAPIException):
    """Raised when the identity type may not use the route."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("You are not allowed to access this route")
    default_code = "FORBIDDEN_IDENTITY_TYPE"

    def __init__(self, user_type: str = None, **kwargs):
        if user_type and 'detail' not in kwargs:
            kwargs['detail'] = f"{user_type} is not allowed to access this route"
        super().__init__(**kwargs)


class SuperAdminOnlyError(RecruiterAPIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("Super admin access only")
    default_code = "SUPER_ADMIN_ONLY"


# =============================================================================
# RESOURCE EXCEPTIONS
# =============================================================================

class ResourceNotFoundError(RecruiterAPIException):
    """Raised when requested resource doesn't exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _("The requested resource was not found.")
    default_code = "NOT_FOUND"

    def __init__(self, resource_type: str = None, resource_id=None, **kwargs):
        if resource_type and 'detail' not in kwargs:
            kwargs['detail'] = f"{resource_type} not found"
        extra_data = kwargs.pop('extra_data', None) or {}
        if resource_id is not None:
            extra_data['resource_id'] = str(resource_id)
        super().__init__(extra_data=extra_data, **kwargs)


class DuplicateApplicationError(RecruiterAPIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("You have already applied for this position")
    default_code = "DUPLICATE_APPLICATION"


class DuplicateCandidateError(RecruiterAPIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Candidate with this email already exists")
    default_code = "DUPLICATE_CANDIDATE"


class DeadlinePassedError(RecruiterAPIException):
    status_code = status.HTTP_410_GONE
    default_detail = _("Application deadline has passed")
    default_code = "DEADLINE_PASSED"


class InvalidStatusTransitionError(RecruiterAPIException):
    """Raised when a status move is refused by the transition table."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = _("This status change is not allowed.")
    default_code = "INVALID_STATUS_TRANSITION"

    def __init__(self, current_status: str = None, target_status: str = None, **kwargs):
        if current_status and target_status and 'detail' not in kwargs:
            kwargs['detail'] = f"Cannot move application from '{current_status}' to '{target_status}'"
        extra_data = kwargs.pop('extra_data', None) or {}
        if current_status:
            extra_data['current_status'] = current_status
        if target_status:
            extra_data['target_status'] = target_status
        super().__init__(extra_data=extra_data, **kwargs)


# =============================================================================
# VALIDATION EXCEPTIONS
# =============================================================================

class InvalidInputError(RecruiterAPIException):
    """Raised when input data is invalid."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Invalid input provided.")
    default_code = "INVALID_INPUT"


# =============================================================================
# EXTERNAL SERVICE EXCEPTIONS
# =============================================================================

class StorageError(RecruiterAPIException):
    """Raised when the document store fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = _("File storage operation failed.")
    default_code = "STORAGE_ERROR"


# =============================================================================
# EXCEPTION HANDLER
# =============================================================================

def recruiter_exception_handler(exc, context):
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
            "timestamp": "ISO8601",
            "tenant": "tenant_key"
        }
    }
    """
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            exc = ValidationError(detail=exc.message_dict)
        else:
            exc = ValidationError(detail=exc.messages)

    # rest_framework.views loads DEFAULT_AUTHENTICATION_CLASSES, which import this module.
    from rest_framework.views import exception_handler

    response = exception_handler(exc, context)

    if response is None:
        logger.exception(f"Unhandled exception: {exc}")
        return Response(
            {
                "success": False,
                "data": None,
                "message": "An unexpected error occurred.",
                "error": str(exc),
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

    if isinstance(exc, RecruiterAPIException):
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
        error_data["error_code"] = str(getattr(exc, 'default_code', 'ERROR')).upper()

    request = context.get('request')
    tenant_key = getattr(request, 'tenant_id', None) if request is not None else None
    if tenant_key:
        error_data["meta"]["tenant"] = tenant_key

    response.data = error_data
    return response
