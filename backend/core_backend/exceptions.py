"""
Service-layer exceptions for the delivery backend.

Services raise these; the REST layer renders them through
``service_exception_handler`` as ``{"error": ..., "code": ...}``.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(APIException):
    """Base exception for business-rule failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request could not be processed."
    default_code = "service_error"


class ValidationError(ServiceError):
    """Raised when request data breaks a business rule (bad rating, empty order...)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request."
    default_code = "invalid"


class NoItemsError(ValidationError):
    """Raised when an order is created without any items."""

    default_detail = "An order must contain at least one item."
    default_code = "no_items"


class UnauthorizedError(ServiceError):
    """Raised when the caller's identity is required but cannot be resolved."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication is required."
    default_code = "unauthorized"


class ForbiddenError(ServiceError):
    """Raised when the caller is known but not allowed to act on the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to perform this action."
    default_code = "forbidden"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "not_found"


class ConflictError(ServiceError):
    """Raised when a state transition is not legal from the current state."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "The resource is not in a state that allows this action."
    default_code = "conflict"


class SignatureError(ServiceError):
    """Raised when a webhook signature is missing or does not match."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid webhook signature."
    default_code = "invalid_signature"


class ProviderError(ServiceError):
    """Raised when the payment provider call fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Payment provider request failed."
    default_code = "provider_error"


def service_exception_handler(exc, context):
    """
    DRF exception handler that flattens ServiceError responses.

    Other DRF exceptions keep the stock response body.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ServiceError):
        response.data = {"error": str(exc.detail), "code": exc.get_codes()}

    if response.status_code >= 500:
        view = context.get("view")
        logger.error(
            f"Server error in {view.__class__.__name__ if view else 'unknown view'}: {exc}"
        )

    return response
