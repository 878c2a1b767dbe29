"""
Global Error Handling & Framework-Level Tests

This module tests GLOBAL error handling - framework-level concerns that span
multiple apps: the service error body, authentication and request parsing.
App-specific error cases live in their respective apps.

Run with: pytest backend/core_backend/tests/test_error_handling.py -v
"""
import pytest
from unittest.mock import MagicMock

from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from core_backend.exceptions import (
    ConflictError,
    NoItemsError,
    ProviderError,
    ValidationError,
    service_exception_handler,
)


# ============================================================================
# EXCEPTION HANDLER
# ============================================================================

class TestServiceExceptionHandler:

    def _handle(self, exc):
        return service_exception_handler(exc, {"view": MagicMock()})

    def test_service_error_body(self):
        response = self._handle(ConflictError("Order changed concurrently."))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data == {"error": "Order changed concurrently.", "code": "conflict"}

    def test_default_message(self):
        response = self._handle(NoItemsError())

        assert response.status_code == 400
        assert response.data["code"] == "no_items"
        assert response.data["error"]

    def test_provider_error_is_500(self):
        response = self._handle(ProviderError("Refund failed"))
        assert response.status_code == 500

    def test_drf_exceptions_keep_stock_body(self):
        response = self._handle(NotFound("nope"))
        assert response.data == {"detail": "nope"}

    def test_non_api_exceptions_are_not_handled(self):
        assert self._handle(RuntimeError("boom")) is None

    def test_validation_error_is_400(self):
        assert self._handle(ValidationError("bad")).status_code == 400


# ============================================================================
# GLOBAL API ERROR RESPONSE TESTS
# ============================================================================

@pytest.mark.django_db
class TestGlobalAPIErrorResponses:
    """Framework-level API error responses that apply across all apps."""

    def test_health_check_is_public(self, api_client):
        response = api_client.get("/api/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_unauthenticated_order_list_returns_401(self, api_client):
        response = api_client.get("/api/orders/")
        assert response.status_code == 401

    def test_malformed_json_request_returns_400(self, api_client):
        response = api_client.post(
            "/api/orders/",
            '{"items": [{"name": "Dosa", "price": "80.00", "qty": 1}',  # Malformed
            content_type="application/json",
        )
        assert response.status_code == 400

    def test_unknown_order_returns_flat_404(self, api_client):
        response = api_client.get("/api/orders/00000000-0000-0000-0000-000000000000/")

        assert response.status_code == 404
        assert response.data == {"error": "Order not found.", "code": "not_found"}

    def test_empty_order_returns_no_items(self, api_client):
        response = api_client.post("/api/orders/", {"items": []}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "no_items"


# ============================================================================
# AUTHENTICATION
# ============================================================================

@pytest.mark.django_db
class TestJWTAuthentication:

    def test_bearer_token_authenticates(self, customer, place_order):
        place_order(user=customer)
        refresh = RefreshToken.for_user(customer)

        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        response = client.get("/api/orders/")

        assert response.status_code == 200
        assert len(response.data) == 1

    def test_invalid_token_returns_401(self):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

        response = client.get("/api/orders/")
        assert response.status_code == 401
