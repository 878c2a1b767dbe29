"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from decimal import Decimal

TEST_WEBHOOK_SECRET = "whsec_test_secret"


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def test_settings(settings):
    """
    Deterministic settings for every test: no fees or tax, an in-memory
    channel layer and a known webhook secret.
    """
    settings.ORDER_DELIVERY_FEE = Decimal("0.00")
    settings.ORDER_TAX_RATE = Decimal("0")
    settings.STRIPE_SECRET_KEY = "sk_test_dummy"
    settings.STRIPE_PUBLISHABLE_KEY = "pk_test_dummy"
    settings.STRIPE_WEBHOOK_SECRET = TEST_WEBHOOK_SECRET
    settings.CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}
    return settings


@pytest.fixture(autouse=True)
def reset_broadcaster():
    """
    Reset live update subscribers after each test.

    The broadcaster is a process-wide singleton; subscribers left behind by
    one test would receive events published by the next.
    """
    from orders.services import order_update_broadcaster

    yield
    order_update_broadcaster.reset()


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/orders/')
            assert response.status_code == 401
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def authenticated_client():
    """
    Factory for API clients authenticated as a given user.

    Usage:
        def test_accept(authenticated_client, agent):
            client = authenticated_client(agent)
            response = client.post(f'/api/orders/{order.id}/accept/')
    """
    from rest_framework.test import APIClient

    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client


# ============================================================================
# USER FIXTURES
# ============================================================================

def _make_user(email, role, **extra):
    from users.models import User
    return User.objects.create_user(
        email=email,
        password="testpass123",
        full_name=email.split("@")[0].replace(".", " ").title(),
        role=role,
        **extra,
    )


@pytest.fixture
def customer(db):
    from users.models import User
    return _make_user("alice@example.com", User.Role.CUSTOMER)


@pytest.fixture
def other_customer(db):
    from users.models import User
    return _make_user("bob@example.com", User.Role.CUSTOMER)


@pytest.fixture
def owner(db):
    from users.models import User
    return _make_user("owner@example.com", User.Role.OWNER)


@pytest.fixture
def platform_admin(db):
    from users.models import User
    return _make_user("admin@example.com", User.Role.ADMIN, is_staff=True)


@pytest.fixture
def agent(db):
    from users.models import User
    return _make_user("agent.a@example.com", User.Role.AGENT)


@pytest.fixture
def other_agent(db):
    from users.models import User
    return _make_user("agent.b@example.com", User.Role.AGENT)


# ============================================================================
# DOMAIN FIXTURES
# ============================================================================

@pytest.fixture
def restaurant(owner):
    from restaurants.models import Restaurant
    return Restaurant.objects.create(name="Spice Route", owner=owner)


@pytest.fixture
def save10_coupon(db):
    """10% off orders of 100.00 or more."""
    from coupons.models import Coupon
    return Coupon.objects.create(
        code="SAVE10", percent_off=Decimal("10"), min_amount=Decimal("100.00")
    )


@pytest.fixture
def place_order(db):
    """
    Factory that places an order through the lifecycle service.

    Usage:
        order = place_order(user=customer)
        order = place_order(items=[{"name": "Dosa", "price": "80.00", "qty": 2}])
    """
    from orders.services import OrderService

    def _place(items=None, user=None, **kwargs):
        if items is None:
            items = [{"menu_item_id": 1, "name": "Paneer Tikka", "price": Decimal("120.00"), "qty": 1}]
        return OrderService.create_order(items=items, user=user, **kwargs)

    return _place
