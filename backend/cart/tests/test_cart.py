"""
Cart tests: the cart feeds order creation when a request carries no items.
"""
import pytest
from decimal import Decimal

from cart.models import CartItem
from cart.services import GUEST_OWNER_KEY, CartService
from core_backend.exceptions import NotFoundError, ValidationError


@pytest.mark.django_db
class TestCartService:

    def test_owner_key(self, customer):
        assert CartService.owner_key_for(customer) == "alice@example.com"
        assert CartService.owner_key_for(None) == GUEST_OWNER_KEY

    def test_adding_same_item_merges_quantity(self):
        CartService.add_item("guest", 7, "Dosa", Decimal("80.00"), qty=1)
        CartService.add_item("guest", 7, "Masala Dosa", Decimal("90.00"), qty=2)

        item = CartItem.objects.get(owner_key="guest", menu_item_id=7)
        assert item.qty == 3
        assert item.name == "Masala Dosa"
        assert item.price == Decimal("90.00")

    def test_subtotal(self):
        CartService.add_item("guest", 1, "Dosa", Decimal("80.00"), qty=2)
        CartService.add_item("guest", 2, "Chai", Decimal("20.00"))

        assert CartService.get_subtotal("guest") == Decimal("180.00")

    def test_carts_are_isolated(self, customer):
        CartService.add_item("guest", 1, "Dosa", Decimal("80.00"))

        assert CartService.get_order_lines(customer.email) == []

    def test_order_from_cart_clears_it(self, customer):
        from orders.services import OrderService

        CartService.add_item(customer.email, 1, "Dosa", Decimal("80.00"), qty=2)

        order = OrderService.create_order(user=customer)

        assert order.subtotal == Decimal("160.00")
        assert [(i.name, i.qty) for i in order.items.all()] == [("Dosa", 2)]
        assert not CartItem.objects.filter(owner_key=customer.email).exists()

    def test_update_qty_sets_quantity(self):
        item = CartService.add_item("guest", 1, "Dosa", Decimal("80.00"), qty=2)

        updated = CartService.update_qty("guest", item.id, 5)

        assert updated.qty == 5
        assert CartService.get_subtotal("guest") == Decimal("400.00")

    def test_update_qty_zero_removes_line(self):
        item = CartService.add_item("guest", 1, "Dosa", Decimal("80.00"))

        assert CartService.update_qty("guest", item.id, 0) is None
        assert not CartItem.objects.filter(pk=item.id).exists()

    def test_update_qty_negative_rejected(self):
        item = CartService.add_item("guest", 1, "Dosa", Decimal("80.00"))

        with pytest.raises(ValidationError):
            CartService.update_qty("guest", item.id, -1)

    def test_other_carts_lines_are_not_found(self, customer):
        item = CartService.add_item("guest", 1, "Dosa", Decimal("80.00"))

        with pytest.raises(NotFoundError):
            CartService.update_qty(customer.email, item.id, 3)
        with pytest.raises(NotFoundError):
            CartService.remove_item(customer.email, item.id)
        assert CartItem.objects.get(pk=item.id).qty == 1

    def test_remove_item(self):
        kept = CartService.add_item("guest", 1, "Dosa", Decimal("80.00"))
        removed = CartService.add_item("guest", 2, "Chai", Decimal("20.00"))

        CartService.remove_item("guest", removed.id)

        assert list(CartService.get_items("guest")) == [kept]

    def test_count_is_number_of_lines(self):
        CartService.add_item("guest", 1, "Dosa", Decimal("80.00"), qty=3)
        CartService.add_item("guest", 2, "Chai", Decimal("20.00"))

        assert CartService.count("guest") == 2
        assert CartService.count("nobody@example.com") == 0


@pytest.mark.django_db
class TestCartAPI:
    """/api/cart/"""

    def test_add_and_get(self, authenticated_client, customer):
        client = authenticated_client(customer)

        response = client.post(
            "/api/cart/",
            {"menu_item_id": 3, "name": "Idli", "price": "40.00", "qty": 2},
            format="json",
        )
        assert response.status_code == 201
        assert response.data["subtotal"] == "80.00"

        response = client.get("/api/cart/")
        assert response.status_code == 200
        assert response.data["items"][0]["name"] == "Idli"

    def test_guest_cart(self, api_client):
        api_client.post(
            "/api/cart/", {"menu_item_id": 3, "name": "Idli", "price": "40.00"}, format="json"
        )

        assert CartItem.objects.filter(owner_key=GUEST_OWNER_KEY).count() == 1

    def test_invalid_quantity_rejected(self, api_client):
        response = api_client.post(
            "/api/cart/",
            {"menu_item_id": 3, "name": "Idli", "price": "40.00", "qty": 0},
            format="json",
        )
        assert response.status_code == 400

    def test_clear(self, authenticated_client, customer):
        CartService.add_item(customer.email, 1, "Dosa", Decimal("80.00"))

        response = authenticated_client(customer).delete("/api/cart/")

        assert response.status_code == 204
        assert CartService.get_items(customer.email).count() == 0

    def test_update_line(self, authenticated_client, customer):
        item = CartService.add_item(customer.email, 1, "Dosa", Decimal("80.00"))

        response = authenticated_client(customer).put(
            f"/api/cart/items/{item.id}/", {"qty": 4}, format="json"
        )

        assert response.status_code == 200
        assert response.data["qty"] == 4
        assert response.data["line_total"] == "320.00"

    def test_update_to_zero_returns_204(self, api_client):
        item = CartService.add_item(GUEST_OWNER_KEY, 1, "Dosa", Decimal("80.00"))

        response = api_client.put(f"/api/cart/items/{item.id}/", {"qty": 0}, format="json")

        assert response.status_code == 204
        assert CartService.count(GUEST_OWNER_KEY) == 0

    def test_update_negative_rejected(self, api_client):
        item = CartService.add_item(GUEST_OWNER_KEY, 1, "Dosa", Decimal("80.00"))

        response = api_client.put(f"/api/cart/items/{item.id}/", {"qty": -2}, format="json")
        assert response.status_code == 400

    def test_delete_line(self, api_client):
        item = CartService.add_item(GUEST_OWNER_KEY, 1, "Dosa", Decimal("80.00"))

        response = api_client.delete(f"/api/cart/items/{item.id}/")

        assert response.status_code == 204
        assert not CartItem.objects.filter(pk=item.id).exists()

    def test_unknown_line_returns_404(self, authenticated_client, customer):
        item = CartService.add_item(GUEST_OWNER_KEY, 1, "Dosa", Decimal("80.00"))

        response = authenticated_client(customer).delete(f"/api/cart/items/{item.id}/")

        assert response.status_code == 404
        assert response.data == {"error": "Cart item not found.", "code": "not_found"}

    def test_count(self, authenticated_client, customer):
        CartService.add_item(customer.email, 1, "Dosa", Decimal("80.00"), qty=2)
        CartService.add_item(customer.email, 2, "Chai", Decimal("20.00"))

        response = authenticated_client(customer).get("/api/cart/count/")

        assert response.status_code == 200
        assert response.data == {"count": 2}
