"""
Cart service layer.

The cart is a thin collaborator of order creation: it supplies lines when an
order request carries none, and is cleared once the order is placed.
"""

from decimal import Decimal
from typing import Optional
from django.db import transaction
import logging

from core_backend.exceptions import NotFoundError, ValidationError
from .models import CartItem

logger = logging.getLogger(__name__)

GUEST_OWNER_KEY = "guest"


class CartService:
    """Service for managing cart operations."""

    @staticmethod
    def owner_key_for(user) -> str:
        if user is not None and getattr(user, "is_authenticated", False):
            return user.email
        return GUEST_OWNER_KEY

    @staticmethod
    def get_items(owner_key: str):
        return CartItem.objects.filter(owner_key=owner_key)

    @staticmethod
    def get_order_lines(owner_key: str) -> list:
        """Cart lines in the shape order creation expects."""
        return [
            {
                "menu_item_id": item.menu_item_id,
                "name": item.name,
                "price": item.price,
                "qty": item.qty,
            }
            for item in CartService.get_items(owner_key)
        ]

    @staticmethod
    def get_subtotal(owner_key: str) -> Decimal:
        return sum(
            (item.line_total for item in CartService.get_items(owner_key)),
            Decimal("0.00"),
        )

    @staticmethod
    @transaction.atomic
    def add_item(owner_key: str, menu_item_id: int, name: str, price: Decimal, qty: int = 1) -> CartItem:
        """
        Add a line to the cart. Adding the same menu item again increases its
        quantity and refreshes the name and price snapshot.
        """
        item, created = CartItem.objects.select_for_update().get_or_create(
            owner_key=owner_key,
            menu_item_id=menu_item_id,
            defaults={"name": name, "price": price, "qty": qty},
        )
        if not created:
            item.qty += qty
            item.name = name
            item.price = price
            item.save(update_fields=["qty", "name", "price"])
        return item

    @staticmethod
    def _get_line(owner_key: str, item_id) -> CartItem:
        try:
            return CartItem.objects.select_for_update().get(pk=item_id, owner_key=owner_key)
        except CartItem.DoesNotExist:
            raise NotFoundError("Cart item not found.")

    @staticmethod
    @transaction.atomic
    def update_qty(owner_key: str, item_id, qty: int) -> Optional[CartItem]:
        """
        Set the quantity of one line. A quantity of zero removes the line and
        returns None. Lines of another cart are reported as not found.
        """
        if qty < 0:
            raise ValidationError("Quantity cannot be negative.")
        item = CartService._get_line(owner_key, item_id)
        if qty == 0:
            item.delete()
            logger.debug(f"Removed cart line {item_id} for {owner_key}")
            return None
        item.qty = qty
        item.save(update_fields=["qty"])
        return item

    @staticmethod
    @transaction.atomic
    def remove_item(owner_key: str, item_id) -> None:
        CartService._get_line(owner_key, item_id).delete()
        logger.debug(f"Removed cart line {item_id} for {owner_key}")

    @staticmethod
    def count(owner_key: str) -> int:
        """Number of lines in the cart, for the cart badge."""
        return CartService.get_items(owner_key).count()

    @staticmethod
    def clear(owner_key: str) -> int:
        deleted, _ = CartItem.objects.filter(owner_key=owner_key).delete()
        if deleted:
            logger.debug(f"Cleared {deleted} cart line(s) for {owner_key}")
        return deleted
