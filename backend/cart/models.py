from decimal import Decimal

from django.db import models


class CartItem(models.Model):
    """
    A pending cart line, keyed by the caller's email (or "guest").

    Lines are snapshots of the menu item at the time they were added and are
    cleared once an order has been placed from them.
    """

    owner_key = models.CharField(
        max_length=254,
        db_index=True,
        help_text="Email of the cart owner, or 'guest' for anonymous carts.",
    )
    menu_item_id = models.BigIntegerField()
    name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    qty = models.PositiveIntegerField(default=1)
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["added_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["owner_key", "menu_item_id"], name="unique_cart_line_per_item"
            ),
        ]

    def __str__(self):
        return f"{self.qty} x {self.name} ({self.owner_key})"

    @property
    def line_total(self) -> Decimal:
        return self.price * self.qty
