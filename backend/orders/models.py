import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


def money_field(**kwargs):
    return models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        **kwargs,
    )


class Order(models.Model):
    """
    A customer's placed purchase.

    Pricing and the shipping snapshot are fixed at creation; afterwards only
    the status, the status timestamps and the agent assignment change.
    Orders are never hard-deleted.
    """

    class OrderStatus(models.TextChoices):
        PLACED = "PLACED", _("Placed")
        ACCEPTED = "ACCEPTED", _("Accepted")
        PREPARING = "PREPARING", _("Preparing")
        OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY", _("Out for Delivery")
        DELIVERED = "DELIVERED", _("Delivered")
        CANCELLED = "CANCELLED", _("Cancelled")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        help_text=_("Customer who placed the order. Empty for guest orders."),
    )
    restaurant = models.ForeignKey(
        "restaurants.Restaurant",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    assigned_agent = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_orders",
        help_text=_("Delivery agent currently responsible for the order"),
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PLACED,
        db_index=True,
    )

    # Pricing, fixed at creation
    subtotal = money_field()
    discount = money_field()
    coupon_code = models.CharField(max_length=50, blank=True, null=True)
    delivery_fee = money_field()
    tax = money_field()
    total = money_field(help_text=_("subtotal - discount + delivery_fee + tax"))

    # Shipping snapshot, fixed at creation
    ship_name = models.CharField(max_length=150, blank=True, default="")
    ship_phone = models.CharField(max_length=20, blank=True, default="")
    ship_line1 = models.CharField(max_length=255, blank=True, default="")
    ship_line2 = models.CharField(max_length=255, blank=True, default="")
    ship_city = models.CharField(max_length=100, blank=True, default="")
    ship_state = models.CharField(max_length=100, blank=True, default="")
    ship_postal = models.CharField(max_length=20, blank=True, default="")
    ship_country = models.CharField(max_length=100, blank=True, default="")

    # Status timestamps, each written at most once
    placed_at = models.DateTimeField(null=True, blank=True)
    preparing_at = models.DateTimeField(
        null=True, blank=True, help_text=_("Set when the order is accepted or starts preparing")
    )
    dispatched_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    SHIPPING_FIELDS = {
        "name": "ship_name",
        "phone": "ship_phone",
        "line1": "ship_line1",
        "line2": "ship_line2",
        "city": "ship_city",
        "state": "ship_state",
        "postal": "ship_postal",
        "country": "ship_country",
    }

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "assigned_agent"], name="order_status_agent_idx"),
            models.Index(fields=["customer", "-created_at"], name="order_customer_created_idx"),
            models.Index(fields=["assigned_agent", "-created_at"], name="order_agent_created_idx"),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.status})"

    @property
    def is_terminal(self):
        return self.status in (self.OrderStatus.DELIVERED, self.OrderStatus.CANCELLED)

    @property
    def is_guest_order(self):
        return self.customer_id is None

    @property
    def shipping_address(self):
        return {key: getattr(self, field) for key, field in self.SHIPPING_FIELDS.items()}


class OrderItem(models.Model):
    """
    A line of an order. Name and price are snapshots taken when the order was
    placed, so later menu changes do not affect historical orders.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item_id = models.BigIntegerField(
        null=True, blank=True, help_text=_("Reference to the menu item at order time")
    )
    name = models.CharField(max_length=200)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    qty = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.qty} x {self.name}"

    @property
    def line_total(self):
        return self.price * self.qty
