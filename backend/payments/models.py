import uuid
from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Payment(models.Model):
    """
    A provider payment, created at checkout before any order exists.

    The provider order id ties the checkout, the order placement and the
    provider's webhooks to the same row.
    """

    class PaymentStatus(models.TextChoices):
        CREATED = "CREATED", _("Created")
        AUTHORIZED = "AUTHORIZED", _("Authorized")
        CAPTURED = "CAPTURED", _("Captured")
        FAILED = "FAILED", _("Failed")
        REFUND_REQUESTED = "REFUND_REQUESTED", _("Refund Requested")
        REFUNDED = "REFUNDED", _("Refunded")

    class Provider(models.TextChoices):
        STRIPE = "STRIPE", _("Stripe")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments",
    )
    provider = models.CharField(
        max_length=20, choices=Provider.choices, default=Provider.STRIPE
    )
    provider_order_id = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        help_text=_("Provider checkout identifier (Stripe PaymentIntent id)"),
    )
    provider_payment_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        db_index=True,
        help_text=_("Provider payment identifier (Stripe charge id)"),
    )
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.CREATED,
        help_text=_("The current status of the payment."),
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="INR")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["order", "-created_at"], name="payment_order_created_idx"),
        ]

    def __str__(self):
        return f"Payment {self.provider_order_id or self.id} ({self.status})"


class PaymentWebhookEvent(models.Model):
    """Dedup record of a processed provider webhook event."""

    event_id = models.CharField(max_length=255, unique=True)
    event_type = models.CharField(max_length=100, blank=True, default="")
    signature = models.TextField(blank=True, default="")
    payload_sha256 = models.CharField(max_length=64)
    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-received_at"]

    def __str__(self):
        return f"{self.event_type} {self.event_id}"
