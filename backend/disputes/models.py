from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Dispute(models.Model):
    """A customer's complaint about one of their orders, resolved by an admin."""

    class DisputeType(models.TextChoices):
        ORDER_NOT_RECEIVED = "ORDER_NOT_RECEIVED", _("Order Not Received")
        WRONG_ITEMS = "WRONG_ITEMS", _("Wrong Items")
        QUALITY_ISSUE = "QUALITY_ISSUE", _("Quality Issue")
        COLD_FOOD = "COLD_FOOD", _("Cold Food")
        MISSING_ITEMS = "MISSING_ITEMS", _("Missing Items")
        OVERCHARGE = "OVERCHARGE", _("Overcharge")
        DELIVERY_DELAY = "DELIVERY_DELAY", _("Delivery Delay")
        RUDE_BEHAVIOR = "RUDE_BEHAVIOR", _("Rude Behavior")
        OTHER = "OTHER", _("Other")

    class DisputeStatus(models.TextChoices):
        OPEN = "OPEN", _("Open")
        IN_REVIEW = "IN_REVIEW", _("In Review")
        RESOLVED = "RESOLVED", _("Resolved")
        REJECTED = "REJECTED", _("Rejected")
        CLOSED = "CLOSED", _("Closed")

    order = models.ForeignKey(
        "orders.Order", on_delete=models.PROTECT, related_name="disputes"
    )
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="disputes"
    )
    restaurant = models.ForeignKey(
        "restaurants.Restaurant",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="disputes",
    )
    type = models.CharField(max_length=30, choices=DisputeType.choices)
    status = models.CharField(
        max_length=20, choices=DisputeStatus.choices, default=DisputeStatus.OPEN
    )
    subject = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    admin_response = models.TextField(blank=True, default="")
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="resolved_disputes",
    )
    refund_amount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "-created_at"], name="dispute_status_created_idx"),
            models.Index(fields=["customer", "-created_at"], name="dispute_customer_created_idx"),
        ]

    def __str__(self):
        return f"Dispute #{self.pk} on order {self.order_id} ({self.status})"
