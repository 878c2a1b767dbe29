from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class AgentOrderAssignment(models.Model):
    """
    Append-only log of an agent's association with an order.

    Every acceptance inserts a fresh row; the current assignment for an order
    is the row with the newest ``assigned_at``. Only the current row's
    status and timestamps move forward as the delivery progresses.
    """

    class AssignmentStatus(models.TextChoices):
        ACCEPTED = "ACCEPTED", _("Accepted")
        OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY", _("Out for Delivery")
        DELIVERED = "DELIVERED", _("Delivered")

    agent = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="order_assignments",
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="agent_assignments",
    )
    status = models.CharField(
        max_length=20,
        choices=AssignmentStatus.choices,
        default=AssignmentStatus.ACCEPTED,
    )
    assigned_at = models.DateTimeField(default=timezone.now)
    picked_up_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-assigned_at", "-id"]
        indexes = [
            models.Index(fields=["order", "-assigned_at"], name="assignment_order_idx"),
            models.Index(fields=["agent", "-assigned_at"], name="assignment_agent_idx"),
        ]

    def __str__(self):
        return f"{self.agent} -> {self.order_id} ({self.status})"


class AgentProfile(models.Model):
    """Availability, vehicle and last known position of a delivery agent."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="agent_profile",
    )
    is_available = models.BooleanField(
        default=False, help_text=_("Agent is online and accepting deliveries")
    )
    current_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    current_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    last_location_update = models.DateTimeField(null=True, blank=True)
    vehicle_type = models.CharField(max_length=50, blank=True, default="")
    vehicle_number = models.CharField(max_length=50, blank=True, default="")

    class Meta:
        indexes = [
            models.Index(fields=["is_available"], name="agent_profile_available_idx"),
        ]

    def __str__(self):
        return f"AgentProfile({self.user})"

    @property
    def has_location(self):
        return self.current_latitude is not None and self.current_longitude is not None
