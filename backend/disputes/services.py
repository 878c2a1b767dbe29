import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from core_backend.exceptions import ForbiddenError, NotFoundError, ValidationError
from orders.models import Order
from .models import Dispute

logger = logging.getLogger(__name__)


class DisputeService:
    """Customer disputes on orders and their admin resolution."""

    @staticmethod
    @transaction.atomic
    def create_dispute(customer, order_id, dispute_type: str, subject: str, description: str = "") -> Dispute:
        order = Order.objects.filter(pk=order_id).first()
        if order is None or order.customer_id != customer.pk:
            raise ValidationError("You can only open disputes for your own orders.")

        dispute = Dispute.objects.create(
            order=order,
            customer=customer,
            restaurant_id=order.restaurant_id,
            type=dispute_type,
            subject=subject,
            description=description or "",
        )
        logger.info(f"Dispute {dispute.pk} opened by {customer.email} for order {order.pk}")
        return dispute

    @staticmethod
    def list_for_customer(customer):
        return Dispute.objects.filter(customer=customer).order_by("-created_at")

    @staticmethod
    def get_dispute(dispute_id, user) -> Dispute:
        """A dispute is visible to the customer who opened it and to admins."""
        dispute = Dispute.objects.filter(pk=dispute_id).first()
        if dispute is None:
            raise NotFoundError("Dispute not found.")
        if dispute.customer_id != user.pk and not user.is_admin_role:
            raise ForbiddenError("You can only view your own disputes.")
        return dispute

    @staticmethod
    def _get_for_update(dispute_id) -> Dispute:
        dispute = Dispute.objects.select_for_update().filter(pk=dispute_id).first()
        if dispute is None:
            raise NotFoundError("Dispute not found.")
        return dispute

    @staticmethod
    def list_all(status: Optional[str] = None):
        queryset = Dispute.objects.select_related("order", "customer").order_by("-created_at")
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    @staticmethod
    def stats() -> dict:
        counts = dict(
            Dispute.objects.order_by().values_list("status").annotate(count=Count("id"))
        )
        stats = {
            status.lower(): counts.get(status, 0) for status in Dispute.DisputeStatus.values
        }
        stats["total"] = sum(counts.values())
        return stats

    @staticmethod
    @transaction.atomic
    def resolve(
        dispute_id,
        admin,
        approved: bool,
        response: str = "",
        refund_amount: Optional[Decimal] = None,
    ) -> Dispute:
        dispute = DisputeService._get_for_update(dispute_id)
        dispute.status = (
            Dispute.DisputeStatus.RESOLVED if approved else Dispute.DisputeStatus.REJECTED
        )
        dispute.admin_response = response or ""
        dispute.resolved_by = admin
        dispute.resolved_at = timezone.now()
        if refund_amount is not None:
            dispute.refund_amount = refund_amount
        dispute.save()
        logger.info(f"Dispute {dispute.pk} {dispute.status.lower()} by {admin.email}")
        return dispute

    @staticmethod
    @transaction.atomic
    def update_status(dispute_id, status: str) -> Dispute:
        if status not in Dispute.DisputeStatus.values:
            raise ValidationError(f"'{status}' is not a valid dispute status.")
        dispute = DisputeService._get_for_update(dispute_id)
        dispute.status = status
        dispute.save(update_fields=["status", "updated_at"])
        return dispute
