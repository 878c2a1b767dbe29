from rest_framework import status
from rest_framework.response import Response

from core_backend.exceptions import NotFoundError
from payments.serializers import PaymentSerializer
from payments.services import PaymentService
from users.permissions import IsOwnerOrAdmin
from .base import BasePaymentView


class RefundOrderView(BasePaymentView):
    """
    POST /api/payments/orders/<order_id>/refund/

    Returns 200 ``{refundId, status}`` when the provider refunded the payment,
    or 202 ``{status}`` when the refund waits for a provider payment id.
    """

    permission_classes = [IsOwnerOrAdmin]

    def post(self, request, order_id, *args, **kwargs):
        result = PaymentService.refund_order(order_id)
        if result.deferred:
            return Response({"status": result.status}, status=status.HTTP_202_ACCEPTED)
        return Response({"refundId": result.refund_id, "status": result.status})


class OrderPaymentStatusView(BasePaymentView):
    """GET /api/payments/orders/<order_id>/ - latest payment of an order."""

    permission_classes = [IsOwnerOrAdmin]

    def get(self, request, order_id, *args, **kwargs):
        order = self.get_order_or_404(order_id)
        payment = PaymentService.latest_for_order(order)
        if payment is None:
            raise NotFoundError("No payment found for this order.")
        return Response(PaymentSerializer(payment).data)
