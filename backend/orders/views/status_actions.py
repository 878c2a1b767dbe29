from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from orders.permissions import CanAdvanceOrder
from orders.serializers import OrderSummarySerializer, UpdateOrderStatusSerializer
from orders.services import OrderService


class StatusActionsMixin:
    """
    Mixin for order status transition actions

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["post"], url_path="status", permission_classes=[CanAdvanceOrder])
    def update_status(self, request: Request, pk=None) -> Response:
        """
        Moves the order to the requested status, ensuring valid transitions via OrderService.
        """
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data["status"].upper()

        order = OrderService.advance_status(pk, new_status, request.user)
        return Response(OrderSummarySerializer(order).data)

    @action(detail=True, methods=["post"], url_path="cancel", permission_classes=[IsAuthenticated])
    def cancel(self, request: Request, pk=None) -> Response:
        """Cancels the order and flags its payment for refund."""
        order = OrderService.cancel_order(pk, request.user)
        return Response(OrderSummarySerializer(order).data)
