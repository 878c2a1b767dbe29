from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import OrderSummarySerializer
from orders.services import OrderService
from users.permissions import IsAgent


class AgentActionsMixin:
    """
    Mixin for the delivery agent's actions on a single order.

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["post"], url_path="accept", permission_classes=[IsAgent])
    def accept(self, request: Request, pk=None) -> Response:
        """Claims a PLACED order for the calling agent."""
        return self._handle_agent_action(request, pk, OrderService.accept_order)

    @action(detail=True, methods=["post"], url_path="reject", permission_classes=[IsAgent])
    def reject(self, request: Request, pk=None) -> Response:
        """Returns a PLACED order to the available pool."""
        return self._handle_agent_action(request, pk, OrderService.reject_order)

    @action(detail=True, methods=["post"], url_path="deliver", permission_classes=[IsAgent])
    def deliver(self, request: Request, pk=None) -> Response:
        """Marks an order the caller is carrying as delivered."""
        return self._handle_agent_action(request, pk, OrderService.deliver_order)

    def _handle_agent_action(self, request: Request, pk, service_method) -> Response:
        order = service_method(pk, request.user)
        return Response(OrderSummarySerializer(order).data)
