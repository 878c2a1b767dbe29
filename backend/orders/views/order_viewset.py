import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from orders.filters import OrderFilter
from orders.models import Order
from orders.permissions import CanViewOrder
from orders.serializers import (
    OrderCreateSerializer,
    OrderSummarySerializer,
    OrderTrackingSerializer,
)
from orders.services import OrderService
from users.permissions import IsAgent, IsOwnerOrAdmin

from .agent_actions import AgentActionsMixin
from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)

UUID_REGEX = "[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"


class OrderViewSet(AgentActionsMixin, StatusActionsMixin, viewsets.GenericViewSet):
    """
    ViewSet for the order lifecycle.

    This viewset combines multiple mixins to provide:
    - Agent claim/reject/deliver (AgentActionsMixin)
    - Status transitions and cancellation (StatusActionsMixin)

    Listings are scoped by caller: customers get their own history, agents
    the open pool or their assignments, owners and admins the board.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSummarySerializer
    permission_classes = [AllowAny]
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter
    lookup_value_regex = UUID_REGEX

    def get_serializer_class(self):
        if self.action == "create":
            return OrderCreateSerializer
        if self.action == "track":
            return OrderTrackingSerializer
        return OrderSummarySerializer

    def _list_response(self, queryset) -> Response:
        queryset = self.filter_queryset(queryset)
        return Response(OrderSummarySerializer(queryset, many=True).data)

    def create(self, request: Request, *args, **kwargs) -> Response:
        """Places an order for the caller (guests included) from the body or the cart."""
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        items = [dict(item) for item in data.get("items") or []]
        order = OrderService.create_order(
            items=items,
            coupon_code=data.get("coupon_code"),
            shipping_address=data.get("shipping_address"),
            provider_order_id=data.get("provider_order_id"),
            user=request.user,
            restaurant=data.get("restaurant"),
        )
        return Response(OrderSummarySerializer(order).data, status=status.HTTP_201_CREATED)

    def list(self, request: Request, *args, **kwargs) -> Response:
        """The caller's own orders, newest first."""
        return self._list_response(OrderService.list_for_customer(request.user))

    def retrieve(self, request: Request, pk=None, *args, **kwargs) -> Response:
        order = OrderService.get_order(pk)
        self.check_object_permissions(request, order)
        return Response(OrderSummarySerializer(order).data)

    @action(detail=True, methods=["get"], url_path="track", permission_classes=[AllowAny, CanViewOrder])
    def track(self, request: Request, pk=None) -> Response:
        """Status timestamps, shipping snapshot and the agent's last known location."""
        tracking = OrderService.get_tracking(pk)
        self.check_object_permissions(request, tracking["order"])
        serializer = OrderTrackingSerializer(
            tracking["order"], context={"agent_location": tracking["agent_location"]}
        )
        return Response(serializer.data)

    @action(detail=False, methods=["get"], url_path="available", permission_classes=[IsAgent])
    def available(self, request: Request) -> Response:
        """Unclaimed PLACED orders, oldest first."""
        return self._list_response(OrderService.list_available())

    @action(detail=False, methods=["get"], url_path="agent/my", permission_classes=[IsAgent])
    def my_assigned(self, request: Request) -> Response:
        """Orders assigned to the calling agent, newest first."""
        return self._list_response(OrderService.list_assigned(request.user))

    @action(detail=False, methods=["get"], url_path="board", permission_classes=[IsOwnerOrAdmin])
    def board(self, request: Request) -> Response:
        """Every order past placement, for restaurant owners and admins."""
        return self._list_response(OrderService.list_board(request.user))

    def get_permissions(self):
        if self.action == "retrieve":
            return [AllowAny(), CanViewOrder()]
        return super().get_permissions()
