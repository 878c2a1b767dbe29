import logging
from typing import Iterable, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from agents.services import AssignmentTracker
from cart.services import CartService
from core_backend.exceptions import (
    ConflictError,
    ForbiddenError,
    NoItemsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from orders.models import Order, OrderItem
from payments.services import PaymentService
from users.models import User
from .calculation_service import OrderCalculationService
from .notification_service import order_update_broadcaster

logger = logging.getLogger(__name__)


class OrderService:
    """Core service for the order lifecycle: placement, assignment, delivery and cancellation."""

    # The only legal status changes; every mutation path checks this table.
    VALID_STATUS_TRANSITIONS = {
        Order.OrderStatus.PLACED: [
            Order.OrderStatus.ACCEPTED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.ACCEPTED: [
            Order.OrderStatus.PREPARING,
            Order.OrderStatus.OUT_FOR_DELIVERY,
        ],
        Order.OrderStatus.PREPARING: [
            Order.OrderStatus.OUT_FOR_DELIVERY,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.OUT_FOR_DELIVERY: [
            Order.OrderStatus.DELIVERED,
        ],
        Order.OrderStatus.DELIVERED: [],
        Order.OrderStatus.CANCELLED: [],
    }

    # Timestamp written by a transition into each status (only if still unset)
    STATUS_TIMESTAMP_FIELDS = {
        Order.OrderStatus.ACCEPTED: "preparing_at",
        Order.OrderStatus.PREPARING: "preparing_at",
        Order.OrderStatus.OUT_FOR_DELIVERY: "dispatched_at",
        Order.OrderStatus.DELIVERED: "delivered_at",
        Order.OrderStatus.CANCELLED: "cancelled_at",
    }

    @staticmethod
    def can_transition(current_status: str, new_status: str) -> bool:
        return new_status in OrderService.VALID_STATUS_TRANSITIONS.get(current_status, [])

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return (
                Order.objects.select_related("assigned_agent", "restaurant")
                .prefetch_related("items")
                .get(pk=order_id)
            )
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError("Order not found.")

    @staticmethod
    def list_for_customer(user):
        if user is None or not user.is_authenticated:
            raise UnauthorizedError()
        return (
            Order.objects.filter(customer=user)
            .prefetch_related("items")
            .order_by("-created_at")
        )

    @staticmethod
    def list_available():
        """Unclaimed PLACED orders, oldest first."""
        return (
            Order.objects.filter(
                status=Order.OrderStatus.PLACED, assigned_agent__isnull=True
            )
            .prefetch_related("items")
            .order_by("created_at")
        )

    @staticmethod
    def list_assigned(agent):
        return (
            Order.objects.filter(assigned_agent=agent)
            .prefetch_related("items")
            .order_by("-created_at")
        )

    @staticmethod
    def list_board(user):
        """
        Orders past placement, for restaurant owners and admins. Owners only
        see their own restaurants' orders plus orders with no restaurant.
        """
        queryset = (
            Order.objects.exclude(status=Order.OrderStatus.PLACED)
            .prefetch_related("items")
            .order_by("-created_at")
        )
        if user.is_restaurant_owner and not user.is_admin_role:
            queryset = queryset.filter(
                Q(restaurant__owner=user) | Q(restaurant__isnull=True)
            )
        return queryset

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @staticmethod
    def create_order(
        items: Optional[Iterable[dict]] = None,
        coupon_code: Optional[str] = None,
        shipping_address: Optional[dict] = None,
        provider_order_id: Optional[str] = None,
        user: Optional[User] = None,
        restaurant=None,
    ) -> Order:
        """
        Place an order.

        Items default to the caller's cart when the request carries none. The
        order, its items and the payment link are written in one transaction;
        the cart is cleared and a change event is broadcast.
        """
        owner_key = CartService.owner_key_for(user)
        lines = list(items or []) or CartService.get_order_lines(owner_key)
        if not lines:
            raise NoItemsError()

        totals = OrderCalculationService.calculate(lines, coupon_code)
        shipping_address = shipping_address or {}
        customer = user if user is not None and user.is_authenticated else None

        with transaction.atomic():
            order = Order.objects.create(
                customer=customer,
                restaurant=restaurant,
                status=Order.OrderStatus.PLACED,
                placed_at=timezone.now(),
                subtotal=totals.subtotal,
                discount=totals.discount,
                coupon_code=totals.coupon_code,
                delivery_fee=totals.delivery_fee,
                tax=totals.tax,
                total=totals.total,
                **{
                    field: shipping_address.get(key) or ""
                    for key, field in Order.SHIPPING_FIELDS.items()
                },
            )
            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        order=order,
                        menu_item_id=line.get("menu_item_id"),
                        name=line["name"],
                        price=line["price"],
                        qty=line["qty"],
                    )
                    for line in lines
                ]
            )

            if provider_order_id:
                PaymentService.link_to_order(provider_order_id, order)

            CartService.clear(owner_key)
            order_update_broadcaster.publish_on_commit()

        logger.info(
            f"Order {order.id} placed by {owner_key}: {len(lines)} item(s), total {order.total}"
        )
        return OrderService.get_order(order.pk)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @staticmethod
    def _commit_transition(order: Order, new_status: str, **extra_fields) -> Order:
        """
        Conditionally move ``order`` from its observed status to ``new_status``.

        The UPDATE only matches while the row still has the observed status,
        so of two racing callers exactly one succeeds.
        """
        observed_status = order.status
        if order.is_terminal:
            raise ConflictError(f"Order {order.pk} is already {observed_status}.")
        if not OrderService.can_transition(observed_status, new_status):
            raise ConflictError(
                f"Cannot transition order from {observed_status} to {new_status}."
            )

        now = timezone.now()
        updates = {"status": new_status, "updated_at": now, **extra_fields}
        timestamp_field = OrderService.STATUS_TIMESTAMP_FIELDS.get(new_status)
        if timestamp_field and getattr(order, timestamp_field) is None:
            updates[timestamp_field] = now

        updated = Order.objects.filter(pk=order.pk, status=observed_status).update(**updates)
        if updated == 0:
            raise ConflictError(
                f"Order {order.pk} changed concurrently; it is no longer {observed_status}."
            )

        for field, value in updates.items():
            setattr(order, field, value)
        order_update_broadcaster.publish_on_commit()
        logger.info(f"Order {order.pk}: {observed_status} -> {new_status}")
        return order

    @staticmethod
    @transaction.atomic
    def accept_order(order_id, agent: User) -> Order:
        order = OrderService.get_order(order_id)
        if order.status != Order.OrderStatus.PLACED:
            raise ConflictError(f"Only PLACED orders can be accepted; order is {order.status}.")

        OrderService._commit_transition(order, Order.OrderStatus.ACCEPTED, assigned_agent=agent)
        AssignmentTracker.record_acceptance(order, agent)
        return order

    @staticmethod
    @transaction.atomic
    def reject_order(order_id, agent: User) -> Order:
        """Return a PLACED order to the available pool. No assignment row is written."""
        order = OrderService.get_order(order_id)
        if order.status != Order.OrderStatus.PLACED:
            raise ConflictError(f"Only PLACED orders can be rejected; order is {order.status}.")

        updated = Order.objects.filter(
            pk=order.pk, status=Order.OrderStatus.PLACED
        ).update(assigned_agent=None, updated_at=timezone.now())
        if updated == 0:
            raise ConflictError(f"Order {order.pk} is no longer PLACED.")

        order.assigned_agent = None
        order_update_broadcaster.publish_on_commit()
        logger.info(f"Order {order.pk} rejected by agent {agent.pk}")
        return order

    @staticmethod
    def advance_status(order_id, new_status: str, actor: User) -> Order:
        """
        Move an order along the transition table.

        ACCEPTED is only reachable through ``accept_order``; CANCELLED goes
        through ``cancel_order``. Agents may only advance their own orders.
        """
        if new_status not in Order.OrderStatus.values:
            raise ValidationError(f"'{new_status}' is not a valid order status.")
        if new_status == Order.OrderStatus.ACCEPTED:
            raise ValidationError("Orders are accepted through the accept action.")
        if new_status == Order.OrderStatus.CANCELLED:
            return OrderService.cancel_order(order_id, actor)

        with transaction.atomic():
            order = OrderService.get_order(order_id)
            if actor.is_agent and order.assigned_agent_id != actor.pk:
                raise ForbiddenError("Only the assigned agent can update this order.")

            OrderService._commit_transition(order, new_status)
            if new_status == Order.OrderStatus.OUT_FOR_DELIVERY:
                AssignmentTracker.record_pickup(order, at=order.dispatched_at)
            elif new_status == Order.OrderStatus.DELIVERED:
                AssignmentTracker.record_delivery(order, at=order.delivered_at)
        return order

    @staticmethod
    @transaction.atomic
    def deliver_order(order_id, agent: User) -> Order:
        order = OrderService.get_order(order_id)
        if order.assigned_agent_id != agent.pk:
            raise ForbiddenError("Only the assigned agent can deliver this order.")

        OrderService._commit_transition(order, Order.OrderStatus.DELIVERED)
        AssignmentTracker.record_delivery(order, at=order.delivered_at)
        return order

    @staticmethod
    @transaction.atomic
    def cancel_order(order_id, actor: Optional[User] = None) -> Order:
        """
        Cancel a PLACED or PREPARING order and flag its payment for refund.
        Customers may only cancel their own orders.
        """
        order = OrderService.get_order(order_id)
        if actor is not None and actor.is_customer and order.customer_id != actor.pk:
            raise ForbiddenError("You can only cancel your own orders.")
        if actor is not None and actor.is_agent and order.assigned_agent_id != actor.pk:
            raise ForbiddenError("Only the assigned agent can update this order.")

        OrderService._commit_transition(order, Order.OrderStatus.CANCELLED)
        PaymentService.mark_refund_requested(order)
        return order

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    @staticmethod
    def get_tracking(order_id) -> dict:
        order = OrderService.get_order(order_id)
        agent_location = None
        agent = order.assigned_agent
        if agent is not None:
            profile = getattr(agent, "agent_profile", None)
            if profile is not None and profile.has_location:
                agent_location = {
                    "latitude": profile.current_latitude,
                    "longitude": profile.current_longitude,
                    "updatedAt": profile.last_location_update,
                }
        return {"order": order, "agent_location": agent_location}
