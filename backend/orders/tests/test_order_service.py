"""
Order lifecycle service tests.

Covers creation and pricing, the transition table, agent claim/reject,
delivery and cancellation, plus the assignment log each transition writes.
"""
import pytest
from decimal import Decimal

from agents.models import AgentOrderAssignment
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
from orders.services import OrderService
from payments.models import Payment


def _advance_to(order, status, actor):
    """Walk an accepted order forward to ``status``."""
    return OrderService.advance_status(order.id, status, actor)


@pytest.mark.django_db
class TestOrderCreation:
    """Pricing, persistence and side effects of placing an order."""

    def test_totals_and_items(self, customer):
        order = OrderService.create_order(
            items=[
                {"menu_item_id": 1, "name": "Dosa", "price": Decimal("80.00"), "qty": 2},
                {"menu_item_id": 2, "name": "Lassi", "price": Decimal("45.50"), "qty": 1},
            ],
            user=customer,
        )

        assert order.status == Order.OrderStatus.PLACED
        assert order.placed_at is not None
        assert order.customer == customer
        assert order.subtotal == Decimal("205.50")
        assert order.discount == Decimal("0.00")
        assert order.coupon_code is None
        assert order.total == Decimal("205.50")
        assert order.items.count() == 2

    def test_fee_and_tax_from_settings(self, customer, settings):
        settings.ORDER_DELIVERY_FEE = Decimal("30.00")
        settings.ORDER_TAX_RATE = Decimal("0.05")

        order = OrderService.create_order(
            items=[{"name": "Thali", "price": Decimal("200.00"), "qty": 1}], user=customer
        )

        assert order.delivery_fee == Decimal("30.00")
        assert order.tax == Decimal("10.00")
        assert order.total == order.subtotal - order.discount + order.delivery_fee + order.tax
        assert order.total == Decimal("240.00")

    def test_coupon_applied_when_eligible(self, customer, save10_coupon):
        order = OrderService.create_order(
            items=[{"name": "Biryani", "price": Decimal("100.00"), "qty": 2}],
            coupon_code="save10",
            user=customer,
        )

        assert order.discount == Decimal("20.00")
        assert order.coupon_code == "SAVE10"
        assert order.total == Decimal("180.00")

    def test_coupon_below_minimum_is_ignored(self, customer, save10_coupon):
        order = OrderService.create_order(
            items=[{"name": "Chai", "price": Decimal("25.00"), "qty": 2}],
            coupon_code="SAVE10",
            user=customer,
        )

        assert order.discount == Decimal("0.00")
        assert order.coupon_code is None
        assert order.total == Decimal("50.00")

    def test_unknown_coupon_is_ignored(self, customer):
        order = OrderService.create_order(
            items=[{"name": "Chai", "price": Decimal("25.00"), "qty": 1}],
            coupon_code="NOPE",
            user=customer,
        )

        assert order.discount == Decimal("0.00")
        assert order.coupon_code is None

    def test_empty_items_persist_nothing(self, customer):
        with pytest.raises(NoItemsError):
            OrderService.create_order(items=[], user=customer)

        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_no_items_error_is_a_validation_error(self):
        assert issubclass(NoItemsError, ValidationError)
        assert NoItemsError.status_code == 400

    def test_items_default_to_cart_and_cart_is_cleared(self, customer):
        owner_key = CartService.owner_key_for(customer)
        CartService.add_item(owner_key=owner_key, menu_item_id=7, name="Idli", price=Decimal("40.00"), qty=3)

        order = OrderService.create_order(user=customer)

        assert order.subtotal == Decimal("120.00")
        assert [item.name for item in order.items.all()] == ["Idli"]
        assert CartService.get_items(owner_key).count() == 0

    def test_guest_order(self):
        order = OrderService.create_order(items=[{"name": "Vada", "price": Decimal("30.00"), "qty": 1}])

        assert order.customer is None
        assert order.is_guest_order

    def test_shipping_snapshot(self, customer):
        order = OrderService.create_order(
            items=[{"name": "Vada", "price": Decimal("30.00"), "qty": 1}],
            shipping_address={"name": "Alice", "line1": "12 MG Road", "city": "Bengaluru", "postal": "560001"},
            user=customer,
        )

        assert order.ship_name == "Alice"
        assert order.ship_line1 == "12 MG Road"
        assert order.ship_city == "Bengaluru"
        assert order.ship_postal == "560001"
        assert order.ship_country == ""

    def test_links_checkout_payment(self, customer):
        payment = Payment.objects.create(provider_order_id="pi_123", amount=Decimal("120.00"))

        order = OrderService.create_order(
            items=[{"name": "Paneer Tikka", "price": Decimal("120.00"), "qty": 1}],
            provider_order_id="pi_123",
            user=customer,
        )

        payment.refresh_from_db()
        assert payment.order_id == order.id
        assert payment.status == Payment.PaymentStatus.AUTHORIZED

    def test_unknown_provider_order_id_is_ignored(self, customer):
        order = OrderService.create_order(
            items=[{"name": "Paneer Tikka", "price": Decimal("120.00"), "qty": 1}],
            provider_order_id="pi_missing",
            user=customer,
        )

        assert order.status == Order.OrderStatus.PLACED
        assert Payment.objects.count() == 0


@pytest.mark.django_db
class TestOrderLookups:
    """Listing and lookup scoping."""

    def test_get_order_not_found(self):
        with pytest.raises(NotFoundError):
            OrderService.get_order("00000000-0000-0000-0000-000000000000")

    def test_get_order_malformed_id(self):
        with pytest.raises(NotFoundError):
            OrderService.get_order("not-a-uuid")

    def test_list_for_customer_requires_user(self):
        from django.contrib.auth.models import AnonymousUser

        with pytest.raises(UnauthorizedError):
            OrderService.list_for_customer(AnonymousUser())

    def test_list_for_customer_only_own_orders(self, place_order, customer, other_customer):
        mine = place_order(user=customer)
        place_order(user=other_customer)

        assert [o.id for o in OrderService.list_for_customer(customer)] == [mine.id]

    def test_list_available_oldest_first(self, place_order, agent):
        first = place_order()
        second = place_order()
        claimed = place_order()
        OrderService.accept_order(claimed.id, agent)

        assert [o.id for o in OrderService.list_available()] == [first.id, second.id]

    def test_list_board_excludes_placed(self, place_order, agent, platform_admin):
        place_order()
        accepted = place_order()
        OrderService.accept_order(accepted.id, agent)

        assert [o.id for o in OrderService.list_board(platform_admin)] == [accepted.id]

    def test_list_board_scoped_to_owner(self, place_order, agent, owner, restaurant):
        from restaurants.models import Restaurant
        from users.models import User

        rival_owner = User.objects.create_user(email="rival@example.com", role=User.Role.OWNER)
        rival = Restaurant.objects.create(name="Rival Diner", owner=rival_owner)

        own = place_order(restaurant=restaurant)
        unowned = place_order()
        foreign = place_order(restaurant=rival)
        for order in (own, unowned, foreign):
            OrderService.accept_order(order.id, agent)

        board_ids = {o.id for o in OrderService.list_board(owner)}
        assert board_ids == {own.id, unowned.id}


@pytest.mark.django_db
class TestAcceptAndReject:
    """Agent claim semantics."""

    def test_accept_from_placed(self, place_order, agent):
        order = place_order()

        accepted = OrderService.accept_order(order.id, agent)

        order.refresh_from_db()
        assert accepted.status == Order.OrderStatus.ACCEPTED
        assert order.status == Order.OrderStatus.ACCEPTED
        assert order.assigned_agent == agent
        assert order.preparing_at is not None

        assignment = AssignmentTracker.current_for_order(order)
        assert assignment.agent == agent
        assert assignment.status == AgentOrderAssignment.AssignmentStatus.ACCEPTED

    def test_second_accept_conflicts_and_keeps_first_agent(self, place_order, agent, other_agent):
        order = place_order()
        OrderService.accept_order(order.id, agent)

        with pytest.raises(ConflictError):
            OrderService.accept_order(order.id, other_agent)

        order.refresh_from_db()
        assert order.assigned_agent == agent
        assert AgentOrderAssignment.objects.filter(order=order).count() == 1

    def test_stale_observed_status_conflicts(self, place_order, agent, other_agent):
        """A transition computed from a stale read must not overwrite the winner."""
        order = place_order()
        stale = OrderService.get_order(order.id)
        OrderService.accept_order(order.id, agent)

        with pytest.raises(ConflictError):
            OrderService._commit_transition(stale, Order.OrderStatus.ACCEPTED, assigned_agent=other_agent)

        order.refresh_from_db()
        assert order.assigned_agent == agent

    def test_reject_keeps_order_available(self, place_order, agent):
        order = place_order()

        OrderService.reject_order(order.id, agent)

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.PLACED
        assert order.assigned_agent is None
        assert order in OrderService.list_available()
        assert AgentOrderAssignment.objects.filter(order=order).count() == 0

    def test_reject_after_accept_conflicts(self, place_order, agent):
        order = place_order()
        OrderService.accept_order(order.id, agent)

        with pytest.raises(ConflictError):
            OrderService.reject_order(order.id, agent)


@pytest.mark.django_db
class TestAdvanceAndDeliver:
    """Status progression and delivery."""

    def test_full_progression_updates_assignment(self, place_order, agent):
        order = place_order()
        OrderService.accept_order(order.id, agent)

        _advance_to(order, Order.OrderStatus.PREPARING, agent)
        _advance_to(order, Order.OrderStatus.OUT_FOR_DELIVERY, agent)
        assignment = AssignmentTracker.current_for_order(order)
        assert assignment.status == AgentOrderAssignment.AssignmentStatus.OUT_FOR_DELIVERY
        assert assignment.picked_up_at is not None

        delivered = OrderService.deliver_order(order.id, agent)

        assert delivered.status == Order.OrderStatus.DELIVERED
        order.refresh_from_db()
        assert order.dispatched_at is not None
        assert order.delivered_at is not None
        assignment.refresh_from_db()
        assert assignment.status == AgentOrderAssignment.AssignmentStatus.DELIVERED
        assert assignment.delivered_at == order.delivered_at

    def test_preparing_at_set_only_once(self, place_order, agent):
        order = place_order()
        OrderService.accept_order(order.id, agent)
        order.refresh_from_db()
        accepted_at = order.preparing_at

        _advance_to(order, Order.OrderStatus.PREPARING, agent)

        order.refresh_from_db()
        assert order.preparing_at == accepted_at

    def test_illegal_transition_conflicts(self, place_order, agent, platform_admin):
        order = place_order()

        with pytest.raises(ConflictError):
            _advance_to(order, Order.OrderStatus.DELIVERED, platform_admin)

    def test_unknown_status_is_invalid(self, place_order, platform_admin):
        order = place_order()

        with pytest.raises(ValidationError):
            _advance_to(order, "TELEPORTED", platform_admin)

    def test_accepted_only_via_accept(self, place_order, platform_admin):
        order = place_order()

        with pytest.raises(ValidationError):
            _advance_to(order, Order.OrderStatus.ACCEPTED, platform_admin)

    def test_agent_must_be_assigned_to_advance(self, place_order, agent, other_agent):
        order = place_order()
        OrderService.accept_order(order.id, agent)

        with pytest.raises(ForbiddenError):
            _advance_to(order, Order.OrderStatus.PREPARING, other_agent)

    def test_deliver_checks_assignee_before_status(self, place_order, agent, other_agent):
        order = place_order()
        OrderService.accept_order(order.id, agent)

        # Not yet out for delivery, but the wrong agent is refused first.
        with pytest.raises(ForbiddenError):
            OrderService.deliver_order(order.id, other_agent)

    def test_deliver_before_dispatch_conflicts(self, place_order, agent):
        order = place_order()
        OrderService.accept_order(order.id, agent)

        with pytest.raises(ConflictError):
            OrderService.deliver_order(order.id, agent)

    def test_reaccept_after_cancel_is_impossible(self, place_order, agent, customer):
        order = place_order(user=customer)
        OrderService.cancel_order(order.id, customer)

        with pytest.raises(ConflictError):
            OrderService.accept_order(order.id, agent)

    def test_delivered_order_is_final(self, place_order, agent, platform_admin):
        order = place_order()
        OrderService.accept_order(order.id, agent)
        _advance_to(order, Order.OrderStatus.OUT_FOR_DELIVERY, agent)
        OrderService.deliver_order(order.id, agent)
        order.refresh_from_db()
        assert order.is_terminal

        with pytest.raises(ConflictError, match="is already DELIVERED"):
            _advance_to(order, Order.OrderStatus.OUT_FOR_DELIVERY, platform_admin)
        with pytest.raises(ConflictError, match="is already DELIVERED"):
            OrderService.cancel_order(order.id, platform_admin)

    def test_cancelled_order_is_final(self, place_order, customer, platform_admin):
        order = place_order(user=customer)
        OrderService.cancel_order(order.id, customer)
        order.refresh_from_db()
        assert order.is_terminal

        with pytest.raises(ConflictError, match="is already CANCELLED"):
            _advance_to(order, Order.OrderStatus.PREPARING, platform_admin)
        order.refresh_from_db()
        assert order.status == Order.OrderStatus.CANCELLED


@pytest.mark.django_db
class TestCancellation:
    """Cancellation windows, ownership and refund flagging."""

    def test_cancel_from_placed(self, place_order, customer):
        order = place_order(user=customer)

        cancelled = OrderService.cancel_order(order.id, customer)

        assert cancelled.status == Order.OrderStatus.CANCELLED
        order.refresh_from_db()
        assert order.cancelled_at is not None

    def test_cancel_from_preparing(self, place_order, agent, platform_admin):
        order = place_order()
        OrderService.accept_order(order.id, agent)
        _advance_to(order, Order.OrderStatus.PREPARING, agent)

        assert OrderService.cancel_order(order.id, platform_admin).status == Order.OrderStatus.CANCELLED

    @pytest.mark.parametrize(
        "path",
        [
            [],
            [Order.OrderStatus.OUT_FOR_DELIVERY],
            [Order.OrderStatus.OUT_FOR_DELIVERY, Order.OrderStatus.DELIVERED],
        ],
    )
    def test_cancel_refused_after_acceptance(self, place_order, agent, platform_admin, path):
        order = place_order()
        OrderService.accept_order(order.id, agent)
        for status in path:
            _advance_to(order, status, agent)

        with pytest.raises(ConflictError):
            OrderService.cancel_order(order.id, platform_admin)

    def test_customer_cannot_cancel_others_order(self, place_order, customer, other_customer):
        order = place_order(user=customer)

        with pytest.raises(ForbiddenError):
            OrderService.cancel_order(order.id, other_customer)

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.PLACED

    def test_cancel_via_advance_status(self, place_order, platform_admin):
        order = place_order()

        assert _advance_to(order, Order.OrderStatus.CANCELLED, platform_admin).status == Order.OrderStatus.CANCELLED

    def test_cancel_flags_latest_payment_for_refund(self, place_order, customer):
        Payment.objects.create(provider_order_id="pi_cancel", amount=Decimal("120.00"))
        order = place_order(user=customer, provider_order_id="pi_cancel")

        OrderService.cancel_order(order.id, customer)

        payment = Payment.objects.get(provider_order_id="pi_cancel")
        assert payment.status == Payment.PaymentStatus.REFUND_REQUESTED


@pytest.mark.django_db
class TestTracking:
    def test_tracking_includes_agent_location(self, place_order, agent):
        from agents.services import AgentLocationService

        order = place_order()
        OrderService.accept_order(order.id, agent)
        AgentLocationService.update_location(agent, Decimal("12.971600"), Decimal("77.594600"), is_available=True)

        tracking = OrderService.get_tracking(order.id)

        assert tracking["order"].id == order.id
        assert tracking["agent_location"]["latitude"] == Decimal("12.971600")
        assert tracking["agent_location"]["updatedAt"] is not None

    def test_tracking_without_agent(self, place_order):
        order = place_order()

        assert OrderService.get_tracking(order.id)["agent_location"] is None
