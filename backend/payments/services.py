import hashlib
import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.db import transaction

from core_backend.exceptions import ConflictError, NotFoundError, ProviderError, ValidationError
from orders.models import Order
from .factories import PaymentStrategyFactory
from .models import Payment, PaymentWebhookEvent
from .money import from_minor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefundResult:
    status: str
    refund_id: Optional[str] = None

    @property
    def deferred(self) -> bool:
        return self.refund_id is None


class PaymentService:
    """
    Payment reconciliation: checkout, order linking and refunds.

    A payment row is created at checkout, linked to an order when the order
    is placed, and moved forward by webhooks or refunds.
    """

    @staticmethod
    @transaction.atomic
    def create_checkout_payment(amount_minor: int, currency: str = None, receipt: str = None):
        """
        Create the provider checkout and its local CREATED payment row.

        Returns ``(payment, session)``.
        """
        if amount_minor <= 0:
            raise ValidationError("Amount must be greater than 0.")

        currency = (currency or settings.PAYMENT_CURRENCY).upper()
        amount = from_minor(currency, amount_minor)

        strategy = PaymentStrategyFactory.get_strategy()
        session = strategy.create_checkout(amount, currency, receipt=receipt)

        payment = Payment.objects.create(
            provider=Payment.Provider.STRIPE,
            provider_order_id=session.provider_order_id,
            status=Payment.PaymentStatus.CREATED,
            amount=amount,
            currency=currency,
        )
        logger.info(f"Created payment {payment.id} for checkout {session.provider_order_id}")
        return payment, session

    @staticmethod
    def link_to_order(provider_order_id: str, order: Order) -> Optional[Payment]:
        """
        Attach the checkout payment to a newly placed order and mark it
        AUTHORIZED. Unknown provider order ids, and payments that are already
        linked or past CREATED, are left alone.
        """
        payment = (
            Payment.objects.select_for_update()
            .filter(provider_order_id=provider_order_id)
            .first()
        )
        if payment is None:
            logger.warning(
                f"No payment found for provider order {provider_order_id}; order {order.id} left unlinked"
            )
            return None
        if payment.order_id is not None or payment.status != Payment.PaymentStatus.CREATED:
            logger.warning(
                f"Payment {payment.id} for provider order {provider_order_id} is {payment.status} "
                f"and already linked to order {payment.order_id}; order {order.id} left unlinked"
            )
            return None

        payment.order = order
        payment.status = Payment.PaymentStatus.AUTHORIZED
        payment.save(update_fields=["order", "status", "updated_at"])
        logger.info(f"Linked payment {payment.id} to order {order.id}")
        return payment

    @staticmethod
    def latest_for_order(order) -> Optional[Payment]:
        return Payment.objects.filter(order=order).order_by("-created_at").first()

    @staticmethod
    def mark_refund_requested(order) -> Optional[Payment]:
        """Flag the order's latest payment for refund, used when an order is cancelled."""
        payment = PaymentService.latest_for_order(order)
        if payment is None or payment.status == Payment.PaymentStatus.REFUNDED:
            return payment
        payment.status = Payment.PaymentStatus.REFUND_REQUESTED
        payment.save(update_fields=["status", "updated_at"])
        logger.info(f"Payment {payment.id} marked REFUND_REQUESTED for order {order.id}")
        return payment

    @staticmethod
    @transaction.atomic
    def refund_order(order_id) -> RefundResult:
        """
        Refund the latest payment of an order.

        Without a provider payment id the refund is deferred until a webhook
        delivers one; otherwise the full amount is refunded with the provider.
        An already refunded payment raises ConflictError.
        Provider failures raise ProviderError and leave the payment unchanged.
        """
        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            raise NotFoundError("Order not found.")

        payment = PaymentService.latest_for_order(order)
        if payment is None:
            raise NotFoundError("No payment found for this order.")

        if payment.status == Payment.PaymentStatus.REFUNDED:
            raise ConflictError("Payment has already been refunded.")

        if not payment.provider_payment_id:
            payment.status = Payment.PaymentStatus.REFUND_REQUESTED
            payment.save(update_fields=["status", "updated_at"])
            logger.info(f"Refund for payment {payment.id} deferred until a payment id is known")
            return RefundResult(status=payment.status)

        refund_id = PaymentService._refund_with_provider(payment)
        return RefundResult(status=payment.status, refund_id=refund_id)

    @staticmethod
    def _refund_with_provider(payment: Payment) -> str:
        strategy = PaymentStrategyFactory.get_strategy(payment.provider)
        refund_id = strategy.refund(payment.provider_payment_id, payment.amount, payment.currency)
        payment.status = Payment.PaymentStatus.REFUNDED
        payment.save(update_fields=["status", "updated_at"])
        logger.info(f"Payment {payment.id} refunded with provider refund {refund_id}")
        return refund_id


class PaymentWebhookService:
    """
    Applies verified provider webhook events to payment rows.

    Events are deduplicated by event id. The dedup record and every
    sub-event run in one transaction; a failing sub-event is logged and
    rolled back on its own savepoint without failing the event.
    """

    # Stripe charge.status -> local status
    CHARGE_STATUS_MAP = {
        "succeeded": Payment.PaymentStatus.CAPTURED,
        "pending": Payment.PaymentStatus.AUTHORIZED,
        "failed": Payment.PaymentStatus.FAILED,
    }

    # Stripe payment_intent.status -> local status
    INTENT_STATUS_MAP = {
        "succeeded": Payment.PaymentStatus.CAPTURED,
        "requires_capture": Payment.PaymentStatus.AUTHORIZED,
        "canceled": Payment.PaymentStatus.FAILED,
    }

    @staticmethod
    def payload_digest(payload: bytes) -> str:
        return hashlib.sha256(payload).hexdigest()

    @staticmethod
    def process_event(event: dict, signature: str, payload: bytes) -> bool:
        """
        Record and apply an event. Returns False for an already-seen event id.
        """
        event_id = event["id"]
        event_type = event.get("type", "")

        with transaction.atomic():
            _, created = PaymentWebhookEvent.objects.get_or_create(
                event_id=event_id,
                defaults={
                    "event_type": event_type,
                    "signature": signature,
                    "payload_sha256": PaymentWebhookService.payload_digest(payload),
                },
            )
            if not created:
                logger.info(f"Webhook event {event_id} already processed; skipping")
                return False

            data_object = (event.get("data") or {}).get("object") or {}
            if event_type.startswith("charge."):
                PaymentWebhookService._run_sub_handler(
                    PaymentWebhookService.reconcile_charge, data_object, event_id
                )
            elif event_type.startswith("payment_intent."):
                PaymentWebhookService._run_sub_handler(
                    PaymentWebhookService.reconcile_payment_intent,
                    data_object,
                    event_id,
                    event_type,
                )
            else:
                logger.debug(f"Unhandled webhook event type {event_type}")

        return True

    @staticmethod
    def _run_sub_handler(handler, data_object, event_id, *args):
        label = getattr(handler, "__name__", repr(handler))
        try:
            with transaction.atomic():
                handler(data_object, *args)
        except Exception as e:
            logger.warning(
                f"Webhook event {event_id}: {label} failed: {e}", exc_info=True
            )

    @staticmethod
    def _find_payment(provider_order_id, provider_payment_id=None) -> Optional[Payment]:
        payment = None
        if provider_order_id:
            payment = (
                Payment.objects.select_for_update()
                .filter(provider_order_id=provider_order_id)
                .first()
            )
        if payment is None and provider_payment_id:
            payment = (
                Payment.objects.select_for_update()
                .filter(provider_payment_id=provider_payment_id)
                .first()
            )
        return payment

    @staticmethod
    def reconcile_charge(charge: dict) -> Optional[Payment]:
        """Payment entity: a Stripe charge."""
        provider_order_id = charge.get("payment_intent")
        provider_payment_id = charge.get("id")
        payment = PaymentWebhookService._find_payment(provider_order_id, provider_payment_id)
        if payment is None:
            logger.warning(
                f"Webhook charge {provider_payment_id}: no payment for provider order {provider_order_id}"
            )
            return None

        if charge.get("refunded"):
            new_status = Payment.PaymentStatus.REFUNDED
        else:
            new_status = PaymentWebhookService.CHARGE_STATUS_MAP.get(charge.get("status"))

        return PaymentWebhookService._apply(payment, new_status, provider_payment_id)

    @staticmethod
    def reconcile_payment_intent(intent: dict, event_type: str = "") -> Optional[Payment]:
        """Order entity: a Stripe PaymentIntent."""
        provider_order_id = intent.get("id")
        provider_payment_id = intent.get("latest_charge")
        payment = PaymentWebhookService._find_payment(provider_order_id)
        if payment is None:
            logger.warning(f"Webhook payment intent {provider_order_id}: no matching payment")
            return None

        if event_type == "payment_intent.payment_failed":
            new_status = Payment.PaymentStatus.FAILED
        else:
            new_status = PaymentWebhookService.INTENT_STATUS_MAP.get(intent.get("status"))

        return PaymentWebhookService._apply(payment, new_status, provider_payment_id)

    @staticmethod
    def _apply(payment: Payment, new_status, provider_payment_id) -> Payment:
        if provider_payment_id and not payment.provider_payment_id:
            payment.provider_payment_id = provider_payment_id

        old_status = payment.status
        if old_status == Payment.PaymentStatus.REFUNDED:
            # Terminal; only the payment id may still be filled in.
            payment.save(update_fields=["provider_payment_id", "updated_at"])
            return payment

        if old_status == Payment.PaymentStatus.REFUND_REQUESTED and new_status != Payment.PaymentStatus.REFUNDED:
            payment.save(update_fields=["provider_payment_id", "updated_at"])
            if payment.provider_payment_id:
                logger.info(f"Completing deferred refund for payment {payment.id}")
                try:
                    with transaction.atomic():
                        PaymentService._refund_with_provider(payment)
                except ProviderError:
                    logger.error(f"Deferred refund for payment {payment.id} failed; still REFUND_REQUESTED")
            return payment

        if new_status:
            payment.status = new_status
        payment.save(update_fields=["status", "provider_payment_id", "updated_at"])
        if new_status and new_status != old_status:
            logger.info(f"Payment {payment.id}: {old_status} -> {new_status} via webhook")
        return payment
