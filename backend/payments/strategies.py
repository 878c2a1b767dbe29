from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import stripe
from django.conf import settings

from core_backend.exceptions import ProviderError
from .money import to_minor
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutSession:
    provider_order_id: str
    client_secret: Optional[str]
    amount_minor: int
    currency: str


class PaymentProviderStrategy(ABC):
    """
    The Abstract Base Class for a payment provider.
    Wraps the provider SDK calls the reconciliation flow needs.
    """

    @abstractmethod
    def create_checkout(
        self, amount: Decimal, currency: str, receipt: Optional[str] = None
    ) -> CheckoutSession:
        """Create the provider-side order the client pays against."""

    @abstractmethod
    def refund(self, provider_payment_id: str, amount: Decimal, currency: str) -> str:
        """Refund a captured payment and return the provider refund id."""


class StripePaymentStrategy(PaymentProviderStrategy):
    """
    Stripe online payments. The PaymentIntent id is the provider order id
    and the charge id is the provider payment id.
    """

    def __init__(self):
        stripe.api_key = settings.STRIPE_SECRET_KEY

    def create_checkout(self, amount, currency, receipt=None):
        amount_minor = to_minor(currency, amount)
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_minor,
                currency=currency.lower(),
                automatic_payment_methods={"enabled": True},
                metadata={"receipt": receipt or ""},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe PaymentIntent creation failed: {e}", exc_info=True)
            raise ProviderError(f"Could not create checkout: {e}") from e

        return CheckoutSession(
            provider_order_id=intent.id,
            client_secret=intent.client_secret,
            amount_minor=amount_minor,
            currency=currency.upper(),
        )

    def refund(self, provider_payment_id, amount, currency):
        try:
            refund = stripe.Refund.create(
                charge=provider_payment_id,
                amount=to_minor(currency, amount),
            )
        except stripe.StripeError as e:
            logger.error(
                f"Stripe refund failed for charge {provider_payment_id}: {e}", exc_info=True
            )
            raise ProviderError(f"Refund failed: {e}") from e
        return refund.id
