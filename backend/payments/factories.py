from django.conf import settings

from .models import Payment
from .strategies import PaymentProviderStrategy, StripePaymentStrategy


class PaymentStrategyFactory:
    """
    A factory for creating payment provider strategy instances.
    """

    @staticmethod
    def get_strategy(provider: str = None) -> PaymentProviderStrategy:
        provider = (provider or settings.PAYMENT_PROVIDER).upper()
        if provider == Payment.Provider.STRIPE:
            return StripePaymentStrategy()
        raise ValueError(f"Unknown payment provider: {provider}")
