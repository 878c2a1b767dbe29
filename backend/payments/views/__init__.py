"""
Payment views package.

This package organizes payment views by flow:
- checkout.py: provider checkout creation before an order exists
- refunds.py: order refunds and payment status
- webhooks.py: Provider webhook handlers
- base.py: Shared utilities and base classes
"""

from .base import BasePaymentView
from .checkout import CreateCheckoutView
from .refunds import OrderPaymentStatusView, RefundOrderView
from .webhooks import StripeWebhookView

__all__ = [
    "BasePaymentView",
    "CreateCheckoutView",
    "RefundOrderView",
    "OrderPaymentStatusView",
    "StripeWebhookView",
]
