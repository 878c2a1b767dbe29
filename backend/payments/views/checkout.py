"""
Checkout creation: the client pays against the returned PaymentIntent and
later places its order with ``providerOrderId``.
"""

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from payments.serializers import CheckoutRequestSerializer
from payments.services import PaymentService
from .base import BasePaymentView


class CreateCheckoutView(BasePaymentView):
    """POST /api/payments/checkout/ - amount in minor units (paise for INR)."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = CheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        payment, session = PaymentService.create_checkout_payment(
            amount_minor=data["amount"],
            currency=data.get("currency"),
            receipt=data.get("receipt"),
        )
        return Response(
            {
                "orderId": session.provider_order_id,
                "amount": session.amount_minor,
                "currency": payment.currency,
                "clientSecret": session.client_secret,
                "publishableKey": settings.STRIPE_PUBLISHABLE_KEY,
            },
            status=status.HTTP_201_CREATED,
        )
