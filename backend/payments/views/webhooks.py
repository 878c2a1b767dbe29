"""
Webhook views for payment providers.

Stripe calls these endpoints with signed events; the payload is verified,
deduplicated by event id and reconciled against local payment rows.
"""

import json
import logging

import stripe
from django.conf import settings
from django.http import HttpResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework.permissions import AllowAny

from core_backend.exceptions import SignatureError, ValidationError
from payments.services import PaymentWebhookService
from .base import BasePaymentView

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class StripeWebhookView(BasePaymentView):
    """
    Stripe webhook view to handle asynchronous events.

    400 on a missing or invalid signature (nothing is written), 200 for
    processed and replayed events, 500 when processing fails so that Stripe
    retries the delivery.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        payload = request.body
        sig_header = request.META.get("HTTP_STRIPE_SIGNATURE")
        endpoint_secret = settings.STRIPE_WEBHOOK_SECRET

        if not sig_header:
            logger.error("Stripe webhook: Missing signature header")
            raise SignatureError("Missing Stripe-Signature header.")

        try:
            stripe.Webhook.construct_event(payload, sig_header, endpoint_secret)
        except ValueError as e:
            # Invalid payload
            logger.error(f"Stripe webhook: Invalid payload - {e}")
            raise ValidationError("Invalid webhook payload.")
        except stripe.SignatureVerificationError as e:
            # Invalid signature
            logger.error(f"Stripe webhook: Invalid signature - {e}")
            raise SignatureError()

        event = json.loads(payload)
        if not event.get("id"):
            logger.error("Stripe webhook: Event without id")
            raise ValidationError("Webhook event has no id.")

        try:
            processed = PaymentWebhookService.process_event(event, sig_header, payload)
        except Exception as e:
            logger.error(f"Stripe webhook: Failed to process event {event['id']} - {e}", exc_info=True)
            return HttpResponse(status=500)

        if processed:
            logger.info(f"Stripe webhook: Processed event {event['id']} ({event.get('type')})")
        return HttpResponse(status=200)
