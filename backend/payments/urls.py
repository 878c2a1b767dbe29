from django.urls import path

from .views import (
    CreateCheckoutView,
    OrderPaymentStatusView,
    RefundOrderView,
    StripeWebhookView,
)

app_name = "payments"

urlpatterns = [
    path("webhooks/stripe/", StripeWebhookView.as_view(), name="stripe-webhook"),
    path("checkout/", CreateCheckoutView.as_view(), name="checkout"),
    path(
        "orders/<uuid:order_id>/refund/",
        RefundOrderView.as_view(),
        name="order-refund",
    ),
    path(
        "orders/<uuid:order_id>/",
        OrderPaymentStatusView.as_view(),
        name="order-payment",
    ),
]
