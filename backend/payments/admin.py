from django.contrib import admin

from .models import Payment, PaymentWebhookEvent


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin view for the Payment model.
    """

    list_display = (
        "id",
        "order",
        "provider",
        "provider_order_id",
        "provider_payment_id",
        "amount",
        "currency",
        "status",
        "created_at",
    )
    list_filter = ("status", "provider", "created_at")
    search_fields = ("id", "order__id", "provider_order_id", "provider_payment_id")
    readonly_fields = ("id", "created_at", "updated_at")


@admin.register(PaymentWebhookEvent)
class PaymentWebhookEventAdmin(admin.ModelAdmin):
    list_display = ("event_id", "event_type", "received_at")
    list_filter = ("event_type",)
    search_fields = ("event_id",)
    readonly_fields = ("event_id", "event_type", "signature", "payload_sha256", "received_at")

    def has_add_permission(self, request):
        return False
