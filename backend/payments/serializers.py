from rest_framework import serializers

from .models import Payment


class CheckoutRequestSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1, help_text="Amount in the currency's minor unit.")
    currency = serializers.CharField(max_length=3, required=False)
    receipt = serializers.CharField(max_length=100, required=False, allow_blank=True)


class PaymentSerializer(serializers.ModelSerializer):
    orderId = serializers.UUIDField(source="order_id", read_only=True)
    providerOrderId = serializers.CharField(source="provider_order_id", read_only=True)
    providerPaymentId = serializers.CharField(source="provider_payment_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "orderId",
            "provider",
            "providerOrderId",
            "providerPaymentId",
            "status",
            "amount",
            "currency",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields
