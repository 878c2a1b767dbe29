from decimal import Decimal

from rest_framework import serializers

from .models import Dispute


class DisputeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Dispute
        fields = [
            "id",
            "order",
            "customer",
            "restaurant",
            "type",
            "status",
            "subject",
            "description",
            "admin_response",
            "resolved_by",
            "refund_amount",
            "created_at",
            "updated_at",
            "resolved_at",
        ]
        read_only_fields = fields


class CreateDisputeSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    type = serializers.ChoiceField(choices=Dispute.DisputeType.choices)
    subject = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class ResolveDisputeSerializer(serializers.Serializer):
    approved = serializers.BooleanField()
    response = serializers.CharField(required=False, allow_blank=True, default="")
    refund_amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        allow_null=True,
    )


class UpdateDisputeStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=20)
