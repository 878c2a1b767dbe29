from decimal import Decimal

from rest_framework import serializers

from restaurants.models import Restaurant
from .models import Order, OrderItem


class OrderItemInputSerializer(serializers.Serializer):
    id = serializers.IntegerField(source="menu_item_id", required=False, allow_null=True)
    name = serializers.CharField(max_length=200)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    qty = serializers.IntegerField(min_value=1)


class ShippingAddressSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    line1 = serializers.CharField(max_length=255, required=False, allow_blank=True)
    line2 = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    postal = serializers.CharField(max_length=20, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)


class OrderCreateSerializer(serializers.Serializer):
    """
    Request body for placing an order. ``items`` may be omitted, in which
    case the caller's cart is used.
    """

    items = OrderItemInputSerializer(many=True, required=False)
    couponCode = serializers.CharField(
        source="coupon_code", max_length=50, required=False, allow_blank=True, allow_null=True
    )
    shippingAddress = ShippingAddressSerializer(
        source="shipping_address", required=False, allow_null=True
    )
    providerOrderId = serializers.CharField(
        source="provider_order_id", max_length=255, required=False, allow_blank=True, allow_null=True
    )
    restaurantId = serializers.PrimaryKeyRelatedField(
        source="restaurant",
        queryset=Restaurant.objects.filter(is_active=True),
        required=False,
        allow_null=True,
    )


class OrderItemSerializer(serializers.ModelSerializer):
    menuItemId = serializers.IntegerField(source="menu_item_id", read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "menuItemId", "name", "price", "qty"]


class OrderSummarySerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    couponCode = serializers.CharField(source="coupon_code", read_only=True)
    deliveryFee = serializers.DecimalField(
        source="delivery_fee", max_digits=10, decimal_places=2, read_only=True
    )
    restaurantId = serializers.IntegerField(source="restaurant_id", read_only=True)
    assignedAgentId = serializers.IntegerField(source="assigned_agent_id", read_only=True)
    placedAt = serializers.DateTimeField(source="placed_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "status",
            "subtotal",
            "discount",
            "couponCode",
            "deliveryFee",
            "tax",
            "total",
            "restaurantId",
            "assignedAgentId",
            "placedAt",
            "createdAt",
            "items",
        ]
        read_only_fields = fields


class OrderTrackingSerializer(OrderSummarySerializer):
    preparingAt = serializers.DateTimeField(source="preparing_at", read_only=True)
    dispatchedAt = serializers.DateTimeField(source="dispatched_at", read_only=True)
    deliveredAt = serializers.DateTimeField(source="delivered_at", read_only=True)
    cancelledAt = serializers.DateTimeField(source="cancelled_at", read_only=True)
    shippingAddress = serializers.DictField(source="shipping_address", read_only=True)
    agentLocation = serializers.SerializerMethodField()

    class Meta(OrderSummarySerializer.Meta):
        fields = OrderSummarySerializer.Meta.fields + [
            "preparingAt",
            "dispatchedAt",
            "deliveredAt",
            "cancelledAt",
            "shippingAddress",
            "agentLocation",
        ]
        read_only_fields = fields

    def get_agentLocation(self, obj):
        location = self.context.get("agent_location")
        if not location:
            return None
        return {
            "latitude": str(location["latitude"]),
            "longitude": str(location["longitude"]),
            "updatedAt": serializers.DateTimeField().to_representation(location["updatedAt"])
            if location["updatedAt"]
            else None,
        }


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=20)
