from decimal import Decimal

from rest_framework import serializers

from .models import CartItem


class CartItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = ["id", "menu_item_id", "name", "price", "qty", "line_total"]


class AddToCartSerializer(serializers.Serializer):
    menu_item_id = serializers.IntegerField()
    name = serializers.CharField(max_length=200)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    qty = serializers.IntegerField(min_value=1, default=1)


class UpdateCartItemSerializer(serializers.Serializer):
    qty = serializers.IntegerField(min_value=0)
