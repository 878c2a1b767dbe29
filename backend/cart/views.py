"""
Cart API views. Anonymous callers share the "guest" cart.
"""

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import AddToCartSerializer, CartItemSerializer, UpdateCartItemSerializer
from .services import CartService


class CartView(APIView):
    """
    GET    /api/cart/  - current cart lines and subtotal
    POST   /api/cart/  - add a line
    DELETE /api/cart/  - clear the cart
    """

    permission_classes = [AllowAny]

    def _cart_response(self, owner_key, response_status=status.HTTP_200_OK):
        items = CartService.get_items(owner_key)
        return Response(
            {
                "items": CartItemSerializer(items, many=True).data,
                "subtotal": str(CartService.get_subtotal(owner_key)),
            },
            status=response_status,
        )

    def get(self, request, *args, **kwargs):
        return self._cart_response(CartService.owner_key_for(request.user))

    def post(self, request, *args, **kwargs):
        serializer = AddToCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        owner_key = CartService.owner_key_for(request.user)
        CartService.add_item(owner_key=owner_key, **serializer.validated_data)
        return self._cart_response(owner_key, status.HTTP_201_CREATED)

    def delete(self, request, *args, **kwargs):
        CartService.clear(CartService.owner_key_for(request.user))
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartItemView(APIView):
    """
    PUT    /api/cart/items/<id>/  - set a line's quantity; 0 removes it
    DELETE /api/cart/items/<id>/  - remove a line
    """

    permission_classes = [AllowAny]

    def put(self, request, item_id, *args, **kwargs):
        serializer = UpdateCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = CartService.update_qty(
            CartService.owner_key_for(request.user), item_id, serializer.validated_data["qty"]
        )
        if item is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(CartItemSerializer(item).data)

    def delete(self, request, item_id, *args, **kwargs):
        CartService.remove_item(CartService.owner_key_for(request.user), item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartCountView(APIView):
    """GET /api/cart/count/ - number of lines, for the cart badge."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        return Response({"count": CartService.count(CartService.owner_key_for(request.user))})
