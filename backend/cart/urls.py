"""
URL configuration for cart app.
"""

from django.urls import path
from .views import CartCountView, CartItemView, CartView

app_name = "cart"

urlpatterns = [
    path("", CartView.as_view(), name="cart-detail"),
    path("items/<int:item_id>/", CartItemView.as_view(), name="cart-item"),
    path("count/", CartCountView.as_view(), name="cart-count"),
]
