from django.contrib import admin
from .models import CartItem


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("owner_key", "name", "price", "qty", "added_at")
    search_fields = ("owner_key", "name")
