from django.contrib import admin
from .models import Coupon


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ("code", "is_active", "percent_off", "amount_off", "min_amount", "expires_at")
    list_filter = ("is_active",)
    search_fields = ("code",)
