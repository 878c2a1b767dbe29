from django.contrib import admin

from .models import Dispute


@admin.register(Dispute)
class DisputeAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "customer", "type", "status", "refund_amount", "created_at")
    list_filter = ("status", "type", "created_at")
    search_fields = ("id", "order__id", "customer__email", "subject")
    readonly_fields = ("order", "customer", "restaurant", "created_at", "updated_at", "resolved_at")
