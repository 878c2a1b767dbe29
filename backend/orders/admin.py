from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("menu_item_id", "name", "price", "qty", "get_line_total")
    fields = ("menu_item_id", "name", "price", "qty", "get_line_total")
    can_delete = False

    def get_line_total(self, obj):
        return f"{obj.line_total:,.2f}"

    get_line_total.short_description = "Line Total"

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Order model.

    Orders are read-only here: status changes go through the lifecycle
    API so the transition table and live updates stay authoritative.
    """

    list_display = (
        "id",
        "customer",
        "restaurant",
        "assigned_agent",
        "status",
        "total",
        "created_at",
    )
    search_fields = (
        "id",
        "customer__email",
        "assigned_agent__email",
        "coupon_code",
        "ship_name",
    )
    list_filter = ("status", "restaurant", "created_at")
    inlines = [OrderItemInline]

    fieldsets = (
        (
            "Order Overview",
            {"fields": ("id", "customer", "restaurant", "assigned_agent", "status")},
        ),
        (
            "Financial Summary",
            {
                "fields": ("subtotal", "discount", "coupon_code", "delivery_fee", "tax", "total"),
            },
        ),
        (
            "Shipping",
            {
                "classes": ("collapse",),
                "fields": (
                    "ship_name",
                    "ship_phone",
                    "ship_line1",
                    "ship_line2",
                    "ship_city",
                    "ship_state",
                    "ship_postal",
                    "ship_country",
                ),
            },
        ),
        (
            "Timestamps",
            {
                "classes": ("collapse",),
                "fields": (
                    "placed_at",
                    "preparing_at",
                    "dispatched_at",
                    "delivered_at",
                    "cancelled_at",
                    "created_at",
                    "updated_at",
                ),
            },
        ),
    )

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in Order._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
