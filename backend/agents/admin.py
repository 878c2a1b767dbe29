from django.contrib import admin

from .models import AgentOrderAssignment, AgentProfile


@admin.register(AgentProfile)
class AgentProfileAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "is_available",
        "current_latitude",
        "current_longitude",
        "last_location_update",
        "vehicle_type",
    )
    list_filter = ("is_available", "vehicle_type")
    search_fields = ("user__email", "user__full_name", "vehicle_number")
    readonly_fields = ("last_location_update",)


@admin.register(AgentOrderAssignment)
class AgentOrderAssignmentAdmin(admin.ModelAdmin):
    """The assignment log is append-only; it is browsable but not editable."""

    list_display = ("order", "agent", "status", "assigned_at", "picked_up_at", "delivered_at")
    list_filter = ("status",)
    search_fields = ("order__id", "agent__email")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
