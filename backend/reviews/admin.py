from django.contrib import admin

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "restaurant", "menu_item_id", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("user__email", "comment")
