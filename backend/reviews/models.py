from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Review(models.Model):
    """A 1..5 star rating of a menu item or a restaurant."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews"
    )
    restaurant = models.ForeignKey(
        "restaurants.Restaurant",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reviews",
    )
    menu_item_id = models.PositiveIntegerField(null=True, blank=True, db_index=True)
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["restaurant", "-created_at"], name="review_restaurant_idx"),
        ]

    def __str__(self):
        target = f"item {self.menu_item_id}" if self.menu_item_id else f"restaurant {self.restaurant_id}"
        return f"{self.rating}/5 for {target}"
