import logging

from core_backend.exceptions import NotFoundError, UnauthorizedError, ValidationError
from restaurants.models import Restaurant
from .models import Review

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class ReviewService:
    @staticmethod
    def list_for_menu_item(menu_item_id):
        return Review.objects.filter(menu_item_id=menu_item_id).order_by("-created_at")

    @staticmethod
    def list_for_restaurant(restaurant_id):
        return Review.objects.filter(restaurant_id=restaurant_id).order_by("-created_at")

    @staticmethod
    def create_review(user, rating, comment="", menu_item_id=None, restaurant_id=None) -> Review:
        """Rate a menu item or a restaurant. Anonymous callers are rejected."""
        if user is None or not user.is_authenticated:
            raise UnauthorizedError()
        if rating is None or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}.")

        restaurant = None
        if restaurant_id is not None:
            restaurant = Restaurant.objects.filter(pk=restaurant_id).first()
            if restaurant is None:
                raise NotFoundError("Restaurant not found.")

        review = Review.objects.create(
            user=user,
            restaurant=restaurant,
            menu_item_id=menu_item_id,
            rating=rating,
            comment=comment or "",
        )
        logger.info(f"Review {review.pk} ({rating}/5) created by {user.email}")
        return review
