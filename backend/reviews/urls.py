from django.urls import path

from .views import MenuItemReviewsView, RestaurantReviewsView

app_name = "reviews"

urlpatterns = [
    path("menu/<int:menu_item_id>/", MenuItemReviewsView.as_view(), name="menu-item-reviews"),
    path("restaurant/<int:restaurant_id>/", RestaurantReviewsView.as_view(), name="restaurant-reviews"),
]
