from django.urls import path, include
from rest_framework import routers

from .views import (
    GmvPerDayView,
    OrderUpdatesStreamView,
    OrderViewSet,
    OrdersPerDayView,
    OwnerSummaryView,
    TopRestaurantsView,
)

app_name = "orders"

router = routers.DefaultRouter()
router.register(r"orders", OrderViewSet, basename="order")

urlpatterns = [
    # Registered ahead of the router so "stream" is never taken for an order id.
    path("orders/stream/", OrderUpdatesStreamView.as_view(), name="order-stream"),
    path("admin/stats/orders-per-day/", OrdersPerDayView.as_view(), name="stats-orders-per-day"),
    path("admin/stats/gmv-per-day/", GmvPerDayView.as_view(), name="stats-gmv-per-day"),
    path("admin/stats/top-restaurants/", TopRestaurantsView.as_view(), name="stats-top-restaurants"),
    path("owner/summary/", OwnerSummaryView.as_view(), name="owner-summary"),
    path("", include(router.urls)),
]
