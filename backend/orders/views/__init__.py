"""
Orders views package - modular view layer with mixins.
"""

from .order_viewset import OrderViewSet
from .stats_views import GmvPerDayView, OrdersPerDayView, OwnerSummaryView, TopRestaurantsView
from .stream_view import OrderUpdatesStreamView

__all__ = [
    "OrderViewSet",
    "OrderUpdatesStreamView",
    "OrdersPerDayView",
    "GmvPerDayView",
    "TopRestaurantsView",
    "OwnerSummaryView",
]
