from .calculation_service import OrderCalculationService, OrderTotals
from .notification_service import (
    OrderUpdateBroadcaster,
    Subscription,
    order_update_broadcaster,
)
from .order_service import OrderService
from .stats_service import OrderStatsService

__all__ = [
    "OrderCalculationService",
    "OrderTotals",
    "OrderUpdateBroadcaster",
    "Subscription",
    "order_update_broadcaster",
    "OrderService",
    "OrderStatsService",
]
