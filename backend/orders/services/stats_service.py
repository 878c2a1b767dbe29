from datetime import datetime, time, timedelta
from decimal import Decimal

from django.db.models import Count, Sum
from django.db.models.functions import Extract, TruncDate
from django.utils import timezone

from orders.models import Order, OrderItem

STATS_WINDOW_DAYS = 7
TOP_RESTAURANTS_LIMIT = 5
TOP_ITEMS_LIMIT = 5


class OrderStatsService:
    """Admin dashboard series over the last week of orders, plus the owner summary."""

    @staticmethod
    def _window_labels(days=STATS_WINDOW_DAYS):
        today = timezone.localdate()
        return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]

    @staticmethod
    def _daily(aggregate, default, days=STATS_WINDOW_DAYS):
        dates = OrderStatsService._window_labels(days)
        start = timezone.make_aware(datetime.combine(dates[0], time.min))
        rows = (
            Order.objects.filter(created_at__gte=start)
            .annotate(day=TruncDate("created_at", tzinfo=timezone.get_current_timezone()))
            .values("day")
            .annotate(value=aggregate)
        )
        by_day = {row["day"]: row["value"] for row in rows}
        return {
            "labels": [day.isoformat() for day in dates],
            "values": [by_day.get(day) or default for day in dates],
        }

    @staticmethod
    def orders_per_day(days=STATS_WINDOW_DAYS) -> dict:
        return OrderStatsService._daily(Count("id"), 0, days)

    @staticmethod
    def gmv_per_day(days=STATS_WINDOW_DAYS) -> dict:
        return OrderStatsService._daily(Sum("total"), Decimal("0.00"), days)

    @staticmethod
    def top_restaurants(limit=TOP_RESTAURANTS_LIMIT) -> list:
        rows = (
            Order.objects.filter(restaurant__isnull=False)
            .values("restaurant_id", "restaurant__name")
            .annotate(gmv=Sum("total"))
            .order_by("-gmv")[:limit]
        )
        return [
            {"id": row["restaurant_id"], "name": row["restaurant__name"], "value": row["gmv"]}
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Owner dashboard
    # ------------------------------------------------------------------

    @staticmethod
    def owner_summary(user) -> dict:
        """
        Today's figures for the owner dashboard.

        Owners see orders of the restaurants they own, admins see every
        order. ``pending_orders`` is not limited to today: it counts every
        order still PLACED or PREPARING. Prep time runs from ``placed_at``
        to ``preparing_at`` and is reported in whole minutes.
        """
        orders = Order.objects.all()
        if not user.is_admin_role:
            orders = orders.filter(restaurant__owner=user)

        start = timezone.make_aware(datetime.combine(timezone.localdate(), time.min))
        today = orders.filter(created_at__gte=start)

        pending = orders.filter(
            status__in=[Order.OrderStatus.PLACED, Order.OrderStatus.PREPARING]
        ).count()
        revenue = today.aggregate(revenue=Sum("total"))["revenue"] or Decimal("0.00")

        prep_times = [
            (preparing_at - placed_at).total_seconds() / 60
            for placed_at, preparing_at in today.filter(
                placed_at__isnull=False, preparing_at__isnull=False
            ).values_list("placed_at", "preparing_at")
        ]
        avg_prep_time = int(sum(prep_times) / len(prep_times)) if prep_times else 0

        top_items = (
            OrderItem.objects.filter(order__in=today)
            .values("name")
            .annotate(count=Sum("qty"))
            .order_by("-count", "name")[:TOP_ITEMS_LIMIT]
        )

        hourly = [0] * 24
        rows = (
            today.annotate(hour=Extract("created_at", "hour"))
            .values("hour")
            .annotate(orders=Count("id"))
            .order_by("hour")
        )
        for row in rows:
            hourly[row["hour"]] = row["orders"]

        return {
            "today_orders": today.count(),
            "pending_orders": pending,
            "revenue_today": revenue,
            "avg_prep_time_minutes": avg_prep_time,
            "top_items": [{"name": row["name"], "count": row["count"]} for row in top_items],
            "hourly_trends": hourly,
        }
