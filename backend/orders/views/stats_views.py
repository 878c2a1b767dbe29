from rest_framework.response import Response
from rest_framework.views import APIView

from orders.services import OrderStatsService
from users.permissions import IsAdminRole, IsOwnerOrAdmin


def _as_float(values):
    return [float(value) for value in values]


class OrdersPerDayView(APIView):
    """GET /api/admin/stats/orders-per-day/ - order counts for the last 7 days."""

    permission_classes = [IsAdminRole]

    def get(self, request, *args, **kwargs):
        return Response(OrderStatsService.orders_per_day())


class GmvPerDayView(APIView):
    """GET /api/admin/stats/gmv-per-day/ - gross merchandise value for the last 7 days."""

    permission_classes = [IsAdminRole]

    def get(self, request, *args, **kwargs):
        series = OrderStatsService.gmv_per_day()
        return Response({"labels": series["labels"], "values": _as_float(series["values"])})


class TopRestaurantsView(APIView):
    """GET /api/admin/stats/top-restaurants/ - five restaurants with the highest GMV."""

    permission_classes = [IsAdminRole]

    def get(self, request, *args, **kwargs):
        rows = OrderStatsService.top_restaurants()
        return Response([{**row, "value": float(row["value"])} for row in rows])


class OwnerSummaryView(APIView):
    """GET /api/owner/summary/ - today's figures for the owner's restaurants."""

    permission_classes = [IsOwnerOrAdmin]

    def get(self, request, *args, **kwargs):
        summary = OrderStatsService.owner_summary(request.user)
        summary["revenue_today"] = float(summary["revenue_today"])
        return Response(summary)
