import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    """
    Filters for order listings (customer history, agent assignments, board).

    ``status`` accepts a comma-separated list, e.g. ``?status=PREPARING,OUT_FOR_DELIVERY``.
    """

    status = django_filters.CharFilter(method="filter_status")
    restaurant = django_filters.NumberFilter(field_name="restaurant_id")
    created_at__gte = django_filters.DateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_at__lte = django_filters.DateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "restaurant", "created_at__gte", "created_at__lte"]

    def filter_status(self, queryset, name, value):
        statuses = [s.strip().upper() for s in value.split(",") if s.strip()]
        if not statuses:
            return queryset
        return queryset.filter(status__in=statuses)
