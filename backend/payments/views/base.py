"""
Base classes and utilities for payment views.
"""

import logging

from rest_framework.views import APIView

from core_backend.exceptions import NotFoundError
from orders.models import Order

logger = logging.getLogger(__name__)


class BasePaymentView(APIView):
    """
    Base class for all payment views.

    Errors are logged with the view name before the project exception
    handler renders them: provider failures at ERROR, rejected requests
    at WARNING.
    """

    def handle_exception(self, exc):
        status_code = getattr(exc, "status_code", 500)
        if status_code >= 500:
            logger.error(f"Payment view error in {self.__class__.__name__}: {exc}")
        else:
            logger.warning(f"Payment request rejected in {self.__class__.__name__}: {exc}")
        return super().handle_exception(exc)

    def get_order_or_404(self, order_id) -> Order:
        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            raise NotFoundError("Order not found.")
        return order
