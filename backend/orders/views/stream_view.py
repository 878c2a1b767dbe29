import logging

from django.conf import settings
from django.http import StreamingHttpResponse
from rest_framework.permissions import AllowAny
from rest_framework.renderers import BaseRenderer
from rest_framework.views import APIView

from orders.services import order_update_broadcaster
from orders.services.notification_service import CONNECTED_EVENT

logger = logging.getLogger(__name__)

CONNECTED_DATA = "SSE connection established"


class EventStreamRenderer(BaseRenderer):
    media_type = "text/event-stream"
    format = "event-stream"
    charset = "utf-8"

    def render(self, data, accepted_media_type=None, renderer_context=None):
        return data


def format_event(event: str, data: str) -> str:
    return f"event: {event}\ndata: {data}\n\n"


class OrderUpdatesStreamView(APIView):
    """
    GET /api/orders/stream/

    Server-Sent Events feed of order changes. Sends ``connected`` once, then
    an ``orders:update`` event (data ``changed``) after every lifecycle
    mutation. The stream ends after LIVE_UPDATES_IDLE_TIMEOUT seconds
    without events.
    """

    permission_classes = [AllowAny]
    renderer_classes = [EventStreamRenderer]

    def get(self, request, *args, **kwargs):
        response = StreamingHttpResponse(
            self._event_stream(), content_type="text/event-stream"
        )
        response["Cache-Control"] = "no-cache"
        response["X-Accel-Buffering"] = "no"
        return response

    def _event_stream(self):
        subscription = order_update_broadcaster.subscribe()
        logger.info("SSE client connected")
        try:
            yield format_event(CONNECTED_EVENT, CONNECTED_DATA)
            while True:
                message = subscription.get(timeout=settings.LIVE_UPDATES_IDLE_TIMEOUT)
                if message is None:
                    logger.info("SSE client idle timeout reached")
                    break
                event, data = message
                yield format_event(event, data)
        finally:
            order_update_broadcaster.unsubscribe(subscription)
            logger.info("SSE client disconnected")
