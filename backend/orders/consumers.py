import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.utils import timezone

from .services.notification_service import (
    CONNECTED_EVENT,
    ORDERS_UPDATE_DATA,
    ORDERS_UPDATE_EVENT,
)

logger = logging.getLogger(__name__)


class OrderUpdatesConsumer(AsyncWebsocketConsumer):
    """
    WebSocket counterpart of the SSE order stream.

    Clients receive ``{"event": "connected"}`` on connect and
    ``{"event": "orders:update", "data": "changed"}`` after every order
    change. The only accepted client message is a ``ping``.
    """

    async def connect(self):
        self.group_name = settings.LIVE_UPDATES_GROUP
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send(text_data=json.dumps({"event": CONNECTED_EVENT}))
        logger.info(f"Order updates WebSocket connected: {self.channel_name}")

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.group_name, self.channel_name)
        logger.info(f"Order updates WebSocket disconnected: code={close_code}")

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except json.JSONDecodeError:
            await self.send(text_data=json.dumps({"type": "error", "message": "Invalid JSON format"}))
            return

        if data.get("action") == "ping":
            await self.send(
                text_data=json.dumps({"type": "pong", "timestamp": timezone.now().isoformat()})
            )
        else:
            await self.send(
                text_data=json.dumps(
                    {"type": "error", "message": f"Unknown action: {data.get('action')}"}
                )
            )

    async def orders_update(self, event):
        """Handles the 'orders.update' event from the channel layer."""
        await self.send(
            text_data=json.dumps({"event": ORDERS_UPDATE_EVENT, "data": ORDERS_UPDATE_DATA})
        )
