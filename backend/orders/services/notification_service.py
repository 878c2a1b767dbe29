import logging
import threading
from collections import deque
from typing import Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import transaction

logger = logging.getLogger(__name__)

CONNECTED_EVENT = "connected"
ORDERS_UPDATE_EVENT = "orders:update"
ORDERS_UPDATE_DATA = "changed"


class SubscriptionClosed(Exception):
    pass


class Subscription:
    """
    One live-update subscriber: a bounded buffer of pending events.

    When the buffer is full the oldest pending event is dropped.
    """

    def __init__(self, maxsize: int):
        self._events = deque(maxlen=maxsize)
        self._condition = threading.Condition()
        self.closed = False

    def deliver(self, event: str, data: str):
        with self._condition:
            if self.closed:
                raise SubscriptionClosed()
            self._events.append((event, data))
            self._condition.notify_all()

    def get(self, timeout: Optional[float] = None):
        """Next pending ``(event, data)``; None on timeout or once closed."""
        with self._condition:
            self._condition.wait_for(lambda: self._events or self.closed, timeout)
            if self._events:
                return self._events.popleft()
            return None

    def pending(self) -> int:
        with self._condition:
            return len(self._events)

    def close(self):
        with self._condition:
            self.closed = True
            self._condition.notify_all()


class OrderUpdateBroadcaster:
    """
    Singleton fan-out notifier for order changes.

    Every lifecycle mutation publishes a payload-free "orders:update" event
    to each current subscriber and to the Channels group used by WebSocket
    clients. Delivery is best-effort and there is no replay.
    """

    _instance = None
    _instance_lock = threading.Lock()

    def __new__(cls):
        with cls._instance_lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._subscribers = set()
                instance._lock = threading.Lock()
                cls._instance = instance
        return cls._instance

    def subscribe(self, maxsize: int = None) -> Subscription:
        subscription = Subscription(maxsize or settings.LIVE_UPDATES_BUFFER_SIZE)
        with self._lock:
            self._subscribers.add(subscription)
        logger.debug(f"Live update subscriber added ({self.subscriber_count} active)")
        return subscription

    def unsubscribe(self, subscription: Subscription):
        subscription.close()
        with self._lock:
            self._subscribers.discard(subscription)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self):
        with self._lock:
            snapshot = list(self._subscribers)

        for subscription in snapshot:
            try:
                subscription.deliver(ORDERS_UPDATE_EVENT, ORDERS_UPDATE_DATA)
            except Exception as e:
                logger.warning(f"Dropping live update subscriber after failed delivery: {e}")
                self.unsubscribe(subscription)

        self._forward_to_channel_layer()

    def publish_on_commit(self):
        """Publish once the surrounding transaction commits (immediately outside one)."""
        transaction.on_commit(self.publish)

    def _forward_to_channel_layer(self):
        channel_layer = get_channel_layer()
        if not channel_layer:
            logger.warning("Channel layer not available. Cannot broadcast order update.")
            return
        try:
            async_to_sync(channel_layer.group_send)(
                settings.LIVE_UPDATES_GROUP, {"type": "orders.update"}
            )
        except Exception as e:
            logger.warning(f"Order update broadcast to channel layer failed: {e}")

    def reset(self):
        """Close and forget every subscriber."""
        with self._lock:
            snapshot = list(self._subscribers)
            self._subscribers.clear()
        for subscription in snapshot:
            subscription.close()


# Create a single, globally accessible instance of the service.
order_update_broadcaster = OrderUpdateBroadcaster()
