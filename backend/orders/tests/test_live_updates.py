"""
Live update tests.

Covers the subscriber buffer, the broadcaster fan-out, the Server-Sent
Events stream and its WebSocket counterpart.
"""
import pytest
from unittest.mock import patch

from channels.db import database_sync_to_async
from channels.testing import WebsocketCommunicator

from orders.services import Subscription, order_update_broadcaster
from orders.services.notification_service import SubscriptionClosed

CONNECTED_CHUNK = b"event: connected\ndata: SSE connection established\n\n"
UPDATE_CHUNK = b"event: orders:update\ndata: changed\n\n"


# ============================================================================
# SUBSCRIPTION BUFFER
# ============================================================================

class TestSubscription:
    """Bounded per-subscriber buffer."""

    def test_delivers_in_order(self):
        subscription = Subscription(maxsize=4)
        subscription.deliver("a", "1")
        subscription.deliver("b", "2")

        assert subscription.get(timeout=0) == ("a", "1")
        assert subscription.get(timeout=0) == ("b", "2")

    def test_full_buffer_drops_oldest(self):
        subscription = Subscription(maxsize=2)
        for i in range(3):
            subscription.deliver("orders:update", str(i))

        assert subscription.pending() == 2
        assert subscription.get(timeout=0) == ("orders:update", "1")
        assert subscription.get(timeout=0) == ("orders:update", "2")

    def test_get_times_out_with_none(self):
        subscription = Subscription(maxsize=2)
        assert subscription.get(timeout=0.01) is None

    def test_closed_subscription_refuses_delivery(self):
        subscription = Subscription(maxsize=2)
        subscription.close()

        with pytest.raises(SubscriptionClosed):
            subscription.deliver("orders:update", "changed")
        assert subscription.get(timeout=0) is None


# ============================================================================
# BROADCASTER
# ============================================================================

class TestBroadcaster:
    """Fan-out to current subscribers."""

    def test_is_singleton(self):
        from orders.services import OrderUpdateBroadcaster
        assert OrderUpdateBroadcaster() is order_update_broadcaster

    def test_publish_reaches_every_subscriber(self):
        first = order_update_broadcaster.subscribe()
        second = order_update_broadcaster.subscribe()

        order_update_broadcaster.publish()

        assert first.get(timeout=0) == ("orders:update", "changed")
        assert second.get(timeout=0) == ("orders:update", "changed")

    def test_unsubscribed_client_receives_nothing(self):
        subscription = order_update_broadcaster.subscribe()
        order_update_broadcaster.unsubscribe(subscription)

        order_update_broadcaster.publish()

        assert order_update_broadcaster.subscriber_count == 0
        assert subscription.pending() == 0

    def test_failing_subscriber_is_dropped(self):
        healthy = order_update_broadcaster.subscribe()
        broken = order_update_broadcaster.subscribe()

        with patch.object(broken, "deliver", side_effect=RuntimeError("socket gone")):
            order_update_broadcaster.publish()

        assert order_update_broadcaster.subscriber_count == 1
        assert healthy.get(timeout=0) == ("orders:update", "changed")

    @pytest.mark.django_db
    def test_order_creation_publishes_after_commit(
        self, place_order, django_capture_on_commit_callbacks
    ):
        subscription = order_update_broadcaster.subscribe()

        with django_capture_on_commit_callbacks(execute=True):
            place_order()

        assert subscription.get(timeout=0) == ("orders:update", "changed")

    @pytest.mark.django_db
    def test_rolled_back_mutation_publishes_nothing(
        self, place_order, agent, other_agent, django_capture_on_commit_callbacks
    ):
        from core_backend.exceptions import ConflictError
        from orders.services import OrderService

        with django_capture_on_commit_callbacks(execute=True):
            order = place_order()
            OrderService.accept_order(order.id, agent)

        subscription = order_update_broadcaster.subscribe()
        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(ConflictError):
                OrderService.accept_order(order.id, other_agent)

        assert subscription.pending() == 0


# ============================================================================
# SERVER-SENT EVENTS
# ============================================================================

@pytest.mark.django_db
class TestOrderUpdatesStream:
    """GET /api/orders/stream/"""

    def test_stream_headers(self, api_client):
        response = api_client.get("/api/orders/stream/")

        assert response.status_code == 200
        assert response["Content-Type"].startswith("text/event-stream")
        assert response["Cache-Control"] == "no-cache"
        response.close()

    def test_first_event_is_connected(self, api_client):
        response = api_client.get("/api/orders/stream/")
        chunks = iter(response.streaming_content)

        assert next(chunks) == CONNECTED_CHUNK
        assert order_update_broadcaster.subscriber_count == 1
        response.close()

    def test_receives_update_after_publish(self, api_client):
        response = api_client.get("/api/orders/stream/")
        chunks = iter(response.streaming_content)
        next(chunks)

        order_update_broadcaster.publish()

        assert next(chunks) == UPDATE_CHUNK
        response.close()

    def test_close_unsubscribes(self, api_client):
        response = api_client.get("/api/orders/stream/")
        chunks = iter(response.streaming_content)
        next(chunks)

        response.close()

        assert order_update_broadcaster.subscriber_count == 0

    def test_idle_stream_ends(self, api_client, settings):
        settings.LIVE_UPDATES_IDLE_TIMEOUT = 0.01
        response = api_client.get("/api/orders/stream/")

        assert list(response.streaming_content) == [CONNECTED_CHUNK]
        assert order_update_broadcaster.subscriber_count == 0


# ============================================================================
# WEBSOCKET
# ============================================================================

@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
class TestOrderUpdatesWebSocket:
    """ws/orders/updates/"""

    async def test_connect_sends_connected(self):
        from core_backend.asgi import application

        communicator = WebsocketCommunicator(application, "/ws/orders/updates/")
        connected, _ = await communicator.connect()

        assert connected
        assert await communicator.receive_json_from() == {"event": "connected"}
        await communicator.disconnect()

    async def test_receives_update_after_publish(self):
        from core_backend.asgi import application

        communicator = WebsocketCommunicator(application, "/ws/orders/updates/")
        await communicator.connect()
        await communicator.receive_json_from()

        await database_sync_to_async(order_update_broadcaster.publish)()

        message = await communicator.receive_json_from()
        assert message == {"event": "orders:update", "data": "changed"}
        await communicator.disconnect()

    async def test_ping_pong(self):
        from core_backend.asgi import application

        communicator = WebsocketCommunicator(application, "/ws/orders/updates/")
        await communicator.connect()
        await communicator.receive_json_from()

        await communicator.send_json_to({"action": "ping"})
        response = await communicator.receive_json_from()

        assert response["type"] == "pong"
        assert "timestamp" in response
        await communicator.disconnect()

    async def test_invalid_json_reports_error(self):
        from core_backend.asgi import application

        communicator = WebsocketCommunicator(application, "/ws/orders/updates/")
        await communicator.connect()
        await communicator.receive_json_from()

        await communicator.send_to(text_data="not json")
        response = await communicator.receive_json_from()

        assert response == {"type": "error", "message": "Invalid JSON format"}
        await communicator.disconnect()
