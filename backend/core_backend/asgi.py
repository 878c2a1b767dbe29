"""
ASGI entry point: HTTP goes to Django, WebSockets to the order updates consumer.
"""

import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core_backend.settings")

# Models must be loadable before the routing modules are imported
django.setup()

from channels.auth import AuthMiddlewareStack
from channels.routing import ProtocolTypeRouter, URLRouter
from django.core.asgi import get_asgi_application

from orders.routing import websocket_urlpatterns

application = ProtocolTypeRouter(
    {
        "http": get_asgi_application(),
        "websocket": AuthMiddlewareStack(URLRouter(websocket_urlpatterns)),
    }
)
