# config/asgi.py

import os
from django.core.asgi import get_asgi_application
from channels.routing import ProtocolTypeRouter, URLRouter
from channels.security.websocket import AllowedHostsOriginValidator

# Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

# Load Django before importing anything that touches models
django_asgi_app = get_asgi_application()

from apps.board.routing import websocket_urlpatterns  # noqa: E402
from apps.core.middleware import JWTAuthMiddleware  # noqa: E402

# ASGI configuration
application = ProtocolTypeRouter({
    # Plain HTTP (REST API, admin)
    "http": django_asgi_app,

    # WebSocket authenticated by the JWT access token
    "websocket": AllowedHostsOriginValidator(
        JWTAuthMiddleware(
            URLRouter(websocket_urlpatterns)
        )
    ),
})
