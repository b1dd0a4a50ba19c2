# apps/board/routing.py

from django.urls import re_path
from . import consumers

# WebSocket routes of the board app
websocket_urlpatterns = [
    # Single real-time endpoint; rooms are joined per project over the socket
    re_path(r'^ws/?$', consumers.ProjectEventsConsumer.as_asgi()),
]
