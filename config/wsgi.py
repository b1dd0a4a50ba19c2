# config/wsgi.py

import os
from django.core.wsgi import get_wsgi_application

# Default settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.production')

# WSGI application (HTTP only; WebSockets need the ASGI entry point)
application = get_wsgi_application()
