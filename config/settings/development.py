# config/settings/development.py

from .base import *

# === DEVELOPMENT ===

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# === DATABASE ===

# PostgreSQL by default (same as production)
# Use DATABASE_URL when provided, otherwise the individual variables
if env('DATABASE_URL', default=None):
    import dj_database_url

    DATABASES['default'] = dj_database_url.parse(env('DATABASE_URL'), conn_max_age=600)
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': env('DB_NAME', default='project_board'),
            'USER': env('DB_USER', default='board_user'),
            'PASSWORD': env('DB_PASSWORD', default='board123'),
            'HOST': env('DB_HOST', default='localhost'),
            'PORT': env('DB_PORT', default='5432'),
            'OPTIONS': {
                'sslmode': 'prefer',
            },
            'CONN_MAX_AGE': 60,
        }
    }

# SQLite fallback only when explicitly requested
if env('USE_SQLITE', cast=bool, default=False):
    print("🔄 Using SQLite for development")
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }
else:
    print(f"🐘 Using PostgreSQL: {DATABASES['default']['NAME']}@{DATABASES['default']['HOST']}")

# One transaction per request
DATABASES['default']['ATOMIC_REQUESTS'] = True

# === MORE VERBOSE LOGGING ===

LOGGING['handlers']['console']['level'] = 'DEBUG'
LOGGING['root']['level'] = 'DEBUG'
LOGGING['loggers']['apps']['level'] = 'DEBUG'

# === CACHE ===

# Simple in-process cache in development (Redis optional)
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'board-dev-cache',
    }
}

# Use Redis when available
if env('REDIS_URL', default=None):
    try:
        import redis

        # Check the Redis connection
        r = redis.from_url(env('REDIS_URL'))
        r.ping()

        CACHES['default'] = {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': env('REDIS_URL'),
            'OPTIONS': {
                'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            }
        }
        print("🔴 Redis connected!")
    except Exception as e:
        print(f"⚠️  Redis unavailable: {e}")
        print("📝 Using local in-memory cache")

# Simplified channel layer for development
CHANNEL_LAYERS = {
    'default': {
        'BACKEND': 'channels.layers.InMemoryChannelLayer'
    }
}

SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

# shell_plus imports
SHELL_PLUS_IMPORTS = [
    'from apps.core.models import *',
    'from apps.core.auth_service import auth_service',
    'from apps.core.project_service import project_service',
]

print("🚀 DEVELOPMENT settings loaded")
print(f"📁 BASE_DIR: {BASE_DIR}")
print(f"🔑 DEBUG: {DEBUG}")
