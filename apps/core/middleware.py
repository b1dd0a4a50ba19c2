# apps/core/middleware.py

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import PermissionDenied
from django.http import Http404, JsonResponse

from .auth_service import auth_service
from .exceptions import ApiError, AuthorizationError, NotFoundError
from .utils import get_bearer_token

logger = logging.getLogger(__name__)


class ApiExceptionMiddleware:
    """
    Turns errors raised by API views into JSON responses

    ApiError subclasses carry their own status. Http404 and
    PermissionDenied are mapped to the matching ApiError. Any other
    exception under /api/ becomes a logged 500.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, Http404):
            exception = NotFoundError(str(exception) or None)
        elif isinstance(exception, PermissionDenied):
            exception = AuthorizationError(str(exception) or None)

        if isinstance(exception, ApiError):
            if exception.status_code >= 500:
                logger.error(f"❌ {request.method} {request.path}: {exception.message}")
            else:
                logger.info(f"{request.method} {request.path} -> {exception.status_code} {exception.message}")
            return JsonResponse(exception.as_dict(), status=exception.status_code)

        if request.path.startswith('/api/'):
            logger.exception(f"❌ Unhandled error on {request.method} {request.path}")
            return JsonResponse({'message': 'Internal server error'}, status=500)

        return None  # Let Django handle it


@database_sync_to_async
def get_user_for_token(token):
    """User for a bearer token, AnonymousUser when missing or invalid"""
    if not token:
        return AnonymousUser()

    try:
        return auth_service.authenticate_token(token)
    except ApiError as e:
        logger.info(f"WebSocket token rejected: {e.message}")
        return AnonymousUser()


class JWTAuthMiddleware(BaseMiddleware):
    """
    Channels middleware that authenticates the WebSocket handshake

    The token comes from the `token` query-string parameter (browsers
    cannot set headers on WebSocket) or an Authorization header.
    Sets scope['user'].
    """

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        scope['user'] = await get_user_for_token(self._get_token(scope))
        return await super().__call__(scope, receive, send)

    def _get_token(self, scope):
        query = parse_qs(scope.get('query_string', b'').decode())
        if query.get('token'):
            return query['token'][0]

        headers = dict(scope.get('headers', []))
        authorization = headers.get(b'authorization')
        if authorization:
            return get_bearer_token(authorization.decode())

        return None
