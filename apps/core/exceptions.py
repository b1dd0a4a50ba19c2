# apps/core/exceptions.py

"""
API error taxonomy

Raised anywhere below a view and turned into a JSON response by
ApiExceptionMiddleware.
"""


class ApiError(Exception):
    """Base error surfaced to the API caller as status + message"""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def as_dict(self):
        data = {'message': self.message}
        if self.errors:
            data['errors'] = self.errors
        return data


class ValidationError(ApiError):
    status_code = 400
    default_message = 'Invalid input data'


class AuthenticationError(ApiError):
    status_code = 401
    default_message = 'Authentication required'


class AuthorizationError(ApiError):
    status_code = 403
    default_message = 'Access denied'


class NotFoundError(ApiError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(ApiError):
    status_code = 409
    default_message = 'Conflict'
