"""Client-visible error kinds raised by the habit core and its API layer."""


class ApiError(Exception):
    status_code = 400
    default_message = 'Bad request'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'success': False, 'error': self.message}


class InvalidDate(ApiError):
    default_message = 'Invalid date. Use YYYY-MM-DD (UTC).'


class InvalidTimestamp(ApiError):
    default_message = 'Please provide a valid ISO timestamp in UTC for timestamp'


class ValidationError(ApiError):
    default_message = 'Invalid input'

    def __init__(self, message=None, field=None):
        super().__init__(message)
        self.field = field

    def to_dict(self):
        body = super().to_dict()
        if self.field:
            body['field'] = self.field
        return body


class NotFound(ApiError):
    status_code = 404
    default_message = 'Resource not found'


class Unauthorized(ApiError):
    """The resource exists but belongs to another user."""
    status_code = 403
    default_message = 'Not authorized to access this resource'
