"""
API error types

Raise these from routes or services; middleware.register_error_handlers turns
them into JSON responses with the matching status code.
"""


class APIError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None, details=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details

    def to_dict(self):
        payload = {'error': self.message}
        if self.details is not None:
            payload['details'] = self.details
        return payload


class ValidationError(APIError):
    status_code = 400
    message = 'Validation error'


class Unauthorized(APIError):
    status_code = 401
    message = 'Not authenticated'


class Forbidden(APIError):
    status_code = 403
    message = 'Forbidden'


class NotFound(APIError):
    status_code = 404
    message = 'Not found'


class Conflict(APIError):
    status_code = 409
    message = 'Conflict'


class NoCreditsAvailable(Conflict):
    message = 'No application credits remaining. Daily credits reset at midnight in your timezone.'


class DuplicateApplication(Conflict):
    message = 'You already have an active application for this job'
