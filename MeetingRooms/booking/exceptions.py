"""
Booking errors.

Services raise these; the API layer turns them into ``{"message": ...}``
responses with the matching status code.
"""


class BookingError(Exception):
    """Base class for all booking service errors"""

    status_code = 500
    default_message = 'An unexpected error occurred.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BookingError):
    """Missing or malformed input"""
    status_code = 400
    default_message = 'Invalid request.'


class NotFoundError(BookingError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(BookingError):
    """Requested interval is not available"""
    status_code = 409
    default_message = 'Time slot is already booked'


class ConstraintError(BookingError):
    """Operation blocked by dependent records"""
    status_code = 400
    default_message = 'Operation blocked by dependent records'


class AuthenticationError(BookingError):
    status_code = 401
    default_message = 'Authentication credentials were not provided or are invalid.'


class PermissionDeniedError(BookingError):
    status_code = 403
    default_message = 'You do not have permission to perform this action.'


class MethodNotAllowedError(BookingError):
    status_code = 405
    default_message = 'Method not allowed'
