"""
Common exceptions used across the order request and order functions

Each carries the HTTP status its handler decorator responds with.
"""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BusinessLogicError(ApiError):
    """Workflow failures: missing records (404), failed writes (500), bad requests (400)"""
    status_code = 400


class ValidationError(ApiError):
    """Invalid client input, always 400"""
    status_code = 400

    def __init__(self, message, field=None):
        self.field = field
        super().__init__(message)


class PermissionError(ApiError):
    """Missing or insufficient operator identity"""
    status_code = 403


class RateLimitStorageError(ApiError):
    """Raised when the rate limit window cannot be read or written"""

    def __init__(self, message, error_code=None):
        self.error_code = error_code
        super().__init__(message)
