"""
Business logic utilities for common operations across Lambda functions
"""

import functools
import logging
import os

import request_utils as req
import response_utils as resp
from exceptions import BusinessLogicError

logger = logging.getLogger(__name__)


def configure_logging():
    """Set the root log level for a Lambda function from LOG_LEVEL"""
    logging.getLogger().setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())


def handle_business_logic_error(func):
    """Decorator to handle BusinessLogicError and unexpected exceptions"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BusinessLogicError as e:
            logger.warning(f"BusinessLogicError in {func.__name__}: {e.message} (status: {e.status_code})")
            return resp.error_response(e.message, e.status_code)
        except Exception as e:
            logger.exception(f"Unexpected error in {func.__name__}: {type(e).__name__}: {str(e)}")
            return resp.error_response("An unexpected error occurred", 500)
    return wrapper


def allow_methods(*methods):
    """
    Decorator answering CORS preflight requests and rejecting other methods

    Events without an HTTP method (direct invocations) are passed through.
    """
    allowed_header = ','.join(['OPTIONS', *methods])

    def decorator(func):
        @functools.wraps(func)
        def wrapper(event, context):
            method = req.get_http_method(event)
            if method == 'OPTIONS':
                return resp.no_content_response(allowed_header)
            if method and method not in methods:
                return resp.method_not_allowed_response(allowed_header)
            return func(event, context)
        return wrapper
    return decorator

