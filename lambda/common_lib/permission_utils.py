"""
Permission and authorization utilities for Lambda functions

Operators sign in through the identity provider; API Gateway's authorizer
places the verified identity in the request context. These helpers only read
that context.
"""

import functools
import logging

import request_utils as req
import response_utils as resp
from exceptions import PermissionError

logger = logging.getLogger(__name__)


class PermissionValidator:
    """Handles common permission validation patterns"""

    @staticmethod
    def validate_operator_access(event):
        """
        Validate that the caller is an authenticated operator

        Args:
            event (dict): Lambda event

        Returns:
            dict: Contains operator_user_id and operator_email

        Raises:
            PermissionError: If no authenticated operator identity is present
        """
        operator_user_id = req.get_operator_user_id(event)
        if not operator_user_id:
            raise PermissionError("Unauthorized: Operator authentication required", 401)

        return {
            'operator_user_id': operator_user_id,
            'operator_email': req.get_operator_email(event)
        }


def handle_permission_error(func):
    """Decorator to convert PermissionError exceptions to responses"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PermissionError as e:
            logger.warning(f"PermissionError in {func.__name__}: {e.message} (status: {e.status_code})")
            return resp.error_response(e.message, e.status_code)
    return wrapper
