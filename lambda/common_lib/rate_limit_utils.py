"""
Rate Limiting Module
Per-IP, per-endpoint request windows stored in DynamoDB
"""

import time
import logging
from botocore.exceptions import ClientError

import db_utils as db
from exceptions import RateLimitStorageError

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed window request counter keyed by (ip_address, endpoint)

    A window starts with the first request from a key and lasts
    window_minutes. Once requestCount reaches max_requests further requests
    are denied until the window expires. Every read-modify-write happens as a
    conditional DynamoDB write so concurrent requests from the same key
    cannot undercount.

    Clients whose IP cannot be resolved all share the 'unknown' key and
    therefore one window.
    """

    ORDER_REQUEST_ENDPOINT = 'order_request'
    ORDER_REQUEST_MAX_REQUESTS = 3
    ORDER_REQUEST_WINDOW_MINUTES = 60
    RETRY_AFTER_SECONDS = 3600

    # Attempts when a competing request resets the window between our two writes
    MAX_ATTEMPTS = 3

    def __init__(self, clock=None):
        self.clock = clock or time.time

    def check_and_increment(self, ip_address, endpoint, max_requests, window_minutes):
        """
        Count a request and report whether it is allowed

        Args:
            ip_address (str): Client IP or 'unknown'
            endpoint (str): Endpoint name the policy applies to
            max_requests (int): Requests allowed per window
            window_minutes (int): Window length in minutes

        Returns:
            bool: True if allowed (and counted), False if the window is full

        Raises:
            RateLimitStorageError: If the window cannot be read or written
        """
        now = int(self.clock())
        window_seconds = int(window_minutes * 60)
        window_cutoff = now - window_seconds

        try:
            for _ in range(self.MAX_ATTEMPTS):
                if db.increment_rate_limit_window(ip_address, endpoint, max_requests, window_cutoff):
                    return True

                if db.start_rate_limit_window(ip_address, endpoint, now, window_cutoff, now + window_seconds):
                    return True

                # Both conditions failed: an active window exists. It is full
                # unless another request just started it, so look once more.
                if not self._window_has_capacity(ip_address, endpoint, max_requests, window_cutoff):
                    return False
        except ClientError as e:
            error_code = e.response['Error']['Code']
            raise RateLimitStorageError(f"Rate limit storage error: {error_code}", error_code) from e

        return False

    def is_allowed(self, ip_address, endpoint, max_requests, window_minutes):
        """
        Fail-open wrapper around check_and_increment

        A storage failure allows the request: submissions stay available when
        the rate limit table is unreachable.
        """
        try:
            allowed = self.check_and_increment(ip_address, endpoint, max_requests, window_minutes)
        except RateLimitStorageError as e:
            logger.error(f"Rate limit check failed for {ip_address} on {endpoint}, allowing request: {e.message}")
            return True

        if not allowed:
            logger.warning(f"Rate limit exceeded for {ip_address} on {endpoint}")
        return allowed

    def is_order_request_allowed(self, ip_address):
        return self.is_allowed(
            ip_address,
            self.ORDER_REQUEST_ENDPOINT,
            self.ORDER_REQUEST_MAX_REQUESTS,
            self.ORDER_REQUEST_WINDOW_MINUTES
        )

    @staticmethod
    def _window_has_capacity(ip_address, endpoint, max_requests, window_cutoff):
        window = db.get_rate_limit_window(ip_address, endpoint)
        if not window:
            return True
        return int(window['windowStart']) >= window_cutoff and int(window['requestCount']) < max_requests
