"""
Order Request Management Module
Handles public order request intake and the dashboard request workflows
"""

import uuid
import logging
from botocore.exceptions import ClientError

import db_utils as db
from validation_utils import OrderRequestValidator, ORDER_REQUEST_STATUSES
from rate_limit_utils import RateLimiter
from notification_manager import notification_manager, build_notification_payload
from exceptions import BusinessLogicError, ValidationError

logger = logging.getLogger(__name__)


class OrderRequestSubmissionManager:
    """
    Public order request intake

    Rate limiting, honeypot filtering, validation, persistence and the
    asynchronous notification, in that order. Nothing after persistence can
    change the outcome reported to the caller.
    """

    SUCCESS_MESSAGE = "Order request submitted successfully"

    def __init__(self, rate_limiter=None, notifier=None):
        self.rate_limiter = rate_limiter or RateLimiter()
        self.notifier = notifier or notification_manager

    def check_rate_limit(self, client_ip):
        return self.rate_limiter.is_order_request_allowed(client_ip)

    def submit(self, payload, today=None):
        """
        Complete order request submission workflow

        Args:
            payload (dict): Parsed JSON body
            today (date): Reference date for event date validation (optional)

        Returns:
            dict: {'id': ..., 'message': ...}. Honeypot submissions get the
            same shape with an ID that was never stored.

        Raises:
            ValidationError: If the payload is invalid
            BusinessLogicError: If the request cannot be stored
        """
        if OrderRequestValidator.is_honeypot_triggered(payload):
            logger.info("Honeypot triggered - bot detected, discarding submission")
            return self._result(str(uuid.uuid4()))

        request_data = OrderRequestValidator.validate(payload, today=today)

        request_id = str(uuid.uuid4())
        request_item = db.build_order_request_data(request_id, request_data)
        image_items = [
            db.build_request_image_data(str(uuid.uuid4()), request_id, image_url)
            for image_url in request_data.get('inspiration_image_urls', [])
        ]

        if not db.create_order_request(request_item, image_items):
            raise BusinessLogicError("Failed to submit order request", 500)

        self._queue_notification(request_id, request_data)

        return self._result(request_id)

    def _queue_notification(self, request_id, request_data):
        # The request is already stored; a notification problem is only logged
        try:
            queued = self.notifier.queue_order_request_notification(
                build_notification_payload(request_id, request_data)
            )
        except Exception as e:
            logger.exception(f"Notification error for order request {request_id}: {str(e)}")
            return

        if not queued:
            logger.error(f"Notification could not be queued for order request {request_id}")

    def _result(self, request_id):
        return {
            "id": request_id,
            "message": self.SUCCESS_MESSAGE
        }


class OrderRequestManager:
    """Dashboard operations on order requests"""

    @staticmethod
    def list_requests(status=None):
        if status:
            OrderRequestManager._validate_status(status)
            return db.get_order_requests_by_status(status)
        return db.get_all_order_requests()

    @staticmethod
    def get_request_detail(request_id):
        request = OrderRequestManager._get_existing_request(request_id)
        request['images'] = db.get_order_request_images(request_id)
        return request

    @staticmethod
    def update_status(request_id, status):
        """
        Set an order request's status

        Any status may be set from any other; reopening a confirmed or
        declined request is an ordinary update.
        """
        OrderRequestManager._validate_status(status)
        OrderRequestManager._get_existing_request(request_id)

        if not db.update_order_request_status(request_id, status):
            raise BusinessLogicError("Failed to update order request status", 500)

        return {
            "message": "Order request status updated successfully",
            "requestId": request_id,
            "status": status
        }

    @staticmethod
    def delete_request(request_id):
        OrderRequestManager._get_existing_request(request_id)

        if not db.delete_order_request(request_id):
            raise BusinessLogicError("Failed to delete order request", 500)

        return {
            "message": "Order request deleted successfully",
            "requestId": request_id
        }

    @staticmethod
    def _validate_status(status):
        if status not in ORDER_REQUEST_STATUSES:
            raise ValidationError(
                f"Invalid status. Valid statuses are: {', '.join(ORDER_REQUEST_STATUSES)}", 'status'
            )

    @staticmethod
    def _get_existing_request(request_id):
        if not request_id:
            raise BusinessLogicError("requestId is required", 400)

        request = db.get_order_request(request_id)
        if not request:
            raise BusinessLogicError("Order request not found", 404)
        return request


class RequestConversionManager:
    """Converts an order request into a confirmed order"""

    @staticmethod
    def convert(request_id, operator_id):
        """
        Create an order from an order request

        The new order, a vision image for each request image and the request's
        'confirmed' status are written in one transaction. On failure nothing
        is written and the conversion can be retried.

        Args:
            request_id (str): Order request to convert
            operator_id (str): Authenticated operator user ID

        Returns:
            str: ID of the new order (unrelated to the request ID)

        Raises:
            BusinessLogicError: If the request is missing or the write fails
        """
        if not request_id:
            raise BusinessLogicError("requestId is required", 400)
        if not operator_id:
            raise BusinessLogicError("Unauthorized: Operator authentication required", 401)

        try:
            request = db.get_order_request(request_id, raise_on_error=True)
            if not request:
                raise BusinessLogicError("Order request not found", 404)
            if request.get('status') == 'confirmed':
                raise BusinessLogicError("Order request has already been converted", 409)
            request_images = db.get_order_request_images(request_id, raise_on_error=True)
        except ClientError:
            raise BusinessLogicError("Failed to load order request", 500)

        # One order put and one request update besides the images
        if len(request_images) + 2 > db.MAX_TRANSACTION_ITEMS:
            raise BusinessLogicError(
                f"Order request has too many images to convert ({len(request_images)})", 400
            )

        order_id = str(uuid.uuid4())
        order_item = db.build_order_data(
            order_id,
            {
                'customerName': request['customerName'],
                'customerEmail': request.get('customerEmail'),
                'customerPhone': request['customerPhone'],
                'cakeType': request['cakeType'],
                'eventType': request.get('eventType'),
                'eventDate': request['eventDate'],
                'servings': request.get('servings'),
                'orderNotes': request.get('requestDetails'),
                'status': 'pending',
                'depositAmount': 0,
                'totalAmount': 0
            },
            operator_id,
            source_request_id=request_id
        )
        vision_image_items = [
            db.build_vision_image_data(str(uuid.uuid4()), order_id, image['imageUrl'], operator_id)
            for image in request_images
        ]

        if not db.convert_order_request(request_id, order_item, vision_image_items):
            # A concurrent conversion wins the status condition
            current = db.get_order_request(request_id)
            if current and current.get('status') == 'confirmed':
                raise BusinessLogicError("Order request has already been converted", 409)
            raise BusinessLogicError("Failed to convert order request. No changes were made, please try again.", 500)

        logger.info(f"Operator {operator_id} converted order request {request_id} to order {order_id}")
        return order_id
