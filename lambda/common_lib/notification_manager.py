"""
Notification Management Module
Handles order request notification queuing and email dispatch
"""

import os
import json
import logging
import boto3
from botocore.exceptions import ClientError, BotoCoreError

import db_utils as db
import email_utils
from validation_utils import DataValidator

logger = logging.getLogger(__name__)

NOTIFICATION_EMAIL_SETTING = 'notification_email'
FALLBACK_NOTIFICATION_EMAIL = 'orders@mahoneymakes.com'


def build_notification_payload(request_id, request_data):
    """
    Build the notification function payload from a normalized order request

    Args:
        request_id (str): Persisted request ID
        request_data (dict): Normalized payload from OrderRequestValidator

    Returns:
        dict: camelCase payload accepted by the notification function
    """
    return {
        'orderId': request_id,
        'customerName': request_data.get('customer_name', ''),
        'customerEmail': request_data.get('customer_email') or '',
        'customerPhone': request_data.get('customer_phone', ''),
        'cakeType': request_data.get('cake_type', ''),
        'eventType': request_data.get('event_type') or '',
        'eventDate': request_data.get('event_date', ''),
        'servings': request_data.get('servings'),
        'budget': request_data.get('budget') or '',
        'requestDetails': request_data.get('request_details') or ''
    }


class NotificationManager:
    """Queues notifications for asynchronous processing"""

    def __init__(self):
        self.lambda_client = boto3.client('lambda')
        self.notification_function_name = os.environ.get('NOTIFICATION_FUNCTION_NAME', '')

    def queue_order_request_notification(self, notification_payload):
        """
        Invoke the notification function without waiting for it

        The event is shaped like an API Gateway request so the same function
        serves both direct HTTP calls and these service-to-service invocations.

        Returns:
            bool: True if the invocation was accepted, False otherwise
        """
        if not self.notification_function_name:
            logger.error("NOTIFICATION_FUNCTION_NAME environment variable not configured")
            return False

        event = {
            'httpMethod': 'POST',
            'headers': {'Content-Type': 'application/json'},
            'body': json.dumps(notification_payload)
        }

        try:
            response = self.lambda_client.invoke(
                FunctionName=self.notification_function_name,
                InvocationType='Event',
                Payload=json.dumps(event).encode('utf-8')
            )
        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            logger.error(f"Failed to queue order request notification. Error: {error_code} - {error_message}")
            return False
        except BotoCoreError as e:
            logger.error(f"Failed to queue order request notification: {str(e)}")
            return False

        status_code = response.get('StatusCode')
        if status_code != 202:
            logger.error(f"Notification invocation for {notification_payload.get('orderId')} returned status {status_code}")
            return False

        logger.info(f"Order request notification queued for {notification_payload.get('orderId')}")
        return True


class NotificationDispatcher:
    """
    Sends the operator and customer emails for a new order request

    The two sends are independent: a failure of one never prevents or
    undoes the other, and neither failure is raised.
    """

    def __init__(self, api_key=None):
        self.api_key = api_key or email_utils.RESEND_API_KEY

    def is_configured(self):
        return bool(self.api_key)

    @staticmethod
    def resolve_recipient():
        """
        Resolve the operator notification address for this invocation

        Order: notification_email business setting, DEFAULT_NOTIFICATION_EMAIL
        environment variable, then the built-in fallback.
        """
        setting_value = db.get_business_setting(NOTIFICATION_EMAIL_SETTING)
        if setting_value and DataValidator.is_valid_email(setting_value.strip()):
            return setting_value.strip()
        if setting_value:
            logger.warning(f"Ignoring invalid {NOTIFICATION_EMAIL_SETTING} setting: {setting_value}")

        return os.environ.get('DEFAULT_NOTIFICATION_EMAIL') or FALLBACK_NOTIFICATION_EMAIL

    def notify(self, request_data):
        """
        Send both notification emails for an order request

        Args:
            request_data (dict): Notification payload (orderId, customerName, ...)

        Returns:
            dict: {'operatorNotified': bool, 'customerNotified': bool}
        """
        operator_notified = self._send_operator_email(request_data)

        customer_notified = False
        customer_email = str(request_data.get('customerEmail') or '').strip()
        if customer_email:
            customer_notified = self._send_customer_email(customer_email, request_data)
        else:
            logger.info(f"No customer email for {request_data.get('orderId')}, skipping confirmation")

        return {
            'operatorNotified': operator_notified,
            'customerNotified': customer_notified
        }

    def _send_operator_email(self, request_data):
        try:
            recipient = self.resolve_recipient()
            subject, html_body = email_utils.build_operator_notification_email(request_data)
            sent = email_utils.send_email(
                recipient,
                subject,
                html_body,
                email_type=email_utils.EmailTemplate.TYPE_OPERATOR_NEW_REQUEST,
                api_key=self.api_key
            )
        except Exception as e:
            logger.exception(f"Failed to send operator notification for {request_data.get('orderId')}: {str(e)}")
            return False

        if not sent:
            logger.error(f"Failed to send operator notification for {request_data.get('orderId')}")
        return sent

    def _send_customer_email(self, customer_email, request_data):
        try:
            subject, html_body = email_utils.build_customer_confirmation_email(request_data)
            sent = email_utils.send_email(
                customer_email,
                subject,
                html_body,
                email_type=email_utils.EmailTemplate.TYPE_CUSTOMER_REQUEST_RECEIVED,
                api_key=self.api_key
            )
        except Exception as e:
            logger.exception(f"Failed to send customer confirmation for {request_data.get('orderId')}: {str(e)}")
            return False

        if not sent:
            logger.error(f"Failed to send customer confirmation for {request_data.get('orderId')}")
        return sent


notification_manager = NotificationManager()
