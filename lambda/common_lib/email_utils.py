import boto3
import os
import json
import html
import logging
import requests
from datetime import datetime, date
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

# Initialize SES client for the legacy mail transport
ses_client = boto3.client('ses')

# Environment variables
RESEND_API_KEY = os.environ.get('RESEND_API_KEY')
RESEND_API_URL = os.environ.get('RESEND_API_URL', 'https://api.resend.com/emails')
MAIL_FROM_ADDRESS = os.environ.get('MAIL_FROM_ADDRESS', 'Mahoney Makes <onboarding@resend.dev>')
ALERT_TO_EMAIL = os.environ.get('ALERT_TO_EMAIL')
DEFAULT_SENDER_EMAIL = os.environ.get('DEFAULT_SENDER_EMAIL')
ENVIRONMENT = os.environ.get('ENVIRONMENT')

REQUEST_TIMEOUT_SECONDS = 10

class EmailTemplate:
    """Email template constants and configurations"""

    # Email subjects
    OPERATOR_NEW_REQUEST = "New Order Request from {customer_name}"
    CUSTOMER_REQUEST_RECEIVED = "We Received Your Cake Order Request! 🎂"
    LEGACY_ORDER_CONFIRMED = "Order confirmed: {customer_name}"
    LEGACY_ORDER_UPDATE = "Order update: {customer_name}"

    # Email types for analytics
    TYPE_OPERATOR_NEW_REQUEST = "operator_new_request"
    TYPE_CUSTOMER_REQUEST_RECEIVED = "customer_request_received"
    TYPE_LEGACY_ORDER_SUMMARY = "legacy_order_summary"

def send_email(to_email, subject, html_body, email_type=None, api_key=None):
    """
    Send email through the Resend transactional email API

    Args:
        to_email (str): Recipient email address
        subject (str): Email subject
        html_body (str): HTML email body
        email_type (str): Type of email for analytics (optional)
        api_key (str): Resend API key, defaults to RESEND_API_KEY

    Returns:
        bool: True if email sent successfully, False otherwise
    """
    api_key = api_key or RESEND_API_KEY
    if not api_key:
        logger.error("RESEND_API_KEY environment variable not configured")
        log_email_activity(to_email, email_type, None, 'failed', 'RESEND_API_KEY not configured')
        return False

    try:
        response = requests.post(
            RESEND_API_URL,
            headers={
                'Content-Type': 'application/json',
                'Authorization': f'Bearer {api_key}'
            },
            json={
                'from': MAIL_FROM_ADDRESS,
                'to': [to_email],
                'subject': subject,
                'html': html_body
            },
            timeout=REQUEST_TIMEOUT_SECONDS
        )
    except requests.RequestException as e:
        logger.error(f"Email send error for {to_email}: {str(e)}")
        log_email_activity(to_email, email_type, None, 'failed', str(e))
        return False

    if not response.ok:
        error_message = _extract_error_message(response)
        logger.error(f"Resend API error for {to_email}: {response.status_code} - {error_message}")
        log_email_activity(to_email, email_type, None, 'failed', error_message)
        return False

    message_id = _extract_message_id(response)
    logger.info(f"Email sent successfully to {to_email}. MessageId: {message_id}")
    log_email_activity(to_email, email_type, message_id, 'sent')
    return True

def _extract_error_message(response):
    try:
        return response.json().get('message') or "Failed to send email"
    except ValueError:
        return response.text or "Failed to send email"

def _extract_message_id(response):
    try:
        return response.json().get('id')
    except ValueError:
        return None

def send_ses_text_email(source, to_email, subject, text_body, email_type=None):
    """
    Send a plain text email through Amazon SES

    Returns:
        bool: True if email sent successfully, False otherwise
    """
    try:
        response = ses_client.send_email(
            Source=source,
            Destination={'ToAddresses': [to_email]},
            Message={
                'Subject': {'Data': subject, 'Charset': 'UTF-8'},
                'Body': {'Text': {'Data': text_body, 'Charset': 'UTF-8'}}
            }
        )
    except ClientError as e:
        error_code = e.response['Error']['Code']
        error_message = e.response['Error']['Message']
        logger.error(f"Failed to send email to {to_email}. Error: {error_code} - {error_message}")
        log_email_activity(to_email, email_type, None, 'failed', error_message)
        return False

    message_id = response['MessageId']
    logger.info(f"Email sent successfully to {to_email}. MessageId: {message_id}")
    log_email_activity(to_email, email_type, message_id, 'sent')
    return True

def log_email_activity(email, email_type, message_id, status, error_message=None):
    """Log email activity for analytics and debugging"""
    log_data = {
        'timestamp': int(datetime.now().timestamp()),
        'email': email,
        'type': email_type,
        'message_id': message_id,
        'status': status,
        'environment': ENVIRONMENT
    }

    if error_message:
        log_data['error'] = error_message

    logger.info(f"Email Activity Log: {json.dumps(log_data)}")

# Formatting helpers

def format_event_date(event_date):
    """Format an ISO date as e.g. 'Saturday, November 14, 2026'"""
    if not event_date:
        return "Not specified"
    try:
        parsed = date.fromisoformat(str(event_date)[:10])
    except ValueError:
        return str(event_date)
    return f"{parsed.strftime('%A, %B')} {parsed.day}, {parsed.year}"

def display_value(value, default="Not specified"):
    if value is None or value == '':
        return default
    return html.escape(str(value))

# Email templates

def build_operator_notification_email(request_data):
    """
    Build the operator notification for a new order request

    Args:
        request_data (dict): Notification payload (orderId, customerName, ...)

    Returns:
        tuple: (subject, html_body)
    """
    subject = EmailTemplate.OPERATOR_NEW_REQUEST.format(customer_name=request_data.get('customerName', ''))
    event_date = html.escape(format_event_date(request_data.get('eventDate')))

    html_body = f"""
    <div style="font-family: Georgia, serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="color: #8B4513; border-bottom: 2px solid #D4A574; padding-bottom: 10px;">
            🎂 New Order Request!
        </h1>

        <div style="background: #FFF8F0; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #5D4037; margin-top: 0;">Customer Details</h2>
            <p><strong>Name:</strong> {display_value(request_data.get('customerName'))}</p>
            <p><strong>Email:</strong> {display_value(request_data.get('customerEmail'), 'Not provided')}</p>
            <p><strong>Phone:</strong> {display_value(request_data.get('customerPhone'))}</p>
        </div>

        <div style="background: #FFF8F0; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #5D4037; margin-top: 0;">Order Details</h2>
            <p><strong>Cake Type:</strong> {display_value(request_data.get('cakeType'))}</p>
            <p><strong>Event Type:</strong> {display_value(request_data.get('eventType'))}</p>
            <p><strong>Event Date:</strong> {event_date}</p>
            <p><strong>Servings:</strong> {display_value(request_data.get('servings'))}</p>
            <p><strong>Budget:</strong> {display_value(request_data.get('budget'))}</p>
        </div>

        <div style="background: #FFF8F0; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #5D4037; margin-top: 0;">Request Details</h2>
            <p style="white-space: pre-wrap;">{display_value(request_data.get('requestDetails'), 'No additional details')}</p>
        </div>

        <p style="color: #888; font-size: 12px; margin-top: 30px;">
            Order ID: {display_value(request_data.get('orderId'), '')}
        </p>
    </div>
    """

    return subject, html_body

def build_customer_confirmation_email(request_data):
    """Build the thank-you confirmation sent to the customer"""
    subject = EmailTemplate.CUSTOMER_REQUEST_RECEIVED
    event_date = html.escape(format_event_date(request_data.get('eventDate')))

    html_body = f"""
    <div style="font-family: Georgia, serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="color: #8B4513; border-bottom: 2px solid #D4A574; padding-bottom: 10px;">
            Thank You for Your Order Request!
        </h1>

        <p>Dear {display_value(request_data.get('customerName'), 'friend')},</p>

        <p>We've received your custom cake order request and we're so excited to help make your event special!</p>

        <div style="background: #FFF8F0; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #5D4037; margin-top: 0;">Your Request Summary</h2>
            <p><strong>Cake Type:</strong> {display_value(request_data.get('cakeType'))}</p>
            <p><strong>Event Type:</strong> {display_value(request_data.get('eventType'))}</p>
            <p><strong>Event Date:</strong> {event_date}</p>
            <p><strong>Servings:</strong> {display_value(request_data.get('servings'))}</p>
            <p><strong>Budget:</strong> {display_value(request_data.get('budget'))}</p>
        </div>

        <p><strong>What happens next?</strong></p>
        <p>I'll review your request and get back to you within 24-48 hours with more details about pricing and availability.</p>

        <p>If you have any questions in the meantime, feel free to reach out!</p>

        <p style="margin-top: 30px;">
            With love and butter,<br>
            <strong>Mahoney Makes</strong>
        </p>

        <p style="color: #888; font-size: 12px; margin-top: 30px;">
            Reference: {display_value(request_data.get('orderId'), '')}
        </p>
    </div>
    """

    return subject, html_body

def build_legacy_order_summary(order_data):
    """
    Build the single plain text summary sent by the legacy notification endpoint

    Returns:
        tuple: (subject, text_body)
    """
    customer_name = order_data.get('customerName', '')
    if order_data.get('notificationType') == 'order_confirmed':
        subject = EmailTemplate.LEGACY_ORDER_CONFIRMED.format(customer_name=customer_name)
    else:
        subject = EmailTemplate.LEGACY_ORDER_UPDATE.format(customer_name=customer_name)

    servings = order_data.get('servings')
    text_body = "\n".join([
        f"Order ID: {order_data.get('orderId')}",
        f"Customer: {customer_name}",
        f"Email: {order_data.get('customerEmail') or 'N/A'}",
        f"Phone: {order_data.get('customerPhone') or 'N/A'}",
        f"Cake: {order_data.get('cakeType') or ''}",
        f"Event: {order_data.get('eventType') or ''}",
        f"Date: {order_data.get('eventDate') or ''}",
        f"Servings: {'' if servings is None else servings}",
        f"Budget: {order_data.get('budget') or ''}",
        f"Details: {order_data.get('requestDetails') or ''}"
    ])

    return subject, text_body
