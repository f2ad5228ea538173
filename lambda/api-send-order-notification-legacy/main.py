import logging

import response_utils as resp
import request_utils as req
import validation_utils as valid
import business_logic_utils as biz
import email_utils

biz.configure_logging()
logger = logging.getLogger(__name__)

@biz.handle_business_logic_error
@biz.allow_methods('POST')
@valid.handle_validation_error
def lambda_handler(event, context):
    """Send a plain text order summary to the shop's alert address through SES"""

    order_data = req.get_body(event, {})
    if not isinstance(order_data, dict) or not order_data.get('orderId') or not order_data.get('customerName'):
        raise valid.ValidationError("Missing orderId or customerName")

    recipient = email_utils.ALERT_TO_EMAIL or email_utils.DEFAULT_SENDER_EMAIL
    if not recipient:
        logger.error("Neither ALERT_TO_EMAIL nor DEFAULT_SENDER_EMAIL is configured")
        return resp.error_response("ALERT_TO_EMAIL not configured", 500)

    # SES needs a verified source; the alert address doubles as one when no sender is set
    source = email_utils.DEFAULT_SENDER_EMAIL or recipient

    subject, text_body = email_utils.build_legacy_order_summary(order_data)
    sent = email_utils.send_ses_text_email(
        source,
        recipient,
        subject,
        text_body,
        email_type=email_utils.EmailTemplate.TYPE_LEGACY_ORDER_SUMMARY
    )
    if not sent:
        return resp.error_response("Failed to send email", 500)

    return {
        "statusCode": 200,
        "headers": resp.build_headers('OPTIONS,POST'),
        "body": resp.safe_json_dumps({"ok": True})
    }
