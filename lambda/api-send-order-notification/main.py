import logging

import response_utils as resp
import request_utils as req
import validation_utils as valid
import business_logic_utils as biz
from notification_manager import NotificationDispatcher

biz.configure_logging()
logger = logging.getLogger(__name__)

@biz.handle_business_logic_error
@biz.allow_methods('POST')
@valid.handle_validation_error
def lambda_handler(event, context):
    """
    Send the operator and customer emails for a new order request

    Invoked asynchronously by the submission function, or over HTTP.
    """
    dispatcher = NotificationDispatcher()
    if not dispatcher.is_configured():
        logger.error("RESEND_API_KEY is not configured")
        return resp.error_response("Email service not configured", 500)

    request_data = req.get_body(event)
    if not isinstance(request_data, dict):
        raise valid.ValidationError("Request body must be a JSON object")

    logger.info(f"Sending notifications for order request {request_data.get('orderId')}")
    result = dispatcher.notify(request_data)

    return resp.success_response({
        'bakerNotified': result['operatorNotified'],
        'customerNotified': result['customerNotified']
    })
