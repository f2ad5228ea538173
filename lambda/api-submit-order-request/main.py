import response_utils as resp
import request_utils as req
import validation_utils as valid
import business_logic_utils as biz
from order_request_manager import OrderRequestSubmissionManager
from rate_limit_utils import RateLimiter

biz.configure_logging()

submission_manager = OrderRequestSubmissionManager()

@biz.handle_business_logic_error
@biz.allow_methods('POST')
@valid.handle_validation_error
def lambda_handler(event, context):
    """Accept a public order request from the website form"""

    client_ip = req.get_client_ip(event)
    if not submission_manager.check_rate_limit(client_ip):
        return resp.rate_limited_response(RateLimiter.RETRY_AFTER_SECONDS, allowed_methods='OPTIONS,POST')

    payload = req.get_body(event)
    if payload is None:
        raise valid.ValidationError("Invalid JSON in request body")

    result = submission_manager.submit(payload)

    return resp.success_response(result, allowed_methods='OPTIONS,POST')
