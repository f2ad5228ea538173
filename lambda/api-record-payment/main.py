import response_utils as resp
import request_utils as req
import validation_utils as valid
import permission_utils as perm
import business_logic_utils as biz
from order_manager import PaymentManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('POST')
@perm.handle_permission_error
@valid.handle_validation_error
def lambda_handler(event, context):
    """Record a payment received for an order"""

    operator_context = perm.PermissionValidator.validate_operator_access(event)

    result = PaymentManager.record_payment(
        operator_context['operator_user_id'],
        req.get_body(event)
    )

    return resp.success_response(result)
