import response_utils as resp
import request_utils as req
import permission_utils as perm
import business_logic_utils as biz
from order_manager import PaymentManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('DELETE', 'POST')
@perm.handle_permission_error
def lambda_handler(event, context):
    """Delete a payment, reversing a deposit on its order"""

    perm.PermissionValidator.validate_operator_access(event)

    payment_id = req.get_path_param(event, 'paymentId') or req.get_body_param(event, 'paymentId')

    result = PaymentManager.delete_payment(payment_id)

    return resp.success_response(result)
