import response_utils as resp
import request_utils as req
import permission_utils as perm
import business_logic_utils as biz
from order_manager import PaymentManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('GET')
@perm.handle_permission_error
def lambda_handler(event, context):
    """List payments, latest first, optionally for one order"""

    perm.PermissionValidator.validate_operator_access(event)

    payments = PaymentManager.list_payments(req.get_query_param(event, 'orderId'))

    return resp.success_response({
        "payments": payments,
        "count": len(payments)
    })
