import response_utils as resp
import request_utils as req
import permission_utils as perm
import business_logic_utils as biz
from order_manager import OrderManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('DELETE', 'POST')
@perm.handle_permission_error
def lambda_handler(event, context):
    """Delete an order with its vision images, supply costs and payments"""

    perm.PermissionValidator.validate_operator_access(event)

    order_id = req.get_path_param(event, 'orderId') or req.get_body_param(event, 'orderId')

    result = OrderManager.delete_order(order_id)

    return resp.success_response(result)
