import response_utils as resp
import request_utils as req
import validation_utils as valid
import permission_utils as perm
import business_logic_utils as biz
from order_manager import OrderManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('PATCH', 'POST')
@perm.handle_permission_error
@valid.handle_validation_error
def lambda_handler(event, context):
    """Edit an order's details, status or amounts"""

    perm.PermissionValidator.validate_operator_access(event)

    order_id = req.get_path_param(event, 'orderId') or req.get_body_param(event, 'orderId')
    update_data = req.get_body_param(event, 'updateData')

    result = OrderManager.update_order(order_id, update_data)

    return resp.success_response(result)
