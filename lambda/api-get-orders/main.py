import response_utils as resp
import request_utils as req
import validation_utils as valid
import permission_utils as perm
import business_logic_utils as biz
from order_manager import OrderManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('GET')
@perm.handle_permission_error
@valid.handle_validation_error
def lambda_handler(event, context):
    """List orders by event date, or return one order with its images and payments"""

    perm.PermissionValidator.validate_operator_access(event)

    order_id = req.get_path_param(event, 'orderId') or req.get_query_param(event, 'orderId')
    if order_id:
        order = OrderManager.get_order_detail(order_id)
        return resp.success_response({"order": order})

    orders = OrderManager.list_orders(
        start_date=req.get_query_param(event, 'startDate'),
        end_date=req.get_query_param(event, 'endDate')
    )
    return resp.success_response({
        "orders": orders,
        "count": len(orders)
    })
