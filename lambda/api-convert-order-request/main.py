import response_utils as resp
import request_utils as req
import validation_utils as valid
import permission_utils as perm
import business_logic_utils as biz
from order_request_manager import RequestConversionManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('POST')
@perm.handle_permission_error
@valid.handle_validation_error
def lambda_handler(event, context):
    """Convert an order request into an order"""

    operator_context = perm.PermissionValidator.validate_operator_access(event)
    request_id = req.get_path_param(event, 'requestId') or req.get_body_param(event, 'requestId')

    order_id = RequestConversionManager.convert(request_id, operator_context['operator_user_id'])

    return resp.success_response({
        "message": "Order request converted successfully",
        "orderId": order_id
    })
