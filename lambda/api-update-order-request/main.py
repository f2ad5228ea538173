import response_utils as resp
import request_utils as req
import validation_utils as valid
import permission_utils as perm
import business_logic_utils as biz
from order_request_manager import OrderRequestManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('PATCH', 'POST')
@perm.handle_permission_error
@valid.handle_validation_error
def lambda_handler(event, context):
    """Change the status of an order request"""

    perm.PermissionValidator.validate_operator_access(event)

    request_id = req.get_path_param(event, 'requestId') or req.get_body_param(event, 'requestId')
    status = req.get_body_param(event, 'status')

    result = OrderRequestManager.update_status(request_id, status)

    return resp.success_response(result)
