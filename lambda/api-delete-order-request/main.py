import response_utils as resp
import request_utils as req
import permission_utils as perm
import business_logic_utils as biz
from order_request_manager import OrderRequestManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('DELETE', 'POST')
@perm.handle_permission_error
def lambda_handler(event, context):
    """Delete an order request together with its inspiration images"""

    perm.PermissionValidator.validate_operator_access(event)

    request_id = req.get_path_param(event, 'requestId') or req.get_body_param(event, 'requestId')

    result = OrderRequestManager.delete_request(request_id)

    return resp.success_response(result)
