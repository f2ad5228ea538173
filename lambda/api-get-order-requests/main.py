import response_utils as resp
import request_utils as req
import validation_utils as valid
import permission_utils as perm
import business_logic_utils as biz
from order_request_manager import OrderRequestManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('GET')
@perm.handle_permission_error
@valid.handle_validation_error
def lambda_handler(event, context):
    """List order requests, or return one request with its inspiration images"""

    perm.PermissionValidator.validate_operator_access(event)

    request_id = req.get_path_param(event, 'requestId') or req.get_query_param(event, 'requestId')
    if request_id:
        request = OrderRequestManager.get_request_detail(request_id)
        return resp.success_response({"orderRequest": request})

    requests = OrderRequestManager.list_requests(req.get_query_param(event, 'status'))
    return resp.success_response({
        "orderRequests": requests,
        "count": len(requests)
    })
