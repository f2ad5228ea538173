import response_utils as resp
import request_utils as req
import validation_utils as valid
import permission_utils as perm
import business_logic_utils as biz
from order_manager import OrderManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('POST')
@perm.handle_permission_error
@valid.handle_validation_error
def lambda_handler(event, context):
    """Create an order directly from the dashboard"""

    operator_context = perm.PermissionValidator.validate_operator_access(event)

    order_data = req.get_body_param(event, 'orderData')
    vision_image_urls = req.get_body_param(event, 'visionImageUrls')

    result = OrderManager.create_order(
        operator_context['operator_user_id'],
        order_data,
        vision_image_urls=vision_image_urls
    )

    return resp.success_response(result)
