import response_utils as resp
import request_utils as req
import validation_utils as valid
import permission_utils as perm
import business_logic_utils as biz
from order_manager import SettingsManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('PUT', 'POST')
@perm.handle_permission_error
@valid.handle_validation_error
def lambda_handler(event, context):
    """Change a business setting such as the order notification email"""

    perm.PermissionValidator.validate_operator_access(event)

    result = SettingsManager.update_setting(
        req.get_body_param(event, 'settingKey'),
        req.get_body_param(event, 'settingValue')
    )

    return resp.success_response(result)
