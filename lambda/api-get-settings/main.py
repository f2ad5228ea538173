import response_utils as resp
import permission_utils as perm
import business_logic_utils as biz
from order_manager import SettingsManager

biz.configure_logging()

@biz.handle_business_logic_error
@biz.allow_methods('GET')
@perm.handle_permission_error
def lambda_handler(event, context):
    perm.PermissionValidator.validate_operator_access(event)

    return resp.success_response({"settings": SettingsManager.get_settings()})
