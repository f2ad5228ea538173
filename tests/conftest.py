"""
Shared test setup

Lambda code reads its configuration from the environment at import time and
creates boto3 clients at module level, so the environment is prepared here
before any test module imports it.
"""
import importlib.util
import os
from pathlib import Path

os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("ORDER_REQUESTS_TABLE", "OrderRequests")
os.environ.setdefault("REQUEST_IMAGES_TABLE", "RequestImages")
os.environ.setdefault("ORDERS_TABLE", "Orders")
os.environ.setdefault("VISION_IMAGES_TABLE", "VisionImages")
os.environ.setdefault("ORDER_SUPPLIES_TABLE", "OrderSupplies")
os.environ.setdefault("PAYMENTS_TABLE", "Payments")
os.environ.setdefault("BUSINESS_SETTINGS_TABLE", "BusinessSettings")
os.environ.setdefault("RATE_LIMITS_TABLE", "RateLimits")
os.environ.setdefault("NOTIFICATION_FUNCTION_NAME", "send-order-notification")

LAMBDA_DIR = Path(__file__).resolve().parent.parent / "lambda"


def load_handler(function_name):
    """Import lambda/<function_name>/main.py under a unique module name"""
    path = LAMBDA_DIR / function_name / "main.py"
    module_name = "handler_" + function_name.replace("-", "_")
    spec = importlib.util.spec_from_file_location(module_name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def api_event(method="POST", body=None, headers=None, query=None, path=None, operator_id=None):
    """Build an API Gateway proxy event"""
    import json

    event = {
        "httpMethod": method,
        "headers": headers or {},
        "queryStringParameters": query,
        "pathParameters": path,
        "body": json.dumps(body) if isinstance(body, (dict, list)) else body,
        "requestContext": {"identity": {"sourceIp": "203.0.113.7"}},
    }
    if operator_id:
        event["requestContext"]["authorizer"] = {"userId": operator_id, "email": "owner@example.com"}
    return event
