import json
import logging
from decimal import Decimal

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_METHODS = "OPTIONS,GET,POST,PATCH,PUT,DELETE"

response_headers = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization,x-client-info,apikey,content-type,X-Amz-Date,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": DEFAULT_ALLOWED_METHODS
}

def build_headers(allowed_methods=None, extra_headers=None):
    headers = dict(response_headers)
    if allowed_methods:
        headers["Access-Control-Allow-Methods"] = allowed_methods
    if extra_headers:
        headers.update(extra_headers)
    return headers

def convert_decimal(obj):
    """Convert Decimal objects to int or float for JSON serialization"""
    if isinstance(obj, list):
        return [convert_decimal(i) for i in obj]
    elif isinstance(obj, dict):
        return {k: convert_decimal(v) for k, v in obj.items()}
    elif isinstance(obj, Decimal):
        return int(obj) if obj % 1 == 0 else float(obj)
    return obj

def safe_json_dumps(data):
    """Safely serialize data to JSON with proper error handling"""
    try:
        return json.dumps(convert_decimal(data), default=str)
    except (TypeError, ValueError) as e:
        logger.error(f"JSON serialization error: {str(e)} (data type: {type(data).__name__})")
        return json.dumps({"error": "Serialization failed"})

def error_response(message, status_code=400, allowed_methods=None, extra_body=None, extra_headers=None):
    logger.info(f"Error response: {message} (status: {status_code})")

    response_body = {"error": message}
    if extra_body:
        response_body.update(extra_body)

    return {
        "statusCode": status_code,
        "headers": build_headers(allowed_methods, extra_headers),
        "body": safe_json_dumps(response_body)
    }

def success_response(data, success=True, status_code=200, allowed_methods=None):
    response_body = {
        "success": success,
        **data
    }

    return {
        "statusCode": status_code,
        "headers": build_headers(allowed_methods),
        "body": safe_json_dumps(response_body)
    }

def rate_limited_response(retry_after, message="Too many requests. Please try again later.", allowed_methods=None):
    return error_response(
        message,
        429,
        allowed_methods=allowed_methods,
        extra_body={"retryAfter": retry_after},
        extra_headers={"Retry-After": str(retry_after)}
    )

def no_content_response(allowed_methods=None):
    """Response for CORS preflight requests"""
    headers = build_headers(allowed_methods)
    headers.pop("Content-Type", None)
    return {
        "statusCode": 204,
        "headers": headers,
        "body": ""
    }

def method_not_allowed_response(allowed_methods=None):
    return error_response("Method not allowed", 405, allowed_methods=allowed_methods)
