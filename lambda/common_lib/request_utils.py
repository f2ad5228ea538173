import json

UNKNOWN_IP = 'unknown'

def get_query_param(event, key, default=None):
    return (event.get('queryStringParameters') or {}).get(key, default)

def get_header(event, key, default=None):
    """Header lookup is case-insensitive, API Gateway preserves client casing"""
    headers = event.get('headers') or {}
    if key in headers:
        return headers[key]
    lowered = key.lower()
    for header_name, value in headers.items():
        if header_name.lower() == lowered:
            return value
    return default

def get_path_param(event, key, default=None):
    return (event.get('pathParameters') or {}).get(key, default)

def get_http_method(event):
    method = event.get('httpMethod')
    if not method:
        method = ((event.get('requestContext') or {}).get('http') or {}).get('method')
    return method.upper() if method else None

def get_body(event, default=None):
    body = event.get('body')
    if body:
        if isinstance(body, dict):
            return body
        try:
            return json.loads(body)
        except (json.JSONDecodeError, TypeError):
            return default
    return default

def get_body_param(event, key, default=None):
    body = get_body(event, {})
    if not isinstance(body, dict):
        return default
    return body.get(key, default)

def get_client_ip(event):
    """
    Resolve the caller IP address

    Order: first X-Forwarded-For entry, X-Real-IP, API Gateway source IP.
    Callers whose address cannot be determined all share the 'unknown' value.
    """
    forwarded_for = get_header(event, 'X-Forwarded-For')
    if forwarded_for:
        first = forwarded_for.split(',')[0].strip()
        if first:
            return first

    real_ip = get_header(event, 'X-Real-IP')
    if real_ip and real_ip.strip():
        return real_ip.strip()

    identity = (event.get('requestContext') or {}).get('identity') or {}
    source_ip = identity.get('sourceIp')
    if source_ip:
        return source_ip

    return UNKNOWN_IP

def get_authorizer_context(event):
    return (event.get('requestContext') or {}).get('authorizer') or {}

def get_operator_user_id(event):
    context = get_authorizer_context(event)
    claims = context.get('claims') or {}
    return context.get('userId') or context.get('principalId') or claims.get('sub')

def get_operator_email(event):
    context = get_authorizer_context(event)
    claims = context.get('claims') or {}
    return context.get('email') or claims.get('email')
