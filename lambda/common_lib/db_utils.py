import boto3, os, logging
from decimal import Decimal
from datetime import datetime
from zoneinfo import ZoneInfo
from botocore.exceptions import ClientError
from boto3.dynamodb.types import TypeDeserializer

logger = logging.getLogger(__name__)

# Dynamodb client and deserializer
dynamodb = boto3.client('dynamodb')
deserializer = TypeDeserializer()

# Environment variables
ORDER_REQUESTS_TABLE = os.environ.get('ORDER_REQUESTS_TABLE')
REQUEST_IMAGES_TABLE = os.environ.get('REQUEST_IMAGES_TABLE')
ORDERS_TABLE = os.environ.get('ORDERS_TABLE')
VISION_IMAGES_TABLE = os.environ.get('VISION_IMAGES_TABLE')
ORDER_SUPPLIES_TABLE = os.environ.get('ORDER_SUPPLIES_TABLE')
PAYMENTS_TABLE = os.environ.get('PAYMENTS_TABLE')
BUSINESS_SETTINGS_TABLE = os.environ.get('BUSINESS_SETTINGS_TABLE')
RATE_LIMITS_TABLE = os.environ.get('RATE_LIMITS_TABLE')

BUSINESS_TIMEZONE = ZoneInfo(os.environ.get('BUSINESS_TIMEZONE', 'America/New_York'))

# DynamoDB rejects transactions with more actions than this
MAX_TRANSACTION_ITEMS = 100
BATCH_WRITE_LIMIT = 25


def current_timestamp():
    return int(datetime.now(BUSINESS_TIMEZONE).timestamp())

def current_date():
    return datetime.now(BUSINESS_TIMEZONE).strftime('%Y-%m-%d')

# ------------------  Order Request Table Functions ------------------

def build_order_request_data(request_id, request_data):
    """
    Build order request item in DynamoDB format

    Args:
        request_id (str): Newly generated request ID
        request_data (dict): Normalized payload from OrderRequestValidator

    Returns:
        dict: DynamoDB item. Status is always 'new'.
    """
    current_time = current_timestamp()

    item = {
        'requestId': {'S': request_id},
        'customerName': {'S': request_data['customer_name']},
        'customerPhone': {'S': request_data['customer_phone']},
        'cakeType': {'S': request_data['cake_type']},
        'eventDate': {'S': request_data['event_date']},
        'requestDetails': {'S': request_data['request_details']},
        'status': {'S': 'new'},
        'createdAt': {'N': str(current_time)},
        'createdDate': {'S': current_date()},
        'updatedAt': {'N': str(current_time)}
    }

    optional_fields = {
        'customerEmail': request_data.get('customer_email'),
        'eventType': request_data.get('event_type'),
        'budget': request_data.get('budget')
    }
    for key, value in optional_fields.items():
        if value:
            item[key] = {'S': value}

    if request_data.get('servings') is not None:
        item['servings'] = {'N': str(request_data['servings'])}

    return item

def build_request_image_data(image_id, request_id, image_url):
    return {
        'imageId': {'S': image_id},
        'requestId': {'S': request_id},
        'imageUrl': {'S': image_url},
        'createdAt': {'N': str(current_timestamp())}
    }

def create_order_request(request_item, image_items=None):
    """
    Create an order request together with its inspiration images

    The request and its images are written in one transaction so a request is
    never visible without the images submitted with it.
    """
    transact_items = [{
        'Put': {
            'TableName': ORDER_REQUESTS_TABLE,
            'Item': request_item,
            'ConditionExpression': 'attribute_not_exists(requestId)'
        }
    }]
    for image_item in image_items or []:
        transact_items.append({
            'Put': {
                'TableName': REQUEST_IMAGES_TABLE,
                'Item': image_item
            }
        })

    try:
        dynamodb.transact_write_items(TransactItems=transact_items)
        logger.info(f"Order request {request_item['requestId']['S']} created with {len(transact_items) - 1} images")
        return True
    except ClientError as e:
        logger.error(f"Error creating order request: {e}")
        return False

def get_order_request(request_id, raise_on_error=False):
    """Get an order request by ID"""
    try:
        result = dynamodb.get_item(
            TableName=ORDER_REQUESTS_TABLE,
            Key={'requestId': {'S': request_id}},
            ConsistentRead=True
        )
        if 'Item' in result:
            return deserialize_item_json_safe(result['Item'])
        return None
    except ClientError as e:
        logger.error(f"Error getting order request {request_id}: {e}")
        if raise_on_error:
            raise
        return None

def get_all_order_requests():
    """Get all order requests, newest first"""
    try:
        requests = [deserialize_item_json_safe(item) for item in scan_all_items(ORDER_REQUESTS_TABLE)]
    except ClientError:
        return []
    return sort_newest_first(requests)

def get_order_requests_by_status(status):
    """Get order requests with the given status, newest first"""
    try:
        items = query_all_by_index(ORDER_REQUESTS_TABLE, 'status-index', 'status', status)
    except ClientError:
        return []
    return sort_newest_first([deserialize_item_json_safe(item) for item in items])

def get_order_request_images(request_id, raise_on_error=False):
    """Get inspiration images attached to an order request"""
    try:
        items = query_all_by_index(REQUEST_IMAGES_TABLE, 'requestId-index', 'requestId', request_id)
    except ClientError:
        if raise_on_error:
            raise
        return []
    images = [deserialize_item_json_safe(item) for item in items]
    images.sort(key=lambda x: x.get('createdAt', 0))
    return images

def update_order_request_status(request_id, status):
    """Set the status of an order request. createdAt is never touched."""
    try:
        dynamodb.update_item(
            TableName=ORDER_REQUESTS_TABLE,
            Key={'requestId': {'S': request_id}},
            UpdateExpression='SET #status = :status, updatedAt = :updatedAt',
            ConditionExpression='attribute_exists(requestId)',
            ExpressionAttributeNames={'#status': 'status'},
            ExpressionAttributeValues={
                ':status': {'S': status},
                ':updatedAt': {'N': str(current_timestamp())}
            }
        )
        logger.info(f"Order request {request_id} status set to {status}")
        return True
    except ClientError as e:
        logger.error(f"Error updating status of order request {request_id}: {e}")
        return False

def delete_order_request(request_id):
    """Delete an order request and cascade to its inspiration images"""
    try:
        delete_items_by_index(REQUEST_IMAGES_TABLE, 'requestId-index', 'requestId', request_id, 'imageId')
        dynamodb.delete_item(
            TableName=ORDER_REQUESTS_TABLE,
            Key={'requestId': {'S': request_id}}
        )
        logger.info(f"Order request {request_id} deleted")
        return True
    except ClientError as e:
        logger.error(f"Error deleting order request {request_id}: {e}")
        return False

def convert_order_request(request_id, order_item, vision_image_items):
    """
    Create an order from a request in a single transaction

    Writes the order, one vision image per request image and marks the
    request confirmed. Either every write commits or none does; a request
    that is already confirmed fails the condition and nothing is written.
    """
    transact_items = [{
        'Put': {
            'TableName': ORDERS_TABLE,
            'Item': order_item,
            'ConditionExpression': 'attribute_not_exists(orderId)'
        }
    }]
    for image_item in vision_image_items:
        transact_items.append({
            'Put': {
                'TableName': VISION_IMAGES_TABLE,
                'Item': image_item
            }
        })
    transact_items.append({
        'Update': {
            'TableName': ORDER_REQUESTS_TABLE,
            'Key': {'requestId': {'S': request_id}},
            'UpdateExpression': 'SET #status = :confirmed, updatedAt = :updatedAt',
            'ConditionExpression': 'attribute_exists(requestId) AND #status <> :confirmed',
            'ExpressionAttributeNames': {'#status': 'status'},
            'ExpressionAttributeValues': {
                ':confirmed': {'S': 'confirmed'},
                ':updatedAt': {'N': str(current_timestamp())}
            }
        }
    })

    try:
        dynamodb.transact_write_items(TransactItems=transact_items)
        logger.info(f"Order request {request_id} converted to order {order_item['orderId']['S']}")
        return True
    except ClientError as e:
        error_code = e.response['Error']['Code']
        reasons = e.response.get('CancellationReasons')
        logger.error(f"Conversion of order request {request_id} failed: {error_code} {reasons or ''}")
        return False

# ------------------  Order Table Functions ------------------

def build_order_data(order_id, order_data, owner_id, source_request_id=None):
    """
    Build order item in DynamoDB format

    Args:
        order_id (str): Newly generated order ID
        order_data (dict): Order fields in camelCase (customerName, cakeType, ...)
        owner_id (str): Operator user ID
        source_request_id (str): Request the order was converted from (optional)
    """
    current_time = current_timestamp()

    item = {
        'orderId': {'S': order_id},
        'customerName': {'S': order_data['customerName']},
        'customerPhone': {'S': order_data['customerPhone']},
        'cakeType': {'S': order_data['cakeType']},
        'eventDate': {'S': order_data['eventDate']},
        'status': {'S': order_data.get('status') or 'pending'},
        'depositAmount': {'N': str(order_data.get('depositAmount', 0))},
        'totalAmount': {'N': str(order_data.get('totalAmount', 0))},
        'ownerId': {'S': owner_id},
        'createdAt': {'N': str(current_time)},
        'createdDate': {'S': current_date()},
        'updatedAt': {'N': str(current_time)}
    }

    optional_fields = {
        'customerEmail': order_data.get('customerEmail'),
        'eventType': order_data.get('eventType'),
        'orderNotes': order_data.get('orderNotes'),
        'sourceRequestId': source_request_id
    }
    for key, value in optional_fields.items():
        if value:
            item[key] = {'S': value}

    if order_data.get('servings') is not None:
        item['servings'] = {'N': str(order_data['servings'])}

    return item

def build_vision_image_data(image_id, order_id, image_url, owner_id, caption=None):
    item = {
        'imageId': {'S': image_id},
        'orderId': {'S': order_id},
        'imageUrl': {'S': image_url},
        'ownerId': {'S': owner_id},
        'createdAt': {'N': str(current_timestamp())}
    }
    if caption:
        item['caption'] = {'S': caption}
    return item

def create_order(order_item, vision_image_items=None):
    """Create an order directly, with any vision images uploaded alongside it"""
    transact_items = [{
        'Put': {
            'TableName': ORDERS_TABLE,
            'Item': order_item,
            'ConditionExpression': 'attribute_not_exists(orderId)'
        }
    }]
    for image_item in vision_image_items or []:
        transact_items.append({
            'Put': {
                'TableName': VISION_IMAGES_TABLE,
                'Item': image_item
            }
        })

    try:
        dynamodb.transact_write_items(TransactItems=transact_items)
        logger.info(f"Order {order_item['orderId']['S']} created successfully")
        return True
    except ClientError as e:
        logger.error(f"Error creating order: {e}")
        return False

def get_order(order_id):
    """Get an order by ID"""
    try:
        result = dynamodb.get_item(
            TableName=ORDERS_TABLE,
            Key={'orderId': {'S': order_id}},
            ConsistentRead=True
        )
        if 'Item' in result:
            return deserialize_item_json_safe(result['Item'])
        return None
    except ClientError as e:
        logger.error(f"Error getting order {order_id}: {e}")
        return None

def get_all_orders():
    """Get all orders ordered by event date"""
    try:
        orders = [deserialize_item_json_safe(item) for item in scan_all_items(ORDERS_TABLE)]
    except ClientError:
        return []
    orders.sort(key=lambda x: x.get('eventDate', ''))
    return orders

def get_orders_by_event_date_range(start_date, end_date):
    """Get orders whose event date falls within [start_date, end_date]"""
    try:
        items = scan_all_items(
            ORDERS_TABLE,
            FilterExpression='eventDate BETWEEN :start AND :end',
            ExpressionAttributeValues={
                ':start': {'S': start_date},
                ':end': {'S': end_date}
            }
        )
    except ClientError:
        return []
    orders = [deserialize_item_json_safe(item) for item in items]
    orders.sort(key=lambda x: x.get('eventDate', ''))
    return orders

def get_vision_images_by_order(order_id):
    try:
        items = query_all_by_index(VISION_IMAGES_TABLE, 'orderId-index', 'orderId', order_id)
    except ClientError:
        return []
    return [deserialize_item_json_safe(item) for item in items]

def update_order(order_id, update_data):
    """Update an existing order"""
    try:
        update_expression, expression_values, expression_names = build_update_expression_for_order(update_data)
        if update_expression:
            update_params = {
                'TableName': ORDERS_TABLE,
                'Key': {'orderId': {'S': order_id}},
                'UpdateExpression': update_expression,
                'ConditionExpression': 'attribute_exists(orderId)',
                'ExpressionAttributeValues': expression_values
            }

            if expression_names:
                update_params['ExpressionAttributeNames'] = expression_names

            dynamodb.update_item(**update_params)
            logger.info(f"Order {order_id} updated successfully")
            return True
        else:
            logger.warning("No valid update data provided")
            return False
    except ClientError as e:
        logger.error(f"Error updating order {order_id}: {e}")
        return False

def build_update_expression_for_order(data):
    """
    Build update expression for order updates

    None values are skipped, empty strings remove the attribute.
    updatedAt is always refreshed.
    """
    update_parts = []
    remove_parts = []
    expression_values = {}
    expression_names = {}

    # DynamoDB reserved keywords that need expression attribute names
    reserved_keywords = {'status', 'name', 'type', 'value', 'date', 'owner'}

    for key, value in data.items():
        if value is None or key in ('orderId', 'createdAt', 'createdDate', 'updatedAt'):
            continue

        if key.lower() in reserved_keywords:
            attr_ref = f'#{key}'
            expression_names[attr_ref] = key
        else:
            attr_ref = key

        if value == '':
            remove_parts.append(attr_ref)
            continue

        update_parts.append(f'{attr_ref} = :{key}')
        expression_values[f':{key}'] = serialize_value(value)

    if not update_parts and not remove_parts:
        return None, None, None

    update_parts.append('updatedAt = :updatedAt')
    expression_values[':updatedAt'] = {'N': str(current_timestamp())}

    update_expression_parts = ['SET ' + ', '.join(update_parts)]
    if remove_parts:
        update_expression_parts.append('REMOVE ' + ', '.join(remove_parts))

    return ' '.join(update_expression_parts), expression_values, expression_names

def delete_order_cascade(order_id):
    """
    Delete an order along with its vision images, supply cost rows and payments
    """
    try:
        delete_items_by_index(VISION_IMAGES_TABLE, 'orderId-index', 'orderId', order_id, 'imageId')
        delete_items_by_index(ORDER_SUPPLIES_TABLE, 'orderId-index', 'orderId', order_id, 'orderSupplyId')
        delete_items_by_index(PAYMENTS_TABLE, 'orderId-index', 'orderId', order_id, 'paymentId')
        dynamodb.delete_item(
            TableName=ORDERS_TABLE,
            Key={'orderId': {'S': order_id}}
        )
        logger.info(f"Order {order_id} deleted with dependent records")
        return True
    except ClientError as e:
        logger.error(f"Error deleting order {order_id}: {e}")
        return False

# ------------------  Payment Table Functions ------------------

def build_payment_data(payment_id, payment_data, owner_id):
    current_time = current_timestamp()
    item = {
        'paymentId': {'S': payment_id},
        'orderId': {'S': payment_data['orderId']},
        'amount': {'N': str(payment_data['amount'])},
        'paymentType': {'S': payment_data['paymentType']},
        'paymentMethod': {'S': payment_data['paymentMethod']},
        'paymentDate': {'S': payment_data['paymentDate']},
        'ownerId': {'S': owner_id},
        'createdAt': {'N': str(current_time)},
        'updatedAt': {'N': str(current_time)}
    }
    if payment_data.get('notes'):
        item['notes'] = {'S': payment_data['notes']}
    return item

def create_payment(payment_item, deposit_amount=None):
    """
    Record a payment against an existing order

    A deposit also adds its amount to the order's depositAmount in the same
    transaction.
    """
    order_key = {'orderId': {'S': payment_item['orderId']['S']}}
    transact_items = [{
        'Put': {
            'TableName': PAYMENTS_TABLE,
            'Item': payment_item,
            'ConditionExpression': 'attribute_not_exists(paymentId)'
        }
    }]

    if deposit_amount is not None:
        transact_items.append({
            'Update': {
                'TableName': ORDERS_TABLE,
                'Key': order_key,
                'UpdateExpression': 'ADD depositAmount :amount SET updatedAt = :updatedAt',
                'ConditionExpression': 'attribute_exists(orderId)',
                'ExpressionAttributeValues': {
                    ':amount': {'N': str(deposit_amount)},
                    ':updatedAt': {'N': str(current_timestamp())}
                }
            }
        })
    else:
        transact_items.append({
            'ConditionCheck': {
                'TableName': ORDERS_TABLE,
                'Key': order_key,
                'ConditionExpression': 'attribute_exists(orderId)'
            }
        })

    try:
        dynamodb.transact_write_items(TransactItems=transact_items)
        logger.info(f"Payment {payment_item['paymentId']['S']} recorded for order {order_key['orderId']['S']}")
        return True
    except ClientError as e:
        logger.error(f"Error recording payment: {e}")
        return False

def get_payment(payment_id):
    try:
        result = dynamodb.get_item(
            TableName=PAYMENTS_TABLE,
            Key={'paymentId': {'S': payment_id}}
        )
        if 'Item' in result:
            return deserialize_item_json_safe(result['Item'])
        return None
    except ClientError as e:
        logger.error(f"Error getting payment {payment_id}: {e}")
        return None

def get_all_payments():
    """Get all payments, latest payment date first"""
    try:
        payments = [deserialize_item_json_safe(item) for item in scan_all_items(PAYMENTS_TABLE)]
    except ClientError:
        return []
    payments.sort(key=lambda x: (x.get('paymentDate', ''), x.get('createdAt', 0)), reverse=True)
    return payments

def get_payments_by_order(order_id):
    try:
        items = query_all_by_index(PAYMENTS_TABLE, 'orderId-index', 'orderId', order_id)
    except ClientError:
        return []
    payments = [deserialize_item_json_safe(item) for item in items]
    payments.sort(key=lambda x: (x.get('paymentDate', ''), x.get('createdAt', 0)), reverse=True)
    return payments

def delete_payment(payment, deposit_amount=None):
    """Delete a payment, reversing its deposit on the order if it was one"""
    transact_items = [{
        'Delete': {
            'TableName': PAYMENTS_TABLE,
            'Key': {'paymentId': {'S': payment['paymentId']}},
            'ConditionExpression': 'attribute_exists(paymentId)'
        }
    }]
    if deposit_amount is not None:
        transact_items.append({
            'Update': {
                'TableName': ORDERS_TABLE,
                'Key': {'orderId': {'S': payment['orderId']}},
                'UpdateExpression': 'ADD depositAmount :amount SET updatedAt = :updatedAt',
                'ConditionExpression': 'attribute_exists(orderId)',
                'ExpressionAttributeValues': {
                    ':amount': {'N': str(-Decimal(str(deposit_amount)))},
                    ':updatedAt': {'N': str(current_timestamp())}
                }
            }
        })

    try:
        dynamodb.transact_write_items(TransactItems=transact_items)
        logger.info(f"Payment {payment['paymentId']} deleted")
        return True
    except ClientError as e:
        logger.error(f"Error deleting payment {payment['paymentId']}: {e}")
        return False

# ------------------  Business Settings Table Functions ------------------

def get_business_setting(setting_key):
    """Get a business setting value, None if unset or unreadable"""
    if not BUSINESS_SETTINGS_TABLE:
        logger.warning("BUSINESS_SETTINGS_TABLE environment variable not set")
        return None
    try:
        result = dynamodb.get_item(
            TableName=BUSINESS_SETTINGS_TABLE,
            Key={'settingKey': {'S': setting_key}}
        )
        item = result.get('Item')
        if item and 'settingValue' in item:
            return item['settingValue'].get('S')
        return None
    except ClientError as e:
        logger.error(f"Error getting business setting {setting_key}: {e}")
        return None

def put_business_setting(setting_key, setting_value):
    try:
        dynamodb.put_item(
            TableName=BUSINESS_SETTINGS_TABLE,
            Item={
                'settingKey': {'S': setting_key},
                'settingValue': {'S': setting_value},
                'updatedAt': {'N': str(current_timestamp())}
            }
        )
        logger.info(f"Business setting {setting_key} updated")
        return True
    except ClientError as e:
        logger.error(f"Error updating business setting {setting_key}: {e}")
        return False

# ------------------  Rate Limit Table Functions ------------------

def get_rate_limit_window(ip_address, endpoint):
    """Read the current window for (ip_address, endpoint), None if there is none"""
    result = dynamodb.get_item(
        TableName=RATE_LIMITS_TABLE,
        Key={
            'ipAddress': {'S': ip_address},
            'endpoint': {'S': endpoint}
        },
        ConsistentRead=True
    )
    return deserialize_item(result.get('Item'))

def increment_rate_limit_window(ip_address, endpoint, max_requests, window_cutoff):
    """
    Count a request against the active window for (ip_address, endpoint)

    Succeeds only when a window started at or after window_cutoff exists and
    its count is below max_requests.

    Returns:
        bool: True if counted, False if there is no usable window

    Raises:
        ClientError: For any failure other than the condition not holding
    """
    try:
        dynamodb.update_item(
            TableName=RATE_LIMITS_TABLE,
            Key={
                'ipAddress': {'S': ip_address},
                'endpoint': {'S': endpoint}
            },
            UpdateExpression='SET requestCount = requestCount + :one',
            ConditionExpression='windowStart >= :cutoff AND requestCount < :max',
            ExpressionAttributeValues={
                ':one': {'N': '1'},
                ':cutoff': {'N': str(window_cutoff)},
                ':max': {'N': str(max_requests)}
            }
        )
        return True
    except ClientError as e:
        if e.response['Error']['Code'] == 'ConditionalCheckFailedException':
            return False
        raise

def start_rate_limit_window(ip_address, endpoint, window_start, window_cutoff, expires_at):
    """
    Start a new window with a count of 1 if none is active

    Returns:
        bool: True if a new window was started, False if an active window exists

    Raises:
        ClientError: For any failure other than the condition not holding
    """
    try:
        dynamodb.put_item(
            TableName=RATE_LIMITS_TABLE,
            Item={
                'ipAddress': {'S': ip_address},
                'endpoint': {'S': endpoint},
                'windowStart': {'N': str(window_start)},
                'requestCount': {'N': '1'},
                'expiresAt': {'N': str(expires_at)}
            },
            ConditionExpression='attribute_not_exists(ipAddress) OR windowStart < :cutoff',
            ExpressionAttributeValues={':cutoff': {'N': str(window_cutoff)}}
        )
        return True
    except ClientError as e:
        if e.response['Error']['Code'] == 'ConditionalCheckFailedException':
            return False
        raise

# -------------------------------------------------------------

def scan_all_items(table_name, **scan_kwargs):
    """Scan all items from a DynamoDB table"""
    try:
        items = []
        response = dynamodb.scan(TableName=table_name, **scan_kwargs)
        items.extend(response.get('Items', []))

        while 'LastEvaluatedKey' in response:
            response = dynamodb.scan(
                TableName=table_name,
                ExclusiveStartKey=response['LastEvaluatedKey'],
                **scan_kwargs
            )
            items.extend(response.get('Items', []))

        return items
    except ClientError as e:
        logger.error(f"Error scanning table {table_name}: {e}")
        raise

def query_all_by_index(table_name, index_name, key_name, key_value):
    """Query every item of a GSI partition, following pagination"""
    query_params = {
        'TableName': table_name,
        'IndexName': index_name,
        'KeyConditionExpression': '#key = :value',
        'ExpressionAttributeNames': {'#key': key_name},
        'ExpressionAttributeValues': {':value': {'S': key_value}}
    }
    try:
        items = []
        response = dynamodb.query(**query_params)
        items.extend(response.get('Items', []))

        while 'LastEvaluatedKey' in response:
            response = dynamodb.query(ExclusiveStartKey=response['LastEvaluatedKey'], **query_params)
            items.extend(response.get('Items', []))

        return items
    except ClientError as e:
        logger.error(f"Error querying {index_name} on {table_name}: {e}")
        raise

def delete_items_by_index(table_name, index_name, key_name, key_value, primary_key_name):
    """Delete every item of a GSI partition by its primary key"""
    items = query_all_by_index(table_name, index_name, key_name, key_value)
    keys = [{primary_key_name: item[primary_key_name]} for item in items]
    batch_delete_items(table_name, keys)
    return len(keys)

def batch_delete_items(table_name, keys):
    """Delete items from DynamoDB table in batches"""
    try:
        for start in range(0, len(keys), BATCH_WRITE_LIMIT):
            request_items = {
                table_name: [
                    {'DeleteRequest': {'Key': key}} for key in keys[start:start + BATCH_WRITE_LIMIT]
                ]
            }

            response = dynamodb.batch_write_item(RequestItems=request_items)

            # Handle unprocessed items
            unprocessed = response.get('UnprocessedItems', {})
            while unprocessed:
                response = dynamodb.batch_write_item(RequestItems=unprocessed)
                unprocessed = response.get('UnprocessedItems', {})

        return True
    except ClientError as e:
        logger.error(f"Error batch deleting items from {table_name}: {e}")
        raise

def sort_newest_first(records):
    records.sort(key=lambda x: x.get('createdAt', 0), reverse=True)
    return records

def serialize_value(value):
    """Convert a Python value to DynamoDB attribute format"""
    if isinstance(value, str):
        return {'S': value}
    elif isinstance(value, bool):  # Check bool before int since bool is a subclass of int
        return {'BOOL': value}
    elif isinstance(value, (int, float, Decimal)):
        return {'N': str(value)}
    elif isinstance(value, dict):
        return {'M': {k: serialize_value(v) for k, v in value.items()}}
    elif isinstance(value, list):
        return {'L': [serialize_value(item) for item in value]}
    else:
        return {'S': str(value)}

def deserialize_item(item):
    return {k: deserializer.deserialize(v) for k, v in item.items()} if item else None

def deserialize_item_json_safe(item):
    """Deserialize DynamoDB item and convert Decimal objects to JSON-safe types"""
    if not item:
        return None

    deserialized = {k: deserializer.deserialize(v) for k, v in item.items()}

    def convert_decimals(obj):
        if isinstance(obj, Decimal):
            if obj % 1 == 0:
                return int(obj)
            else:
                return float(obj)
        elif isinstance(obj, dict):
            return {k: convert_decimals(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [convert_decimals(item) for item in obj]
        else:
            return obj

    return convert_decimals(deserialized)
