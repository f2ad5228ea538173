"""
Validation utilities for common input validation patterns
Centralizes validation logic across Lambda functions
"""

import re
import os
import functools
from datetime import datetime, date
from zoneinfo import ZoneInfo
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from exceptions import ValidationError

BUSINESS_TIMEZONE = ZoneInfo(os.environ.get('BUSINESS_TIMEZONE', 'America/New_York'))

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'

ORDER_REQUEST_STATUSES = ['new', 'contacted', 'confirmed', 'declined']
ORDER_STATUSES = ['pending', 'in_progress', 'completed', 'delivered', 'cancelled']
PAYMENT_TYPES = ['deposit', 'partial', 'final_payment']
PAYMENT_METHODS = ['cash', 'zelle', 'paypal', 'cashapp', 'venmo', 'check', 'other']


def business_today():
    return datetime.now(BUSINESS_TIMEZONE).date()


class DataValidator:
    """Common data validation patterns"""

    @staticmethod
    def validate_required_fields(data, required_fields):
        """
        Validate that all required fields are present and not empty

        Args:
            data (dict): Data to validate
            required_fields (list): List of required field names

        Raises:
            ValidationError: If any required field is missing or empty
        """
        if not isinstance(data, dict):
            raise ValidationError("Data must be a dictionary")

        for field in required_fields:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"Missing required field: {field}", field)

    @staticmethod
    def validate_email(email, field_name="email"):
        """
        Validate email format using regex

        Raises:
            ValidationError: If email is invalid
        """
        if not email or not isinstance(email, str):
            raise ValidationError(f"{field_name} must be a valid string", field_name)

        if not re.match(EMAIL_PATTERN, email):
            raise ValidationError("Invalid email format", field_name)

        return True

    @staticmethod
    def is_valid_email(email):
        return isinstance(email, str) and re.match(EMAIL_PATTERN, email) is not None

    @staticmethod
    def validate_string_length(value, min_length=None, max_length=None, field_name="value", message=None):
        """
        Validate string length

        Args:
            value (str): String to validate
            min_length (int): Minimum length (optional)
            max_length (int): Maximum length (optional)
            field_name (str): Field name for error messages
            message (str): Error message override (optional)

        Raises:
            ValidationError: If length is invalid
        """
        if not isinstance(value, str):
            raise ValidationError(f"{field_name} must be a string", field_name)

        length = len(value)

        if min_length is not None and length < min_length:
            raise ValidationError(message or f"{field_name} must be at least {min_length} characters", field_name)

        if max_length is not None and length > max_length:
            raise ValidationError(message or f"{field_name} must be {max_length} characters or less", field_name)

        return True

    @staticmethod
    def validate_iso_date(date_value, field_name="date"):
        """
        Parse an ISO calendar date

        Accepts YYYY-MM-DD or a full ISO datetime, in which case only the date
        part is kept.

        Returns:
            date: Parsed calendar date

        Raises:
            ValidationError: If the value is not an ISO date
        """
        if not date_value or not isinstance(date_value, str):
            raise ValidationError(f"{field_name} must be a non-empty string", field_name)

        value = date_value.strip()
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass

        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
        except ValueError:
            raise ValidationError(f"Invalid date format for {field_name}: '{value}'. Expected YYYY-MM-DD", field_name)

    @staticmethod
    def validate_amount(value, field_name="amount", allow_zero=True):
        """
        Validate a monetary amount

        Returns:
            Decimal: Amount rounded to cents
        """
        if isinstance(value, bool) or value is None:
            raise ValidationError(f"{field_name} must be a valid number", field_name)
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{field_name} must be a valid number", field_name)

        if not amount.is_finite():
            raise ValidationError(f"{field_name} must be a valid number", field_name)
        if amount < 0 or (amount == 0 and not allow_zero):
            qualifier = "zero or more" if allow_zero else "a positive number"
            raise ValidationError(f"{field_name} must be {qualifier}", field_name)

        return amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    @staticmethod
    def validate_whole_number(value, field_name="value"):
        """Accept ints and integral floats from JSON, reject booleans"""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{field_name} must be a number", field_name)
        if isinstance(value, float) and not value.is_integer():
            raise ValidationError(f"{field_name} must be a whole number", field_name)
        return int(value)


class OrderRequestValidator:
    """
    Validates and normalizes public order request submissions

    Checks run in a fixed order and the first failure wins: required fields,
    length ceilings, email format, event date, servings. Every string that
    passes is trimmed and truncated to its ceiling. request_details longer
    than its ceiling is truncated rather than rejected; customer_email longer
    than its ceiling is rejected.
    """

    HONEYPOT_FIELD = 'honeypot'

    REQUIRED_FIELDS = ['customer_name', 'customer_phone', 'cake_type', 'event_date', 'request_details']

    MAX_LENGTHS = {
        'customer_name': 100,
        'customer_email': 255,
        'customer_phone': 20,
        'cake_type': 100,
        'event_type': 50,
        'budget': 50,
        'request_details': 2000
    }

    # Ceilings that reject instead of truncating
    ENFORCED_LENGTHS = [
        ('customer_name', "Customer name must be 100 characters or less"),
        ('customer_phone', "Phone number must be 20 characters or less")
    ]

    STRING_FIELDS = list(MAX_LENGTHS) + ['event_date']

    MIN_SERVINGS = 6
    MAX_SERVINGS = 500

    MAX_INSPIRATION_IMAGES = 10
    MAX_IMAGE_URL_LENGTH = 2048

    @classmethod
    def is_honeypot_triggered(cls, payload):
        if not isinstance(payload, dict):
            return False
        value = payload.get(cls.HONEYPOT_FIELD)
        if isinstance(value, str):
            return bool(value.strip())
        return bool(value)

    @classmethod
    def validate(cls, payload, today=None):
        """
        Validate an order request payload

        Args:
            payload (dict): Parsed JSON body
            today (date): Reference date, defaults to today in the business time zone

        Returns:
            dict: Normalized payload ready for persistence

        Raises:
            ValidationError: For the first failing field or rule
        """
        cls._validate_shape(payload)

        DataValidator.validate_required_fields(payload, cls.REQUIRED_FIELDS)

        trimmed = {
            field: payload[field].strip()
            for field in cls.STRING_FIELDS
            if isinstance(payload.get(field), str)
        }

        for field, message in cls.ENFORCED_LENGTHS:
            DataValidator.validate_string_length(
                trimmed[field], max_length=cls.MAX_LENGTHS[field], field_name=field, message=message
            )

        if trimmed.get('customer_email'):
            DataValidator.validate_string_length(
                trimmed['customer_email'],
                max_length=cls.MAX_LENGTHS['customer_email'],
                field_name='customer_email',
                message="Email must be 255 characters or less"
            )
            DataValidator.validate_email(trimmed['customer_email'], 'customer_email')

        event_date = cls._validate_event_date(trimmed['event_date'], today)
        servings = cls._validate_servings(payload.get('servings'))
        image_urls = cls._validate_image_urls(payload.get('inspiration_image_urls'))

        normalized = {
            field: value[:cls.MAX_LENGTHS[field]]
            for field, value in trimmed.items()
            if field in cls.MAX_LENGTHS and value
        }
        normalized['event_date'] = event_date.isoformat()
        normalized['servings'] = servings
        normalized['inspiration_image_urls'] = image_urls

        for field in ['customer_email', 'event_type', 'budget']:
            normalized.setdefault(field, None)

        return normalized

    @classmethod
    def _validate_shape(cls, payload):
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        for field in cls.STRING_FIELDS:
            value = payload.get(field)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"{field} must be a string", field)

        images = payload.get('inspiration_image_urls')
        if images is not None and not isinstance(images, list):
            raise ValidationError("inspiration_image_urls must be an array of strings", 'inspiration_image_urls')

    @staticmethod
    def _validate_event_date(event_date, today=None):
        parsed = DataValidator.validate_iso_date(event_date, 'event_date')
        if parsed < (today or business_today()):
            raise ValidationError("Event date must be in the future", 'event_date')
        return parsed

    @classmethod
    def _validate_servings(cls, servings):
        if servings is None:
            return None
        value = DataValidator.validate_whole_number(servings, 'servings')
        if value < cls.MIN_SERVINGS or value > cls.MAX_SERVINGS:
            raise ValidationError(
                f"Servings must be between {cls.MIN_SERVINGS} and {cls.MAX_SERVINGS}", 'servings'
            )
        return value

    @classmethod
    def _validate_image_urls(cls, image_urls):
        if not image_urls:
            return []
        if len(image_urls) > cls.MAX_INSPIRATION_IMAGES:
            raise ValidationError(
                f"A maximum of {cls.MAX_INSPIRATION_IMAGES} inspiration images is allowed", 'inspiration_image_urls'
            )

        cleaned = []
        for url in image_urls:
            if not isinstance(url, str) or not url.strip():
                raise ValidationError("inspiration_image_urls must be an array of strings", 'inspiration_image_urls')
            url = url.strip()
            if len(url) > cls.MAX_IMAGE_URL_LENGTH or not re.match(r'^https?://', url):
                raise ValidationError("Invalid inspiration image URL", 'inspiration_image_urls')
            cleaned.append(url)
        return cleaned


class OrderDataValidator:
    """Validation for orders created or edited from the dashboard"""

    REQUIRED_FIELDS = ['customerName', 'customerPhone', 'cakeType', 'eventDate']

    MAX_LENGTHS = {
        'customerName': 100,
        'customerEmail': 255,
        'customerPhone': 20,
        'cakeType': 100,
        'eventType': 50,
        'orderNotes': 2000
    }

    EDITABLE_FIELDS = list(MAX_LENGTHS) + ['eventDate', 'servings', 'status', 'depositAmount', 'totalAmount']

    @classmethod
    def validate_order_data(cls, order_data):
        """
        Validate a new order

        Returns:
            dict: Normalized order fields
        """
        if not isinstance(order_data, dict):
            raise ValidationError("orderData must be an object")

        DataValidator.validate_required_fields(order_data, cls.REQUIRED_FIELDS)
        normalized = cls._normalize(order_data)
        normalized.setdefault('status', 'pending')
        normalized.setdefault('depositAmount', Decimal('0.00'))
        normalized.setdefault('totalAmount', Decimal('0.00'))
        return normalized

    @classmethod
    def validate_update_data(cls, update_data):
        """
        Validate a partial order update

        Empty strings clear optional text fields. Required fields cannot be cleared.
        """
        if not isinstance(update_data, dict) or not update_data:
            raise ValidationError("updateData must be a non-empty object")

        unknown = [key for key in update_data if key not in cls.EDITABLE_FIELDS]
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        for field in cls.REQUIRED_FIELDS:
            if field in update_data:
                value = update_data[field]
                if value is None or (isinstance(value, str) and not value.strip()):
                    raise ValidationError(f"{field} cannot be empty", field)

        return cls._normalize(update_data, clearing=True)

    @classmethod
    def _normalize(cls, data, clearing=False):
        normalized = {}

        for field, max_length in cls.MAX_LENGTHS.items():
            if field not in data or data[field] is None:
                continue
            value = data[field]
            if not isinstance(value, str):
                raise ValidationError(f"{field} must be a string", field)
            value = value.strip()
            if field in ('customerName', 'customerEmail', 'customerPhone', 'cakeType'):
                DataValidator.validate_string_length(value, max_length=max_length, field_name=field)
            if field == 'customerEmail' and value:
                DataValidator.validate_email(value, field)
            if value:
                normalized[field] = value[:max_length]
            elif clearing:
                normalized[field] = ''

        if data.get('eventDate') is not None:
            normalized['eventDate'] = DataValidator.validate_iso_date(data['eventDate'], 'eventDate').isoformat()

        if data.get('servings') is not None:
            servings = DataValidator.validate_whole_number(data['servings'], 'servings')
            if servings <= 0:
                raise ValidationError("servings must be a positive number", 'servings')
            normalized['servings'] = servings

        if data.get('status') is not None:
            if data['status'] not in ORDER_STATUSES:
                raise ValidationError(f"Invalid status. Valid statuses are: {', '.join(ORDER_STATUSES)}", 'status')
            normalized['status'] = data['status']

        for field in ('depositAmount', 'totalAmount'):
            if data.get(field) is not None:
                normalized[field] = DataValidator.validate_amount(data[field], field)

        return normalized

    @staticmethod
    def validate_image_urls(image_urls):
        if image_urls is None:
            return []
        if not isinstance(image_urls, list) or not all(isinstance(url, str) and url.strip() for url in image_urls):
            raise ValidationError("visionImageUrls must be an array of strings", 'visionImageUrls')
        return [url.strip() for url in image_urls]


class PaymentDataValidator:
    """Validation for payments recorded from the dashboard"""

    @staticmethod
    def validate_payment_data(payment_data):
        if not isinstance(payment_data, dict):
            raise ValidationError("paymentData must be an object")

        DataValidator.validate_required_fields(payment_data, ['orderId', 'amount', 'paymentType', 'paymentMethod', 'paymentDate'])

        payment_type = payment_data['paymentType']
        if payment_type not in PAYMENT_TYPES:
            raise ValidationError(f"paymentType must be one of: {', '.join(PAYMENT_TYPES)}", 'paymentType')

        payment_method = payment_data['paymentMethod']
        if payment_method not in PAYMENT_METHODS:
            raise ValidationError(f"paymentMethod must be one of: {', '.join(PAYMENT_METHODS)}", 'paymentMethod')

        notes = payment_data.get('notes')
        if notes is not None:
            DataValidator.validate_string_length(notes, max_length=1000, field_name='notes')

        return {
            'orderId': str(payment_data['orderId']).strip(),
            'amount': DataValidator.validate_amount(payment_data['amount'], 'amount', allow_zero=False),
            'paymentType': payment_type,
            'paymentMethod': payment_method,
            'paymentDate': DataValidator.validate_iso_date(payment_data['paymentDate'], 'paymentDate').isoformat(),
            'notes': notes.strip() if notes else None
        }


def handle_validation_error(func):
    """
    Decorator to convert ValidationError exceptions to 400 responses
    """
    import response_utils as resp

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            return resp.error_response(e.message, 400)

    return wrapper
