"""
Order Management Module
Handles order, payment and business setting workflows for the dashboard
"""

import uuid
import logging
from decimal import Decimal

import db_utils as db
from validation_utils import DataValidator, OrderDataValidator, PaymentDataValidator
from notification_manager import NOTIFICATION_EMAIL_SETTING
from exceptions import BusinessLogicError, ValidationError

logger = logging.getLogger(__name__)


class OrderManager:
    """Manages order-related business logic"""

    @staticmethod
    def create_order(operator_id, order_data, vision_image_urls=None):
        """
        Complete order creation workflow

        Args:
            operator_id (str): Authenticated operator user ID
            order_data (dict): Order fields in camelCase
            vision_image_urls (list): Image URLs to attach to the order (optional)

        Returns:
            dict: Success response with order ID

        Raises:
            ValidationError: If the order data is invalid
            BusinessLogicError: If creation fails
        """
        normalized = OrderDataValidator.validate_order_data(order_data)
        image_urls = OrderDataValidator.validate_image_urls(vision_image_urls)

        if len(image_urls) + 1 > db.MAX_TRANSACTION_ITEMS:
            raise BusinessLogicError(f"Too many vision images ({len(image_urls)})", 400)

        order_id = str(uuid.uuid4())
        order_item = db.build_order_data(order_id, normalized, operator_id)
        image_items = [
            db.build_vision_image_data(str(uuid.uuid4()), order_id, image_url, operator_id)
            for image_url in image_urls
        ]

        if not db.create_order(order_item, image_items):
            raise BusinessLogicError("Failed to create order", 500)

        return {
            "message": "Order created successfully",
            "orderId": order_id
        }

    @staticmethod
    def update_order(order_id, update_data):
        """Apply a partial update to an existing order"""
        OrderManager._get_existing_order(order_id)
        normalized = OrderDataValidator.validate_update_data(update_data)

        if not db.update_order(order_id, normalized):
            raise BusinessLogicError("Failed to update order", 500)

        return {
            "message": "Order updated successfully",
            "orderId": order_id
        }

    @staticmethod
    def delete_order(order_id):
        """Delete an order with its vision images, supply costs and payments"""
        OrderManager._get_existing_order(order_id)

        if not db.delete_order_cascade(order_id):
            raise BusinessLogicError("Failed to delete order", 500)

        return {
            "message": "Order deleted successfully",
            "orderId": order_id
        }

    @staticmethod
    def list_orders(start_date=None, end_date=None):
        if start_date or end_date:
            if not (start_date and end_date):
                raise ValidationError("startDate and endDate must be provided together")
            start = DataValidator.validate_iso_date(start_date, 'startDate')
            end = DataValidator.validate_iso_date(end_date, 'endDate')
            if start > end:
                raise ValidationError("startDate must not be after endDate")
            return db.get_orders_by_event_date_range(start.isoformat(), end.isoformat())
        return db.get_all_orders()

    @staticmethod
    def get_order_detail(order_id):
        order = OrderManager._get_existing_order(order_id)
        order['visionImages'] = db.get_vision_images_by_order(order_id)
        order['payments'] = db.get_payments_by_order(order_id)
        return order

    @staticmethod
    def _get_existing_order(order_id):
        if not order_id:
            raise BusinessLogicError("orderId is required", 400)

        order = db.get_order(order_id)
        if not order:
            raise BusinessLogicError("Order not found", 404)
        return order


class PaymentManager:
    """Manages payments recorded against orders"""

    @staticmethod
    def record_payment(operator_id, payment_data):
        """
        Record a payment against an order

        Deposits are also added to the order's depositAmount.

        Returns:
            dict: Success response with payment ID
        """
        normalized = PaymentDataValidator.validate_payment_data(payment_data)
        OrderManager._get_existing_order(normalized['orderId'])

        payment_id = str(uuid.uuid4())
        payment_item = db.build_payment_data(payment_id, normalized, operator_id)
        deposit_amount = normalized['amount'] if normalized['paymentType'] == 'deposit' else None

        if not db.create_payment(payment_item, deposit_amount=deposit_amount):
            raise BusinessLogicError("Failed to record payment", 500)

        return {
            "message": "Payment recorded successfully",
            "paymentId": payment_id
        }

    @staticmethod
    def list_payments(order_id=None):
        if order_id:
            return db.get_payments_by_order(order_id)
        return db.get_all_payments()

    @staticmethod
    def delete_payment(payment_id):
        if not payment_id:
            raise BusinessLogicError("paymentId is required", 400)

        payment = db.get_payment(payment_id)
        if not payment:
            raise BusinessLogicError("Payment not found", 404)

        deposit_amount = None
        if payment.get('paymentType') == 'deposit':
            deposit_amount = Decimal(str(payment['amount']))

        if not db.delete_payment(payment, deposit_amount=deposit_amount):
            raise BusinessLogicError("Failed to delete payment", 500)

        return {
            "message": "Payment deleted successfully",
            "paymentId": payment_id
        }


class SettingsManager:
    """Business settings editable from the dashboard"""

    EDITABLE_SETTINGS = [NOTIFICATION_EMAIL_SETTING]

    @staticmethod
    def get_settings():
        return {key: db.get_business_setting(key) for key in SettingsManager.EDITABLE_SETTINGS}

    @staticmethod
    def update_setting(setting_key, setting_value):
        if setting_key not in SettingsManager.EDITABLE_SETTINGS:
            raise ValidationError(f"Unknown setting: {setting_key}", 'settingKey')
        if not isinstance(setting_value, str) or not setting_value.strip():
            raise ValidationError("settingValue is required", 'settingValue')

        setting_value = setting_value.strip()
        if setting_key == NOTIFICATION_EMAIL_SETTING:
            DataValidator.validate_email(setting_value, 'settingValue')

        if not db.put_business_setting(setting_key, setting_value):
            raise BusinessLogicError("Failed to update setting", 500)

        logger.info(f"Business setting {setting_key} changed")
        return {
            "message": "Setting updated successfully",
            "settingKey": setting_key,
            "settingValue": setting_value
        }
