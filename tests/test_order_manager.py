"""Tests for dashboard order, payment and settings workflows."""
import unittest
from decimal import Decimal
from unittest.mock import patch

import order_manager
from exceptions import BusinessLogicError, ValidationError
from order_manager import OrderManager, PaymentManager, SettingsManager

ORDER = {
    "orderId": "order-1",
    "customerName": "Jane Doe",
    "customerPhone": "555-123-4567",
    "cakeType": "Tiered",
    "eventDate": "2026-11-14",
    "status": "pending",
    "depositAmount": 0,
    "totalAmount": 0,
}


class DbPatchedTestCase(unittest.TestCase):
    def setUp(self):
        patcher = patch.object(order_manager, "db")
        self.db = patcher.start()
        self.addCleanup(patcher.stop)
        self.db.MAX_TRANSACTION_ITEMS = 100
        self.db.get_order.return_value = dict(ORDER)


class TestOrderManager(DbPatchedTestCase):
    def test_create_order_with_images(self):
        self.db.create_order.return_value = True

        result = OrderManager.create_order("operator-1", {
            "customerName": "Jane Doe",
            "customerPhone": "555-123-4567",
            "cakeType": "Sheet",
            "eventDate": "2026-12-01",
        }, vision_image_urls=["https://cdn.example.com/a.jpg"])

        order_id = result["orderId"]
        fields = self.db.build_order_data.call_args.args[1]
        self.assertEqual(fields["depositAmount"], Decimal("0.00"))
        self.assertEqual(self.db.build_order_data.call_args.args[2], "operator-1")
        self.db.build_vision_image_data.assert_called_once()
        self.assertEqual(self.db.build_vision_image_data.call_args.args[1], order_id)

    def test_create_order_requires_fields(self):
        with self.assertRaises(ValidationError):
            OrderManager.create_order("operator-1", {"customerName": "Jane"})
        self.db.create_order.assert_not_called()

    def test_update_missing_order_is_404(self):
        self.db.get_order.return_value = None

        with self.assertRaises(BusinessLogicError) as ctx:
            OrderManager.update_order("order-404", {"status": "completed"})
        self.assertEqual(ctx.exception.status_code, 404)

    def test_update_passes_normalized_fields(self):
        self.db.update_order.return_value = True

        OrderManager.update_order("order-1", {"totalAmount": "250", "status": "in_progress"})

        self.db.update_order.assert_called_once_with(
            "order-1", {"totalAmount": Decimal("250.00"), "status": "in_progress"}
        )

    def test_delete_cascades(self):
        self.db.delete_order_cascade.return_value = True

        OrderManager.delete_order("order-1")

        self.db.delete_order_cascade.assert_called_once_with("order-1")

    def test_list_orders_by_range(self):
        OrderManager.list_orders("2026-11-01", "2026-11-30")
        self.db.get_orders_by_event_date_range.assert_called_once_with("2026-11-01", "2026-11-30")

        with self.assertRaises(ValidationError):
            OrderManager.list_orders("2026-11-30", "2026-11-01")
        with self.assertRaises(ValidationError):
            OrderManager.list_orders(start_date="2026-11-01")

    def test_detail_includes_images_and_payments(self):
        self.db.get_vision_images_by_order.return_value = [{"imageId": "vis-1"}]
        self.db.get_payments_by_order.return_value = [{"paymentId": "pay-1"}]

        order = OrderManager.get_order_detail("order-1")

        self.assertEqual(order["visionImages"], [{"imageId": "vis-1"}])
        self.assertEqual(order["payments"], [{"paymentId": "pay-1"}])


class TestPaymentManager(DbPatchedTestCase):
    def _payment(self, payment_type):
        return {
            "orderId": "order-1",
            "amount": 75,
            "paymentType": payment_type,
            "paymentMethod": "cash",
            "paymentDate": "2026-10-17",
        }

    def test_deposit_adds_to_order(self):
        self.db.create_payment.return_value = True

        PaymentManager.record_payment("operator-1", self._payment("deposit"))

        self.assertEqual(self.db.create_payment.call_args.kwargs["deposit_amount"], Decimal("75.00"))

    def test_final_payment_leaves_deposit(self):
        self.db.create_payment.return_value = True

        PaymentManager.record_payment("operator-1", self._payment("final_payment"))

        self.assertIsNone(self.db.create_payment.call_args.kwargs["deposit_amount"])

    def test_payment_for_missing_order_is_404(self):
        self.db.get_order.return_value = None

        with self.assertRaises(BusinessLogicError) as ctx:
            PaymentManager.record_payment("operator-1", self._payment("partial"))
        self.assertEqual(ctx.exception.status_code, 404)

    def test_deleting_deposit_reverses_it(self):
        self.db.get_payment.return_value = {
            "paymentId": "pay-1", "orderId": "order-1", "amount": 75.5, "paymentType": "deposit",
        }
        self.db.delete_payment.return_value = True

        PaymentManager.delete_payment("pay-1")

        self.assertEqual(self.db.delete_payment.call_args.kwargs["deposit_amount"], Decimal("75.5"))


class TestSettingsManager(DbPatchedTestCase):
    def test_update_notification_email(self):
        self.db.put_business_setting.return_value = True

        result = SettingsManager.update_setting("notification_email", " owner@shop.com ")

        self.assertEqual(result["settingValue"], "owner@shop.com")
        self.db.put_business_setting.assert_called_once_with("notification_email", "owner@shop.com")

    def test_rejects_invalid_email_and_unknown_key(self):
        with self.assertRaises(ValidationError):
            SettingsManager.update_setting("notification_email", "nope")
        with self.assertRaises(ValidationError):
            SettingsManager.update_setting("theme", "dark")
        self.db.put_business_setting.assert_not_called()
