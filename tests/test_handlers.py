"""HTTP contract tests for the Lambda handlers."""
import json
import unittest
from unittest.mock import MagicMock, patch

import email_utils
import order_request_manager
from conftest import api_event, load_handler

submit_handler = load_handler("api-submit-order-request")
notification_handler = load_handler("api-send-order-notification")
legacy_handler = load_handler("api-send-order-notification-legacy")
convert_handler = load_handler("api-convert-order-request")
get_orders_handler = load_handler("api-get-orders")


def _body(response):
    return json.loads(response["body"])


def _form(**overrides):
    form = {
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "customer_phone": "555-123-4567",
        "cake_type": "Tiered",
        "event_date": "2099-11-14",
        "request_details": "Three tiers",
    }
    form.update(overrides)
    return form


class TestSubmitOrderRequest(unittest.TestCase):
    def setUp(self):
        manager = submit_handler.submission_manager
        self.rate_limiter = MagicMock()
        self.rate_limiter.is_order_request_allowed.return_value = True
        self.notifier = MagicMock()
        self.notifier.queue_order_request_notification.return_value = True

        patches = [
            patch.object(manager, "rate_limiter", self.rate_limiter),
            patch.object(manager, "notifier", self.notifier),
            patch.object(order_request_manager.db, "create_order_request", return_value=True),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def test_preflight(self):
        response = submit_handler.lambda_handler(api_event("OPTIONS"), None)

        self.assertEqual(response["statusCode"], 204)
        self.assertEqual(response["body"], "")
        self.assertEqual(response["headers"]["Access-Control-Allow-Origin"], "*")

    def test_get_not_allowed(self):
        response = submit_handler.lambda_handler(api_event("GET"), None)
        self.assertEqual(response["statusCode"], 405)

    def test_success(self):
        response = submit_handler.lambda_handler(api_event(body=_form()), None)

        self.assertEqual(response["statusCode"], 200)
        body = _body(response)
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Order request submitted successfully")
        self.assertTrue(body["id"])
        self.notifier.queue_order_request_notification.assert_called_once()

    def test_rate_limited(self):
        self.rate_limiter.is_order_request_allowed.return_value = False

        response = submit_handler.lambda_handler(api_event(body=_form()), None)

        self.assertEqual(response["statusCode"], 429)
        self.assertEqual(response["headers"]["Retry-After"], "3600")
        self.assertEqual(_body(response)["retryAfter"], 3600)
        order_request_manager.db.create_order_request.assert_not_called()

    def test_rate_limit_uses_forwarded_ip(self):
        event = api_event(body=_form(), headers={"x-forwarded-for": "198.51.100.9, 10.0.0.1"})
        submit_handler.lambda_handler(event, None)

        self.rate_limiter.is_order_request_allowed.assert_called_once_with("198.51.100.9")

    def test_validation_error(self):
        response = submit_handler.lambda_handler(api_event(body=_form(servings=5)), None)

        self.assertEqual(response["statusCode"], 400)
        self.assertEqual(_body(response), {"error": "Servings must be between 6 and 500"})

    def test_invalid_json(self):
        response = submit_handler.lambda_handler(api_event(body="{not json"), None)
        self.assertEqual(response["statusCode"], 400)

    def test_honeypot_looks_like_success(self):
        response = submit_handler.lambda_handler(api_event(body=_form(honeypot="spam")), None)

        self.assertEqual(response["statusCode"], 200)
        self.assertEqual(set(_body(response)), {"success", "id", "message"})
        order_request_manager.db.create_order_request.assert_not_called()
        self.notifier.queue_order_request_notification.assert_not_called()

    def test_storage_failure(self):
        order_request_manager.db.create_order_request.return_value = False

        response = submit_handler.lambda_handler(api_event(body=_form()), None)

        self.assertEqual(response["statusCode"], 500)
        self.assertEqual(_body(response), {"error": "Failed to submit order request"})

    def test_unexpected_error(self):
        order_request_manager.db.create_order_request.side_effect = KeyError("boom")

        response = submit_handler.lambda_handler(api_event(body=_form()), None)

        self.assertEqual(response["statusCode"], 500)
        self.assertEqual(_body(response), {"error": "An unexpected error occurred"})

    def test_notification_failure_still_succeeds(self):
        self.notifier.queue_order_request_notification.return_value = False

        response = submit_handler.lambda_handler(api_event(body=_form(customer_email="")), None)

        self.assertEqual(response["statusCode"], 200)


class TestSendOrderNotification(unittest.TestCase):
    def test_not_configured(self):
        with patch.object(email_utils, "RESEND_API_KEY", None):
            response = notification_handler.lambda_handler(api_event(body={"orderId": "req-1"}), None)

        self.assertEqual(response["statusCode"], 500)
        self.assertEqual(_body(response), {"error": "Email service not configured"})

    def test_reports_each_recipient(self):
        dispatch_result = {"operatorNotified": True, "customerNotified": False}
        with patch.object(email_utils, "RESEND_API_KEY", "re_test"), \
                patch.object(notification_handler.NotificationDispatcher, "notify", return_value=dispatch_result):
            response = notification_handler.lambda_handler(api_event(body={"orderId": "req-1"}), None)

        self.assertEqual(response["statusCode"], 200)
        self.assertEqual(_body(response), {"success": True, "bakerNotified": True, "customerNotified": False})


class TestLegacyNotification(unittest.TestCase):
    def test_missing_fields(self):
        response = legacy_handler.lambda_handler(api_event(body={"orderId": "order-1"}), None)

        self.assertEqual(response["statusCode"], 400)
        self.assertEqual(_body(response), {"error": "Missing orderId or customerName"})

    def test_no_recipient_configured(self):
        with patch.object(email_utils, "ALERT_TO_EMAIL", None), patch.object(email_utils, "DEFAULT_SENDER_EMAIL", None):
            response = legacy_handler.lambda_handler(
                api_event(body={"orderId": "order-1", "customerName": "Jane"}), None
            )
        self.assertEqual(response["statusCode"], 500)

    def test_sends_summary(self):
        with patch.object(email_utils, "ALERT_TO_EMAIL", "alerts@shop.com"), \
                patch.object(email_utils, "DEFAULT_SENDER_EMAIL", "shop@shop.com"), \
                patch.object(email_utils, "send_ses_text_email", return_value=True) as send:
            response = legacy_handler.lambda_handler(api_event(body={
                "orderId": "order-1", "customerName": "Jane", "notificationType": "order_confirmed",
            }), None)

        self.assertEqual(response["statusCode"], 200)
        self.assertEqual(_body(response), {"ok": True})
        source, recipient, subject = send.call_args.args[:3]
        self.assertEqual((source, recipient, subject), ("shop@shop.com", "alerts@shop.com", "Order confirmed: Jane"))

    def test_send_failure(self):
        with patch.object(email_utils, "ALERT_TO_EMAIL", "alerts@shop.com"), \
                patch.object(email_utils, "send_ses_text_email", return_value=False):
            response = legacy_handler.lambda_handler(
                api_event(body={"orderId": "order-1", "customerName": "Jane"}), None
            )

        self.assertEqual(response["statusCode"], 500)
        self.assertEqual(_body(response), {"error": "Failed to send email"})

    def test_put_not_allowed(self):
        self.assertEqual(legacy_handler.lambda_handler(api_event("PUT"), None)["statusCode"], 405)


class TestDashboardHandlers(unittest.TestCase):
    def test_conversion_requires_operator(self):
        response = convert_handler.lambda_handler(api_event(body={"requestId": "req-1"}), None)
        self.assertEqual(response["statusCode"], 401)

    def test_conversion_returns_order_id(self):
        with patch.object(convert_handler.RequestConversionManager, "convert", return_value="order-9") as convert:
            response = convert_handler.lambda_handler(
                api_event(body={"requestId": "req-1"}, operator_id="operator-1"), None
            )

        self.assertEqual(response["statusCode"], 200)
        self.assertEqual(_body(response)["orderId"], "order-9")
        convert.assert_called_once_with("req-1", "operator-1")

    def test_get_orders_bad_range(self):
        response = get_orders_handler.lambda_handler(
            api_event("GET", query={"startDate": "2026-12-01", "endDate": "2026-11-01"}, operator_id="operator-1"),
            None,
        )
        self.assertEqual(response["statusCode"], 400)
