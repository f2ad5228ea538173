"""Tests for notification queuing, recipient resolution and email dispatch."""
import json
import os
import unittest
from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError

import email_utils
import notification_manager
from notification_manager import (
    FALLBACK_NOTIFICATION_EMAIL,
    NotificationDispatcher,
    NotificationManager,
    build_notification_payload,
)


def _request_data(**overrides):
    data = {
        "orderId": "req-1",
        "customerName": "Jane Doe",
        "customerEmail": "jane@example.com",
        "customerPhone": "555-123-4567",
        "cakeType": "Tiered",
        "eventType": "Wedding",
        "eventDate": "2026-11-14",
        "servings": 120,
        "budget": "$400",
        "requestDetails": "Three tiers",
    }
    data.update(overrides)
    return data


class TestNotificationPayload(unittest.TestCase):
    def test_missing_optionals_become_empty_strings(self):
        payload = build_notification_payload("req-1", {
            "customer_name": "Jane Doe",
            "customer_phone": "555",
            "cake_type": "Sheet",
            "event_date": "2026-11-14",
            "request_details": "Plain",
            "customer_email": None,
            "servings": None,
        })

        self.assertEqual(payload["orderId"], "req-1")
        self.assertEqual(payload["customerEmail"], "")
        self.assertEqual(payload["budget"], "")
        self.assertIsNone(payload["servings"])


class TestNotificationManager(unittest.TestCase):
    def setUp(self):
        self.manager = NotificationManager()
        self.manager.lambda_client = MagicMock()
        self.manager.notification_function_name = "send-order-notification"

    def test_async_invocation(self):
        self.manager.lambda_client.invoke.return_value = {"StatusCode": 202}

        self.assertTrue(self.manager.queue_order_request_notification({"orderId": "req-1"}))

        kwargs = self.manager.lambda_client.invoke.call_args.kwargs
        self.assertEqual(kwargs["InvocationType"], "Event")
        event = json.loads(kwargs["Payload"])
        self.assertEqual(event["httpMethod"], "POST")
        self.assertEqual(json.loads(event["body"]), {"orderId": "req-1"})

    def test_invoke_error_returns_false(self):
        self.manager.lambda_client.invoke.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "missing"}}, "Invoke"
        )
        self.assertFalse(self.manager.queue_order_request_notification({"orderId": "req-1"}))

    def test_unconfigured_function_returns_false(self):
        self.manager.notification_function_name = ""
        self.assertFalse(self.manager.queue_order_request_notification({"orderId": "req-1"}))
        self.manager.lambda_client.invoke.assert_not_called()


class TestRecipientResolution(unittest.TestCase):
    def test_setting_wins(self):
        with patch.object(notification_manager.db, "get_business_setting", return_value=" owner@shop.com "):
            self.assertEqual(NotificationDispatcher.resolve_recipient(), "owner@shop.com")

    def test_env_default_when_setting_missing(self):
        with patch.object(notification_manager.db, "get_business_setting", return_value=None), \
                patch.dict(os.environ, {"DEFAULT_NOTIFICATION_EMAIL": "env@shop.com"}):
            self.assertEqual(NotificationDispatcher.resolve_recipient(), "env@shop.com")

    def test_invalid_setting_falls_back(self):
        with patch.object(notification_manager.db, "get_business_setting", return_value="not-an-email"), \
                patch.dict(os.environ, {"DEFAULT_NOTIFICATION_EMAIL": ""}):
            self.assertEqual(NotificationDispatcher.resolve_recipient(), FALLBACK_NOTIFICATION_EMAIL)


class TestDispatcher(unittest.TestCase):
    def setUp(self):
        self.dispatcher = NotificationDispatcher(api_key="re_test")
        patcher = patch.object(NotificationDispatcher, "resolve_recipient", return_value="owner@shop.com")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_both_emails_sent(self):
        with patch.object(email_utils, "send_email", return_value=True) as send:
            result = self.dispatcher.notify(_request_data())

        self.assertEqual(result, {"operatorNotified": True, "customerNotified": True})
        recipients = [c.args[0] for c in send.call_args_list]
        self.assertEqual(recipients, ["owner@shop.com", "jane@example.com"])

    def test_no_customer_email_only_notifies_operator(self):
        with patch.object(email_utils, "send_email", return_value=True) as send:
            result = self.dispatcher.notify(_request_data(customerEmail=""))

        self.assertEqual(result, {"operatorNotified": True, "customerNotified": False})
        send.assert_called_once()

    def test_operator_failure_does_not_block_customer(self):
        with patch.object(email_utils, "send_email", side_effect=[False, True]):
            result = self.dispatcher.notify(_request_data())

        self.assertEqual(result, {"operatorNotified": False, "customerNotified": True})

    def test_non_string_customer_email_does_not_raise(self):
        with patch.object(email_utils, "send_email", return_value=False) as send:
            result = self.dispatcher.notify(_request_data(customerEmail=12345))

        self.assertEqual(result, {"operatorNotified": False, "customerNotified": False})
        self.assertEqual(send.call_args_list[1].args[0], "12345")

    def test_exception_in_one_send_is_contained(self):
        with patch.object(email_utils, "send_email", side_effect=[True, RuntimeError("boom")]):
            result = self.dispatcher.notify(_request_data())

        self.assertEqual(result, {"operatorNotified": True, "customerNotified": False})

    def test_is_configured(self):
        self.assertTrue(self.dispatcher.is_configured())
        with patch.object(email_utils, "RESEND_API_KEY", None):
            self.assertFalse(NotificationDispatcher().is_configured())
