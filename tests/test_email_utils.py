"""Tests for email transport helpers and templates."""
import unittest
from unittest.mock import MagicMock, patch

import requests
from botocore.exceptions import ClientError

import email_utils


class TestSendEmail(unittest.TestCase):
    def test_posts_to_resend(self):
        response = MagicMock(ok=True, status_code=200)
        response.json.return_value = {"id": "msg-1"}

        with patch.object(email_utils.requests, "post", return_value=response) as post:
            self.assertTrue(email_utils.send_email("owner@shop.com", "Hi", "<p>Hi</p>", api_key="re_test"))

        kwargs = post.call_args.kwargs
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer re_test")
        self.assertEqual(kwargs["json"]["to"], ["owner@shop.com"])
        self.assertEqual(kwargs["json"]["from"], email_utils.MAIL_FROM_ADDRESS)
        self.assertEqual(kwargs["timeout"], email_utils.REQUEST_TIMEOUT_SECONDS)

    def test_api_error_returns_false(self):
        response = MagicMock(ok=False, status_code=422)
        response.json.return_value = {"message": "Invalid `to` field"}

        with patch.object(email_utils.requests, "post", return_value=response):
            self.assertFalse(email_utils.send_email("bad", "Hi", "<p>Hi</p>", api_key="re_test"))

    def test_network_error_returns_false(self):
        with patch.object(email_utils.requests, "post", side_effect=requests.ConnectionError("down")):
            self.assertFalse(email_utils.send_email("owner@shop.com", "Hi", "<p>Hi</p>", api_key="re_test"))

    def test_missing_api_key(self):
        with patch.object(email_utils, "RESEND_API_KEY", None), \
                patch.object(email_utils.requests, "post") as post:
            self.assertFalse(email_utils.send_email("owner@shop.com", "Hi", "<p>Hi</p>"))
        post.assert_not_called()


class TestSesTextEmail(unittest.TestCase):
    def test_sends_plain_text(self):
        with patch.object(email_utils.ses_client, "send_email", return_value={"MessageId": "ses-1"}) as send:
            self.assertTrue(email_utils.send_ses_text_email("shop@shop.com", "alerts@shop.com", "Subj", "Body"))

        kwargs = send.call_args.kwargs
        self.assertEqual(kwargs["Source"], "shop@shop.com")
        self.assertEqual(kwargs["Message"]["Body"], {"Text": {"Data": "Body", "Charset": "UTF-8"}})

    def test_ses_error_returns_false(self):
        error = ClientError({"Error": {"Code": "MessageRejected", "Message": "unverified"}}, "SendEmail")
        with patch.object(email_utils.ses_client, "send_email", side_effect=error):
            self.assertFalse(email_utils.send_ses_text_email("shop@shop.com", "alerts@shop.com", "Subj", "Body"))


class TestTemplates(unittest.TestCase):
    def test_format_event_date(self):
        self.assertEqual(email_utils.format_event_date("2026-11-14"), "Saturday, November 14, 2026")
        self.assertEqual(email_utils.format_event_date(""), "Not specified")
        self.assertEqual(email_utils.format_event_date("someday"), "someday")

    def test_operator_email_escapes_customer_input(self):
        subject, body = email_utils.build_operator_notification_email({
            "orderId": "req-1",
            "customerName": "Jane <script>",
            "requestDetails": "<b>big</b>",
            "eventDate": "2026-11-14",
        })

        self.assertEqual(subject, "New Order Request from Jane <script>")
        self.assertIn("Jane &lt;script&gt;", body)
        self.assertIn("&lt;b&gt;big&lt;/b&gt;", body)
        self.assertIn("Not provided", body)
        self.assertIn("Saturday, November 14, 2026", body)

    def test_customer_confirmation(self):
        subject, body = email_utils.build_customer_confirmation_email({
            "orderId": "req-1",
            "customerName": "Jane",
            "servings": 40,
        })

        self.assertEqual(subject, "We Received Your Cake Order Request! 🎂")
        self.assertIn("Dear Jane,", body)
        self.assertIn("Reference: req-1", body)

    def test_legacy_summary(self):
        subject, text = email_utils.build_legacy_order_summary({
            "orderId": "order-1",
            "customerName": "Jane",
            "notificationType": "order_confirmed",
            "servings": 0,
        })

        self.assertEqual(subject, "Order confirmed: Jane")
        lines = text.split("\n")
        self.assertEqual(lines[0], "Order ID: order-1")
        self.assertIn("Email: N/A", lines)
        self.assertIn("Servings: 0", lines)
        self.assertEqual(len(lines), 10)

        subject, _ = email_utils.build_legacy_order_summary({"orderId": "order-1", "customerName": "Jane"})
        self.assertEqual(subject, "Order update: Jane")
