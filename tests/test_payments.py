# =============================================================================
# tests/test_payments.py - Razorpay Client & Mailer Tests
# =============================================================================

import hashlib
import hmac
from unittest.mock import MagicMock, patch

import httpx
import pytest

from app.config import settings
from lib.mailer import Attachment, MailerError, build_message, send_email
from lib.payments import GatewayError, RazorpayGateway, compute_signature, to_paise


@pytest.fixture
def gateway():
    return RazorpayGateway("rzp_test_key", "secret", base_url="https://razorpay.test/v1/")


# =============================================================================
# Signatures & Amounts
# =============================================================================

class TestSignature:
    """Tests for the checkout signature check."""

    def test_compute_signature(self):
        expected = hmac.new(b"secret", b"order_1|pay_1", hashlib.sha256).hexdigest()

        assert compute_signature("order_1", "pay_1", "secret") == expected

    def test_verify_signature(self, gateway):
        good = compute_signature("order_1", "pay_1", "secret")

        assert gateway.verify_signature("order_1", "pay_1", good) is True
        assert gateway.verify_signature("order_1", "pay_2", good) is False
        assert gateway.verify_signature("order_1", "pay_1", "") is False

    def test_non_ascii_signature_is_rejected(self, gateway):
        assert gateway.verify_signature("order_1", "pay_1", "é") is False

    @pytest.mark.parametrize("rupees,paise", [(1000, 100000), (499.99, 49999), (0.1, 10)])
    def test_to_paise(self, rupees, paise):
        assert to_paise(rupees) == paise


# =============================================================================
# REST Calls
# =============================================================================

class TestGateway:
    """Tests for order creation and error mapping."""

    def test_base_url_trailing_slash(self, gateway):
        assert gateway.base_url == "https://razorpay.test/v1"

    def test_create_order_payload(self, gateway):
        with patch.object(gateway, "_request", return_value={"id": "order_1"}) as mock_request:
            order = gateway.create_order(1500, receipt="r" * 50, notes={"donor": "Asha", "skip": None})

        assert order == {"id": "order_1"}
        method, path = mock_request.call_args.args
        payload = mock_request.call_args.kwargs["json"]
        assert (method, path) == ("POST", "/orders")
        assert payload["amount"] == 150000
        assert len(payload["receipt"]) == 40
        assert payload["notes"] == {"donor": "Asha"}

    def test_http_error_becomes_gateway_error(self, gateway):
        """Razorpay's error description is surfaced."""
        request = httpx.Request("POST", "https://razorpay.test/v1/orders")
        response = httpx.Response(400, json={"error": {"description": "Amount too small"}}, request=request)
        error = httpx.HTTPStatusError("bad", request=request, response=response)

        mock_client = MagicMock()
        mock_client.__enter__.return_value.request.return_value.raise_for_status.side_effect = error
        with patch("lib.payments.httpx.Client", return_value=mock_client):
            with pytest.raises(GatewayError) as exc:
                gateway.create_order(0.5, receipt="r")

        assert exc.value.message == "Amount too small"
        assert exc.value.details["status_code"] == 400

    def test_unreachable(self, gateway):
        mock_client = MagicMock()
        mock_client.__enter__.return_value.request.side_effect = httpx.ConnectError("refused")
        with patch("lib.payments.httpx.Client", return_value=mock_client):
            with pytest.raises(GatewayError) as exc:
                gateway.fetch_payment("pay_1")

        assert exc.value.code == "GATEWAY_UNREACHABLE"

    def test_from_settings_requires_keys(self, monkeypatch):
        monkeypatch.setattr(settings, "RAZORPAY_KEY_ID", "")

        with pytest.raises(GatewayError):
            RazorpayGateway.from_settings()


# =============================================================================
# Mailer
# =============================================================================

class TestMailer:
    """Tests for message assembly and delivery outcomes."""

    def test_build_message_with_attachment(self):
        msg = build_message(
            ["donor@example.org"],
            "Receipt",
            "<p>Thank you</p>",
            attachments=[Attachment("receipt.pdf", b"%PDF-1.4")],
        )

        assert msg["To"] == "donor@example.org"
        assert msg["Subject"] == "Receipt"
        names = [part.get_filename() for part in msg.iter_attachments()]
        assert names == ["receipt.pdf"]

    def test_disabled_email_is_not_sent(self, monkeypatch):
        monkeypatch.setattr(settings, "EMAIL_ENABLED", False)

        with patch("lib.mailer._deliver") as mock_deliver:
            result = send_email(["donor@example.org"], "Receipt", "<p>x</p>")

        assert result.success is False
        mock_deliver.assert_not_called()

    def test_delivery_failure_is_reported(self, monkeypatch):
        monkeypatch.setattr(settings, "EMAIL_ENABLED", True)
        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test")

        with patch("lib.mailer._deliver", side_effect=MailerError("SMTP delivery failed: refused")):
            result = send_email(["donor@example.org", ""], "Receipt", "<p>x</p>")

        assert result.success is False
        assert result.recipients == ["donor@example.org"]

    def test_successful_send(self, monkeypatch):
        monkeypatch.setattr(settings, "EMAIL_ENABLED", True)
        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test")

        with patch("lib.mailer._deliver") as mock_deliver:
            result = send_email(["donor@example.org"], "Receipt", "<p>x</p>")

        assert result.success is True
        assert result.message_id
        mock_deliver.assert_called_once()
