# =============================================================================
# lib/payments.py - Razorpay REST Client
# =============================================================================
# Minimal client for the Razorpay Orders/Payments API over httpx:
# - create_order: amounts are given in rupees and sent in paise
# - fetch_payment: payment status/method after checkout
# - verify_signature: HMAC-SHA256 of "order_id|payment_id" with the key
#   secret, compared in constant time
#
# Usage:
#   gateway = RazorpayGateway.from_settings()
#   order = gateway.create_order(1000, receipt="don_1a2b3c4d_12345678")
# =============================================================================

import hashlib
import hmac
import logging
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class GatewayError(ApplicationError):
    """Error talking to the payment gateway."""

    def __init__(self, message: str, code: str = "GATEWAY_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


def to_paise(amount: float) -> int:
    """Rupees -> integer paise."""
    return int(round(amount * 100))


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 over "order_id|payment_id"."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


class RazorpayGateway:
    """
    Razorpay API client.

    Each call opens a short-lived httpx client with basic auth
    (key id / key secret).
    """

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "RazorpayGateway":
        """
        Build a gateway from RAZORPAY_* settings.

        Raises:
            GatewayError: credentials missing
        """
        if not settings.razorpay_configured:
            raise GatewayError(
                "Razorpay credentials missing",
                code="GATEWAY_NOT_CONFIGURED",
                suggestion="Set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET",
            )
        return cls(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET, settings.RAZORPAY_API_URL)

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            with httpx.Client(auth=(self.key_id, self.key_secret), timeout=self.timeout) as client:
                response = client.request(method, url, json=json)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            description = _error_description(e.response)
            logger.error(f"Razorpay {method} {path} failed ({e.response.status_code}): {description}")
            raise GatewayError(
                description,
                code="GATEWAY_REJECTED",
                details={"status_code": e.response.status_code},
            )
        except httpx.HTTPError as e:
            logger.error(f"Razorpay {method} {path} unreachable: {e}")
            raise GatewayError(f"Payment gateway unreachable: {e}", code="GATEWAY_UNREACHABLE")

    def create_order(
        self,
        amount: float,
        receipt: str,
        notes: dict[str, Any] | None = None,
        currency: str = "INR",
    ) -> dict[str, Any]:
        """
        Create an order.

        Args:
            amount: Amount in rupees (converted to paise)
            receipt: Merchant receipt reference (max 40 chars)
            notes: Free-form key/value notes stored on the order

        Returns:
            Order dict with id, amount (paise), currency, receipt, status
        """
        payload = {
            "amount": to_paise(amount),
            "currency": currency,
            "receipt": receipt[:40],
            "notes": {k: str(v) for k, v in (notes or {}).items() if v is not None},
        }
        order = self._request("POST", "/orders", json=payload)
        logger.info(f"Created Razorpay order {order.get('id')} for {payload['amount']} paise")
        return order

    def fetch_payment(self, payment_id: str) -> dict[str, Any]:
        """Fetch a payment (status, method, bank, vpa, ...)."""
        return self._request("GET", f"/payments/{payment_id}")

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Check the checkout callback signature."""
        expected = compute_signature(order_id, payment_id, self.key_secret)
        return hmac.compare_digest(expected.encode(), (signature or "").encode())


def _error_description(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["description"]
    except (ValueError, KeyError, TypeError):
        return response.text or f"HTTP {response.status_code}"
