# =============================================================================
# tests/test_receipts.py - Donation Receipt Tests
# =============================================================================
# Unit tests for lib/receipts.py: amount formatting, receipt numbers in IST,
# donor/address fallbacks and the HTML/PDF renderers.
# =============================================================================

from datetime import datetime, timezone

import pytest

from lib.receipts import (
    ReceiptError,
    format_address,
    format_inr,
    format_receipt_date,
    generate_receipt_number,
    number_to_words,
    receipt_filename,
    render_receipt_html,
    render_receipt_pdf,
)


@pytest.fixture
def donation():
    """A completed donation as returned by the service layer."""
    return {
        "id": "65a0000000000000000000aa",
        "seva_name": "Annadaan Seva",
        "donor_name": "Asha Rao",
        "donor_email": "asha@example.com",
        "donor_phone": "9876543210",
        "amount": 2501,
        "payment_method": "upi",
        "razorpay_payment_id": "pay_TEST123",
        "payment_status": "completed",
        # 10:00 UTC is 15:30 IST
        "created_at": "2024-03-05T10:00:00+00:00",
    }


class TestFormatting:
    """Tests for number and date formatting."""

    @pytest.mark.parametrize("num,words", [
        (0, "Zero"),
        (7, "Seven"),
        (15, "Fifteen"),
        (42, "Forty Two"),
        (2501, "Two Thousand Five Hundred One"),
        (100000, "One Lakh"),
        (1500000, "Fifteen Lakh"),
        (12345678, "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight"),
    ])
    def test_number_to_words(self, num, words):
        assert number_to_words(num) == words

    @pytest.mark.parametrize("amount,expected", [
        (500, "500"),
        (1500, "1,500"),
        (1234567, "12,34,567"),
        (1500.5, "1,500.5"),
        (1499.999, "1,500"),
    ])
    def test_format_inr(self, amount, expected):
        assert format_inr(amount) == expected

    def test_receipt_date_in_ist(self):
        """20:00 UTC is already the next day in India."""
        assert format_receipt_date("2024-03-05T20:00:00Z") == "06-03-2024"

    def test_receipt_number(self, donation):
        assert generate_receipt_number(donation) == "HKVIDYA/2024/1530"

    def test_receipt_number_from_datetime(self, donation):
        donation["created_at"] = datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc)

        assert generate_receipt_number(donation) == "HKVIDYA/2024/1530"

    def test_receipt_filename(self, donation):
        assert receipt_filename(donation) == "Donation_Receipt_HKVIDYA_2024_1530.pdf"

    def test_missing_created_at_raises(self, donation):
        donation["created_at"] = None

        with pytest.raises(ReceiptError):
            generate_receipt_number(donation)

    def test_address_fallback(self, donation):
        assert format_address(donation) == "N/A"

        donation.update({"house_apartment": "12B", "district": "Hyderabad", "pin_code": "500001"})
        assert format_address(donation) == "12B, Hyderabad, 500001"


class TestRenderers:
    """Tests for the HTML and PDF receipts."""

    def test_html_contains_details(self, donation):
        html = render_receipt_html(donation)

        assert "HKVIDYA/2024/1530" in html
        assert "ASHA RAO" in html
        assert "2,501" in html
        assert "Two Thousand Five Hundred One" in html

    def test_html_anonymous_donor(self, donation):
        donation["is_anonymous"] = True

        html = render_receipt_html(donation)

        assert "ANONYMOUS DONOR" in html
        assert "ASHA RAO" not in html

    def test_html_escapes_donor_input(self, donation):
        donation["donor_name"] = "<script>alert(1)</script>"

        html = render_receipt_html(donation)

        assert "<SCRIPT>" not in html
        assert "&lt;SCRIPT&gt;" in html

    def test_pdf_bytes(self, donation):
        pdf = render_receipt_pdf(donation)

        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 500
