# =============================================================================
# lib/receipts.py - Donation Receipt Rendering
# =============================================================================
# Builds the donor-facing receipt for a completed donation:
# - render_receipt_html: jinja2 template (email body, browser view)
# - render_receipt_pdf: reportlab canvas (email attachment, download)
#
# Amounts are printed in the Indian system (12,34,567 / "Twelve Lakh ...").
# Dates and receipt numbers use India Standard Time.
#
# Usage:
#   from lib.receipts import render_receipt_pdf
#   pdf_bytes = render_receipt_pdf(donation)
# =============================================================================

import io
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from reportlab.lib.colors import HexColor, black, white
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from lib.utils import ApplicationError, ensure_aware

logger = logging.getLogger(__name__)

IST = timezone(timedelta(hours=5, minutes=30), "IST")

TEMPLATE_DIR = Path(__file__).parent / "templates"

ANONYMOUS_NAME = "Anonymous Donor"
DEFAULT_SEVA = "ANNADAAN - Donate any other Amount"

ORGANIZATION = {
    "name": "HARE KRISHNA MOVEMENT INDIA",
    "program": "Hare Krishna Vidya",
    "tagline": "(Serving the Mission of His Divine Grace A.C. Bhaktivedanta Swami Prabhupada)",
    "registration": "A non-profit charitable trust bearing Identification Book IV 188/2015",
    "pan": "AABTH4550P",
    "address": "Hare Krishna Golden Temple, Road No. 12, Banjara Hills, Hyderabad-500034",
    "website": "www.harekrishnavidya.org",
    "email": "aikyavidya@hkmhyderabad.org",
    "phone": "+91-7207619870",
}

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)


class ReceiptError(ApplicationError):
    """Receipt could not be rendered."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="RECEIPT_ERROR", **kwargs)


# =============================================================================
# Formatting Helpers
# =============================================================================

_ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
_TEENS = ["Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen",
          "Sixteen", "Seventeen", "Eighteen", "Nineteen"]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# (divisor, word), largest first
_SCALES = [(10_000_000, "Crore"), (100_000, "Lakh"), (1_000, "Thousand"), (100, "Hundred")]


def number_to_words(num: int) -> str:
    """
    Spell a whole number using Indian scales.

    Example:
        number_to_words(2501)      # "Two Thousand Five Hundred One"
        number_to_words(1500000)   # "Fifteen Lakh"
    """
    num = int(num)
    if num < 0:
        return "Minus " + number_to_words(-num)
    if num == 0:
        return "Zero"
    if num < 10:
        return _ONES[num]
    if num < 20:
        return _TEENS[num - 10]
    if num < 100:
        return _TENS[num // 10] + (" " + _ONES[num % 10] if num % 10 else "")

    for divisor, word in _SCALES:
        if num >= divisor:
            head, rest = divmod(num, divisor)
            words = f"{number_to_words(head)} {word}"
            return words + (" " + number_to_words(rest) if rest else "")
    return ""


def format_inr(amount: float) -> str:
    """
    Group digits the Indian way.

    Example:
        format_inr(1234567)    # "12,34,567"
        format_inr(1500.5)     # "1,500.5"
    """
    negative = amount < 0
    amount = round(abs(amount), 2)
    whole = int(amount)
    fraction = round(amount - whole, 2)

    digits = str(whole)
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])

    if fraction:
        digits += f"{fraction:.2f}"[1:].rstrip("0")
    return ("-" if negative else "") + digits


def _to_ist(value: Any) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        raise ReceiptError(f"Donation has no usable created_at: {value!r}")
    return ensure_aware(value).astimezone(IST)


def format_receipt_date(value: Any) -> str:
    """DD-MM-YYYY in India Standard Time."""
    return _to_ist(value).strftime("%d-%m-%Y")


def generate_receipt_number(donation: dict[str, Any]) -> str:
    """
    Receipt number from the creation time: HKVIDYA/<year>/<HHMM>.

    Example:
        HKVIDYA/2024/1530
    """
    created = _to_ist(donation.get("created_at"))
    return f"HKVIDYA/{created.year}/{created:%H%M}"


def receipt_filename(donation: dict[str, Any]) -> str:
    return f"Donation_Receipt_{generate_receipt_number(donation).replace('/', '_')}.pdf"


def format_address(donation: dict[str, Any]) -> str:
    """Join the postal address parts, or "N/A" when none were given."""
    keys = ["house_apartment", "address", "village", "district", "state", "pin_code"]
    parts = [str(donation[k]).strip() for k in keys if donation.get(k)]
    return ", ".join(p for p in parts if p) or "N/A"


def donor_display_name(donation: dict[str, Any]) -> str:
    if donation.get("is_anonymous"):
        return ANONYMOUS_NAME
    return donation.get("donor_name") or ANONYMOUS_NAME


def receipt_context(donation: dict[str, Any]) -> dict[str, Any]:
    """Values shared by the HTML and PDF renderings."""
    amount = donation.get("amount") or donation.get("seva_amount") or 0
    return {
        "org": ORGANIZATION,
        "receipt_number": generate_receipt_number(donation),
        "receipt_date": format_receipt_date(donation.get("created_at")),
        "donor_name": donor_display_name(donation),
        "donor_email": donation.get("donor_email"),
        "donor_phone": donation.get("donor_phone") or "N/A",
        "address": format_address(donation),
        "seva_name": donation.get("seva_name") or donation.get("campaign") or DEFAULT_SEVA,
        "amount": amount,
        "amount_display": format_inr(amount),
        "amount_words": number_to_words(int(amount)),
        "payment_method": (donation.get("payment_method") or "Online").upper(),
        "reference": donation.get("razorpay_payment_id") or "N/A",
        "wants_80g": bool(donation.get("wants_80g")),
        "pan_number": donation.get("pan_number") if donation.get("wants_80g") else None,
    }


# =============================================================================
# Renderers
# =============================================================================

def render_receipt_html(donation: dict[str, Any]) -> str:
    """Render the HTML receipt."""
    return _env.get_template("donation_receipt.html").render(**receipt_context(donation))


def render_template(name: str, **context: Any) -> str:
    """Render any template in lib/templates."""
    return _env.get_template(name).render(**context)


def render_receipt_pdf(donation: dict[str, Any]) -> bytes:
    """
    Render the PDF receipt (single A4 page).

    Raises:
        ReceiptError: if the donation can't be rendered
    """
    ctx = receipt_context(donation)
    org = ctx["org"]

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4
    margin = 40
    primary = HexColor("#0066CC")
    dark_gray = HexColor("#404040")
    light_gray = HexColor("#808080")

    # Header
    y = height - 50
    c.setFillColor(primary)
    c.setFont("Helvetica-Bold", 20)
    c.drawString(margin, y, org["name"])
    y -= 20

    c.setFillColor(dark_gray)
    c.setFont("Helvetica", 12)
    c.drawString(margin, y, org["program"])
    y -= 14
    c.setFont("Helvetica", 9)
    c.drawString(margin, y, org["tagline"])
    y -= 14
    c.setFont("Helvetica", 8)
    c.drawString(margin, y, org["registration"])
    y -= 14
    c.setFont("Helvetica-Bold", 11)
    c.drawString(margin, y, f"HKM PAN No.: {org['pan']}")
    y -= 14
    c.setFont("Helvetica", 8)
    c.drawString(margin, y, f"Address: {org['address']}")
    y -= 12
    c.setFont("Helvetica", 7)
    c.drawString(margin, y, f"{org['website']}; Email: {org['email']}; Ph: {org['phone']}")
    y -= 30

    # Title bar
    c.setFillColor(black)
    c.rect(margin, y - 5, width - 2 * margin, 20, fill=1, stroke=0)
    c.setFillColor(white)
    c.setFont("Helvetica-Bold", 14)
    c.drawCentredString(width / 2, y, "DONATION RECEIPT")
    y -= 35

    # Details
    label_x = margin + 20
    value_x = margin + 130
    right_label_x = margin + 300
    right_value_x = margin + 380

    def row(label: str, value: str, right: tuple[str, str] | None = None) -> None:
        nonlocal y
        c.drawString(label_x, y, label)
        c.drawString(value_x, y, value[:60])
        if right:
            c.drawString(right_label_x, y, right[0])
            c.drawString(right_value_x, y, right[1][:30])
        y -= 20

    c.setFillColor(black)
    c.setFont("Helvetica", 10)
    row("Receipt No:", ctx["receipt_number"], ("Date:", ctx["receipt_date"]))
    row("Name of the Donor:", ctx["donor_name"])
    row("Email:", ctx["donor_email"] or "N/A", ("Mobile No:", ctx["donor_phone"]))
    row("Address:", ctx["address"])
    row("Amount:", f"Rs. {ctx['amount_display']} /-")
    row("In Words:", f"{ctx['amount_words']} Rupees Only")
    row("Mode of Payment:", ctx["payment_method"], ("Reference No:", ctx["reference"]))
    row("Donated Seva:", ctx["seva_name"], ("Trx Date:", ctx["receipt_date"]))
    row("Required 80G:", "Yes" if ctx["wants_80g"] else "No")
    row("Donor PAN Details:", ctx["pan_number"] or "Not Applicable")
    y -= 20

    # Mantra
    c.setFillColor(primary)
    c.setFont("Helvetica-Oblique", 11)
    c.drawCentredString(width / 2, y, "Hare Krishna Hare Krishna Krishna Krishna Hare Hare")
    y -= 15
    c.drawCentredString(width / 2, y, "Hare Rama Hare Rama Rama Rama Hare Hare")
    y -= 30

    c.setFillColor(light_gray)
    c.setFont("Helvetica", 8)
    c.drawCentredString(width / 2, y, "This is an auto generated receipt and does not require any signature.")

    c.showPage()
    c.save()
    pdf = buf.getvalue()
    logger.debug(f"Rendered receipt {ctx['receipt_number']} ({len(pdf)} bytes)")
    return pdf
