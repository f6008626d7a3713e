# =============================================================================
# lib/exporter.py - Donation CSV Export
# =============================================================================
# Two exports built with pandas:
# - append_submission: every donation form submission is appended to a
#   running CSV under EXPORT_DIR (a paper trail independent of the DB)
# - donations_to_csv: on-demand export of donation documents for admins
# =============================================================================

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from app.config import settings
from core.models.donation import EXPORT_FIELDS

logger = logging.getLogger(__name__)

SUBMISSIONS_FILENAME = "donation-form-submissions.csv"

SUBMISSION_COLUMNS = ["submitted_at"] + EXPORT_FIELDS

DONATION_COLUMNS = [
    "id",
    "created_at",
    "payment_status",
    "amount",
    "currency",
    "razorpay_order_id",
    "razorpay_payment_id",
    "payment_method",
] + [f for f in EXPORT_FIELDS if f != "seva_amount"] + ["notes"]


def submissions_path() -> Path:
    return Path(settings.EXPORT_DIR) / SUBMISSIONS_FILENAME


def _frame(rows: list[dict[str, Any]], columns: list[str]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=columns)
    # Booleans as lowercase words, missing values as empty cells
    for col in df.columns:
        if df[col].dtype == bool:
            df[col] = df[col].map({True: "true", False: "false"})
    return df.fillna("")


def append_submission(data: dict[str, Any], submitted_at: str) -> bool:
    """
    Append one donation form submission to the running CSV.

    The file (and its header row) is created on first use.

    Returns:
        True on success. Export problems are logged and never interrupt
        the donation flow.
    """
    path = submissions_path()
    row = {"submitted_at": submitted_at, **{k: data.get(k) for k in EXPORT_FIELDS}}
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _frame([row], SUBMISSION_COLUMNS).to_csv(
            path, mode="a", header=not path.exists(), index=False
        )
    except OSError as e:
        logger.error(f"Failed to append donation submission to {path}: {e}")
        return False
    return True


def donations_to_csv(donations: list[dict[str, Any]]) -> str:
    """
    Render serialized donation documents as CSV text.

    Example:
        csv_text = donations_to_csv(DonationService.export_donations(status="completed"))
    """
    return _frame(donations, DONATION_COLUMNS).to_csv(index=False)
