# =============================================================================
# lib/mailer.py - Outgoing Email
# =============================================================================
# Sends HTML email over SMTP (STARTTLS by default) with optional
# attachments. Failures are reported as a MailResult instead of raised,
# because email is always a side effect of another operation (receipt
# after payment, notification after form submission).
#
# Usage:
#   from lib.mailer import send_email, Attachment
#   result = send_email(["donor@example.org"], "Receipt", html,
#                       attachments=[Attachment("receipt.pdf", pdf_bytes)])
#   if not result.success:
#       logger.warning(result.message)
# =============================================================================

import logging
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

SENDER_NAME = "HARE KRISHNA MOVEMENT INDIA"
REPLY_TO = "aikyavidya@hkmhyderabad.org"


class MailerError(ApplicationError):
    """SMTP delivery failed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="MAILER_ERROR", **kwargs)


@dataclass
class Attachment:
    filename: str
    content: bytes
    maintype: str = "application"
    subtype: str = "pdf"


@dataclass
class MailResult:
    """Outcome of a send attempt."""
    success: bool
    message: str
    message_id: str | None = None
    recipients: list[str] = field(default_factory=list)


def build_message(
    to: list[str],
    subject: str,
    html: str,
    text: str | None = None,
    attachments: list[Attachment] | None = None,
) -> EmailMessage:
    """Assemble a multipart message (text + HTML alternative + attachments)."""
    msg = EmailMessage()
    msg["From"] = formataddr((SENDER_NAME, settings.EMAIL_FROM))
    msg["To"] = ", ".join(to)
    msg["Subject"] = subject
    msg["Reply-To"] = REPLY_TO
    msg["Message-ID"] = make_msgid(domain=settings.EMAIL_FROM.split("@")[-1])

    msg.set_content(text or "This message requires an HTML capable email client.")
    msg.add_alternative(html, subtype="html")

    for attachment in attachments or []:
        msg.add_attachment(
            attachment.content,
            maintype=attachment.maintype,
            subtype=attachment.subtype,
            filename=attachment.filename,
        )
    return msg


def _deliver(msg: EmailMessage) -> None:
    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as smtp:
            if settings.SMTP_USE_TLS:
                smtp.starttls()
            if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        raise MailerError(f"SMTP delivery failed: {e}")


def send_email(
    to: list[str],
    subject: str,
    html: str,
    text: str | None = None,
    attachments: list[Attachment] | None = None,
) -> MailResult:
    """
    Send an email.

    Returns:
        MailResult; success is False when email is disabled, there are no
        recipients, or delivery failed.
    """
    recipients = [r for r in to if r]
    if not settings.email_configured:
        logger.info(f"Email disabled; skipped '{subject}'")
        return MailResult(success=False, message="Email service is not configured")
    if not recipients:
        return MailResult(success=False, message="No recipients")

    msg = build_message(recipients, subject, html, text=text, attachments=attachments)
    try:
        _deliver(msg)
    except MailerError as e:
        logger.error(f"Failed to send '{subject}' to {recipients}: {e.message}")
        return MailResult(success=False, message=e.message, recipients=recipients)

    logger.info(f"Sent '{subject}' to {recipients}")
    return MailResult(
        success=True,
        message="Email sent successfully",
        message_id=msg["Message-ID"],
        recipients=recipients,
    )
