# =============================================================================
# core/services/form_service.py - Dynamic Form Business Logic
# =============================================================================
# Handles form definitions, submissions and submission notifications.
# Validation itself lives in lib/form_engine.py; this service loads the
# definition, runs the engine and persists what the engine accepts.
# =============================================================================

import html
import logging
import re
from typing import Any

import pymongo

from app.exceptions import FormValidationError, ResourceNotFoundError
from core.models.form import (
    EmailTemplateCreate,
    FormCreate,
    FormField,
    FormUpdate,
    FormValidationResult,
)
from core.services.common import (
    delete_document,
    find_by_id,
    insert_document,
    paginate,
    require_object_id,
    update_document,
)
from lib import form_engine
from lib.mailer import MailResult, send_email
from lib.mongo_client import Collections, MongoClient
from lib.receipts import render_template
from lib.utils import serialize_document, serialize_documents, utcnow

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\{\{\s*([\w.-]+)\s*\}\}")


def fill_placeholders(template: str, data: dict[str, Any], escape: bool = True) -> str:
    """
    Replace {{field}} placeholders with submitted values.

    Unknown placeholders become empty strings; values are HTML-escaped
    unless `escape` is False (plain-text subjects).
    """
    def _value(match: re.Match) -> str:
        value = data.get(match.group(1), "")
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        text = "" if value is None else str(value)
        return html.escape(text) if escape else text

    return PLACEHOLDER.sub(_value, template)


def _fields(form: dict[str, Any]) -> list[FormField]:
    return [FormField.model_validate(f) for f in form.get("fields", [])]


class FormService:
    """Service for dynamic forms and their submissions."""

    # -------------------------------------------------------------------------
    # Form Definitions
    # -------------------------------------------------------------------------

    @staticmethod
    def create_form(payload: FormCreate, created_by: str | None = None) -> dict[str, Any]:
        data = payload.model_dump(mode="json")
        data["created_by"] = created_by
        form = insert_document(Collections.FORMS, data)
        logger.info(f"Created form: {form['id']} ({form['title']})")
        return form

    @staticmethod
    def _raw_form(form_id: str) -> dict[str, Any]:
        return find_by_id(Collections.FORMS, form_id, "Form")

    @staticmethod
    def get_form(form_id: str) -> dict[str, Any]:
        return serialize_document(FormService._raw_form(form_id))

    @staticmethod
    def get_form_for_page(page: str) -> dict[str, Any]:
        """
        The most recently updated active form for a site page.

        Raises:
            ResourceNotFoundError: no active form on that page
        """
        doc = MongoClient.collection(Collections.FORMS).find_one(
            {"page": page, "is_active": True},
            sort=[("updated_at", pymongo.DESCENDING)],
        )
        if doc is None:
            raise ResourceNotFoundError("Form", page)
        return serialize_document(doc)

    @staticmethod
    def list_forms(page: int = 1, limit: int = 20) -> tuple[list[dict[str, Any]], int]:
        """Forms newest first, each with its submission count."""
        forms, total = paginate(
            Collections.FORMS, {}, [("created_at", pymongo.DESCENDING)], page, limit
        )
        submissions = MongoClient.collection(Collections.FORM_SUBMISSIONS)
        for form in forms:
            form["submission_count"] = submissions.count_documents(
                {"form_id": require_object_id(form["id"])}
            )
        return forms, total

    @staticmethod
    def update_form(form_id: str, payload: FormUpdate, updated_by: str | None = None) -> dict[str, Any]:
        changes = payload.model_dump(mode="json", exclude_none=True)
        changes["updated_by"] = updated_by
        form = update_document(Collections.FORMS, form_id, changes, "Form")
        logger.info(f"Updated form: {form_id}")
        return form

    @staticmethod
    def delete_form(form_id: str) -> int:
        """
        Delete a form and all of its submissions.

        Returns:
            Number of submissions removed
        """
        deleted = delete_document(Collections.FORMS, form_id, "Form")
        result = MongoClient.collection(Collections.FORM_SUBMISSIONS).delete_many({"form_id": deleted["_id"]})
        logger.info(f"Deleted form {form_id} and {result.deleted_count} submissions")
        return result.deleted_count

    # -------------------------------------------------------------------------
    # Validation & Submission
    # -------------------------------------------------------------------------

    @staticmethod
    def validate(form_id: str, values: dict[str, Any]) -> FormValidationResult:
        """Dry run: validate values without storing anything."""
        fields = _fields(FormService._raw_form(form_id))
        values = form_engine.apply_defaults(fields, values)
        errors = form_engine.validate_submission(fields, values)
        return FormValidationResult(
            valid=not errors,
            errors=errors,
            visible_fields=[f.name for f in form_engine.visible_fields(fields, values)],
        )

    @staticmethod
    def submit(
        form_id: str,
        values: dict[str, Any],
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> dict[str, Any]:
        """
        Validate and store a submission, then notify recipients.

        Only values of visible fields are stored. A notification failure is
        logged and reported but never fails the submission.

        Raises:
            ResourceNotFoundError: form missing or inactive
            FormValidationError: one or more fields failed validation
        """
        form = FormService._raw_form(form_id)
        if not form.get("is_active", True):
            raise ResourceNotFoundError("Form", form_id)

        fields = _fields(form)
        values = form_engine.apply_defaults(fields, values)
        errors = form_engine.validate_submission(fields, values)
        if errors:
            logger.info(f"Rejected submission for form {form_id}: {sorted(errors)}")
            raise FormValidationError(errors)

        data = form_engine.extract_visible_values(fields, values)
        submission = insert_document(Collections.FORM_SUBMISSIONS, {
            "form_id": form["_id"],
            "data": data,
            "ip_address": ip_address,
            "user_agent": user_agent,
        })
        logger.info(f"Stored submission {submission['id']} for form {form_id}")

        notification = FormService.notify(form, data)
        submission["email_sent"] = bool(notification and notification.success)
        return submission

    @staticmethod
    def notify(form: dict[str, Any], data: dict[str, Any]) -> MailResult | None:
        """
        Email recipients about a new submission, when the form asks for it.

        Uses the configured email template when one exists, otherwise a
        generic table of label/value rows.
        """
        settings_ = form.get("email_settings") or {}
        recipients = settings_.get("recipient_emails") or []
        if not settings_.get("send_email_on_submission") or not recipients:
            return None

        template = None
        template_id = settings_.get("email_template_id")
        if template_id:
            template = MongoClient.collection(Collections.EMAIL_TEMPLATES).find_one(
                {"_id": require_object_id(template_id)}
            )
            if template is None:
                logger.warning(f"Email template {template_id} not found; using default notification")

        if template:
            subject = fill_placeholders(template["subject"], data, escape=False)
            body = fill_placeholders(template["body"], data)
        else:
            labels = {f["name"]: f.get("label", f["name"]) for f in form.get("fields", [])}
            subject = f"New submission: {form.get('title', 'Form')}"
            body = render_template(
                "form_notification.html",
                form_title=form.get("title", "Form"),
                rows=[(labels.get(k, k), v) for k, v in data.items()],
                submitted_at=utcnow().strftime("%Y-%m-%d %H:%M UTC"),
            )

        result = send_email(recipients, subject, body)
        if not result.success:
            logger.warning(f"Submission notification for form {form['_id']} not sent: {result.message}")
        return result

    # -------------------------------------------------------------------------
    # Submissions
    # -------------------------------------------------------------------------

    @staticmethod
    def list_submissions(form_id: str, page: int = 1, limit: int = 20) -> tuple[list[dict[str, Any]], int]:
        form = FormService._raw_form(form_id)
        return paginate(
            Collections.FORM_SUBMISSIONS,
            {"form_id": form["_id"]},
            [("created_at", pymongo.DESCENDING)],
            page,
            limit,
        )

    @staticmethod
    def get_submission(submission_id: str) -> dict[str, Any]:
        return serialize_document(find_by_id(Collections.FORM_SUBMISSIONS, submission_id, "Submission"))

    @staticmethod
    def delete_submission(submission_id: str) -> None:
        delete_document(Collections.FORM_SUBMISSIONS, submission_id, "Submission")
        logger.info(f"Deleted submission: {submission_id}")

    # -------------------------------------------------------------------------
    # Email Templates
    # -------------------------------------------------------------------------

    @staticmethod
    def create_email_template(payload: EmailTemplateCreate, created_by: str | None = None) -> dict[str, Any]:
        template = insert_document(Collections.EMAIL_TEMPLATES, {**payload.model_dump(), "created_by": created_by})
        logger.info(f"Created email template: {template['id']}")
        return template

    @staticmethod
    def list_email_templates() -> list[dict[str, Any]]:
        cursor = MongoClient.collection(Collections.EMAIL_TEMPLATES).find().sort("created_at", pymongo.DESCENDING)
        return serialize_documents(list(cursor))
