# =============================================================================
# core/models/form.py - Dynamic Form Schemas
# =============================================================================
# A dynamic form is an ordered list of field definitions. Each field carries:
# - a type tag (text, email, number, ...)
# - a validation rule set (required, pattern, length and numeric bounds)
# - an optional conditional-visibility rule referencing another field
#
# Forms are attached to a site page ("contact", "volunteer", ...) and
# rendered by the frontend; submissions are validated server-side by
# lib/form_engine.py against the same definition.
# =============================================================================

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class FieldType(str, Enum):
    """Supported input types."""
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DATE = "date"
    FILE = "file"


class FieldOption(BaseModel):
    """One choice of a select/radio/checkbox field."""
    label: str
    value: Any


class FieldValidation(BaseModel):
    """
    Validation rules for a field.

    Length rules apply to string values, min/max to numeric values.
    `custom_message` replaces every default message for the field.
    """
    required: bool = False
    pattern: str | None = None
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    min: float | None = None
    max: float | None = None
    custom_message: str | None = None

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str | None) -> str | None:
        if v:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid pattern: {e}")
        return v


class FieldConditional(BaseModel):
    """
    Conditional visibility rule.

    With `show_when` set the field is shown only when the dependent field
    equals it; otherwise with `hide_when` set the field is hidden when the
    dependent field equals it.
    """
    depends_on: str | None = None
    show_when: Any = None
    hide_when: Any = None


class FormField(BaseModel):
    """A single field definition."""
    name: str = Field(..., min_length=1, max_length=100)
    label: str = Field(..., min_length=1)
    type: FieldType
    placeholder: str | None = None
    default_value: Any = None
    options: list[FieldOption] = Field(default_factory=list)
    validation: FieldValidation = Field(default_factory=FieldValidation)
    conditional: FieldConditional | None = None
    order: int = 0
    is_active: bool = True


class EmailSettings(BaseModel):
    """Notification settings for new submissions."""
    send_email_on_submission: bool = False
    email_template_id: str | None = None
    recipient_emails: list[str] = Field(default_factory=list)


def _check_fields(fields: list[FormField]) -> list[FormField]:
    names = [f.name for f in fields]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate field names: {', '.join(duplicates)}")

    known = set(names)
    for f in fields:
        if f.conditional and f.conditional.depends_on:
            if f.conditional.depends_on == f.name:
                raise ValueError(f"Field '{f.name}' cannot depend on itself")
            if f.conditional.depends_on not in known:
                raise ValueError(
                    f"Field '{f.name}' depends on unknown field '{f.conditional.depends_on}'"
                )
    return fields


class FormCreate(BaseModel):
    """Request body for creating a form."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    page: str = Field(..., min_length=1, max_length=100, description="Site page the form renders on")
    fields: list[FormField] = Field(default_factory=list)
    email_settings: EmailSettings = Field(default_factory=EmailSettings)
    is_active: bool = True

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: list[FormField]) -> list[FormField]:
        return _check_fields(v)


class FormUpdate(BaseModel):
    """Request body for updating a form. Omitted keys are left unchanged."""
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    page: str | None = Field(default=None, min_length=1, max_length=100)
    fields: list[FormField] | None = None
    email_settings: EmailSettings | None = None
    is_active: bool | None = None

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: list[FormField] | None) -> list[FormField] | None:
        return _check_fields(v) if v is not None else v


class FormSubmissionRequest(BaseModel):
    """Submitted values keyed by field name."""
    data: dict[str, Any] = Field(default_factory=dict)


class EmailTemplateCreate(BaseModel):
    """Notification email template with {{field}} placeholders."""
    name: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)


class FormValidationResult(BaseModel):
    """Outcome of a dry-run validation."""
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)
    visible_fields: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _valid_matches_errors(self) -> "FormValidationResult":
        if self.valid and self.errors:
            raise ValueError("A valid result cannot carry errors")
        return self
