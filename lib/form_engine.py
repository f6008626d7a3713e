# =============================================================================
# lib/form_engine.py - Dynamic Form Rules Engine
# =============================================================================
# Evaluates a form definition against submitted values:
# 1. Decide which fields are visible (conditional rules reference other
#    fields by name and are evaluated against the submitted values)
# 2. Validate only the visible, active fields
# 3. Report at most one message per field: the first rule that fails
#
# Rule order per field:
#   required -> type -> pattern -> min_length -> max_length -> min -> max
#
# Usage:
#   from lib.form_engine import validate_submission
#   errors = validate_submission(form.fields, {"name": "Asha", "age": "17"})
#   # {"age": "Age must be at least 18"}
# =============================================================================

import re
from datetime import date, datetime
from typing import Any, Iterable

from core.models.form import FieldType, FormField

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# =============================================================================
# Visibility
# =============================================================================

def is_field_visible(field: FormField, values: dict[str, Any]) -> bool:
    """
    Check a field's conditional rule against the current values.

    A field without a rule (or without `depends_on`) is always visible.
    `show_when` takes precedence over `hide_when` when both are set.
    """
    rule = field.conditional
    if rule is None or not rule.depends_on:
        return True

    dependent_value = values.get(rule.depends_on)
    if rule.show_when is not None:
        return dependent_value == rule.show_when
    if rule.hide_when is not None:
        return dependent_value != rule.hide_when
    return True


def visible_fields(fields: Iterable[FormField], values: dict[str, Any]) -> list[FormField]:
    """Active, visible fields in declaration order. `order` is a display hint only."""
    return [f for f in fields if f.is_active and is_field_visible(f, values)]


# =============================================================================
# Value Helpers
# =============================================================================

def is_empty(value: Any) -> bool:
    """None, empty string and empty list (unticked checkbox group) count as empty."""
    return value is None or value == "" or value == []


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _fmt(number: float) -> str:
    # 18.0 -> "18"
    return str(int(number)) if float(number).is_integer() else str(number)


def _is_iso_date(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
        return True
    except ValueError:
        pass
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
        return True
    except ValueError:
        return False


def _option_values(field: FormField) -> list[str]:
    return [str(o.value) for o in field.options]


# =============================================================================
# Validation
# =============================================================================

def _type_error(field: FormField, value: Any) -> str | None:
    label = field.label

    if field.type == FieldType.EMAIL:
        if not isinstance(value, str) or not EMAIL_PATTERN.match(value.strip()):
            return f"{label} must be a valid email address"

    elif field.type == FieldType.NUMBER:
        if _as_number(value) is None:
            return f"{label} must be a number"

    elif field.type in (FieldType.SELECT, FieldType.RADIO):
        if field.options and str(value) not in _option_values(field):
            return f"{label} must be one of the available options"

    elif field.type == FieldType.CHECKBOX:
        # Checkbox groups submit a list; a single checkbox submits a bool
        if field.options and isinstance(value, list):
            allowed = _option_values(field)
            if any(str(v) not in allowed for v in value):
                return f"{label} must be one of the available options"

    elif field.type == FieldType.DATE:
        if not _is_iso_date(value):
            return f"{label} must be a valid date"

    return None


def _rule_error(field: FormField, value: Any) -> str | None:
    rules = field.validation
    label = field.label

    if rules.pattern:
        candidates = value if isinstance(value, list) else [value]
        if not all(re.search(rules.pattern, str(v)) for v in candidates):
            return f"{label} format is invalid"

    if isinstance(value, str):
        if rules.min_length is not None and len(value) < rules.min_length:
            return f"{label} must be at least {rules.min_length} characters"
        if rules.max_length is not None and len(value) > rules.max_length:
            return f"{label} must be no more than {rules.max_length} characters"

    number = None
    if field.type == FieldType.NUMBER or (
        isinstance(value, (int, float)) and not isinstance(value, bool)
    ):
        number = _as_number(value)

    if number is not None:
        if rules.min is not None and number < rules.min:
            return f"{label} must be at least {_fmt(rules.min)}"
        if rules.max is not None and number > rules.max:
            return f"{label} must be no more than {_fmt(rules.max)}"

    return None


def validate_field(field: FormField, value: Any) -> str | None:
    """
    Validate one value against its field definition.

    Returns:
        The message for the first failed rule, or None when the value passes.
        A field-level `custom_message` replaces every default message.
    """
    rules = field.validation

    if is_empty(value):
        if rules.required:
            return rules.custom_message or f"{field.label} is required"
        return None

    message = _type_error(field, value) or _rule_error(field, value)
    if message is None:
        return None
    return rules.custom_message or message


def validate_submission(fields: Iterable[FormField], values: dict[str, Any]) -> dict[str, str]:
    """
    Validate a whole submission.

    Hidden and inactive fields are skipped entirely, so a required field
    that is hidden by its conditional rule never produces an error.

    Returns:
        Mapping of field name -> message; empty when the submission is valid.
    """
    errors: dict[str, str] = {}
    for field in visible_fields(fields, values):
        message = validate_field(field, values.get(field.name))
        if message:
            errors[field.name] = message
    return errors


def apply_defaults(fields: Iterable[FormField], values: dict[str, Any]) -> dict[str, Any]:
    """
    Return a copy of `values` with `default_value` filled in for visible
    fields that were left empty.
    """
    filled = dict(values)
    for field in visible_fields(fields, filled):
        if field.default_value is not None and is_empty(filled.get(field.name)):
            filled[field.name] = field.default_value
    return filled


def extract_visible_values(fields: Iterable[FormField], values: dict[str, Any]) -> dict[str, Any]:
    """Keep only the values that belong to visible fields."""
    names = {f.name for f in visible_fields(fields, values)}
    return {k: v for k, v in values.items() if k in names}
