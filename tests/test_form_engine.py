# =============================================================================
# tests/test_form_engine.py - Dynamic Form Rules Engine Tests
# =============================================================================
# Unit tests for lib/form_engine.py:
# - Conditional visibility (show_when / hide_when)
# - Rule order and first-failure reporting
# - Type checks for email, number, select, date
# - Defaults and visible-value extraction
#
# Run with: pytest tests/test_form_engine.py -v
# =============================================================================

import pytest

from core.models.form import FormField
from lib.form_engine import (
    apply_defaults,
    extract_visible_values,
    is_empty,
    is_field_visible,
    validate_field,
    validate_submission,
    visible_fields,
)


def make_field(**kwargs) -> FormField:
    data = {"name": "field", "label": "Field", "type": "text"}
    data.update(kwargs)
    return FormField.model_validate(data)


# =============================================================================
# Visibility
# =============================================================================

class TestVisibility:
    """Tests for conditional visibility rules."""

    def test_field_without_rule_is_visible(self):
        """No conditional means always visible."""
        assert is_field_visible(make_field(), {}) is True

    def test_show_when_matches(self):
        """show_when shows the field only for the matching value."""
        field = make_field(conditional={"depends_on": "status", "show_when": "student"})

        assert is_field_visible(field, {"status": "student"}) is True
        assert is_field_visible(field, {"status": "working"}) is False
        assert is_field_visible(field, {}) is False

    def test_hide_when_matches(self):
        """hide_when hides the field only for the matching value."""
        field = make_field(conditional={"depends_on": "country", "hide_when": "India"})

        assert is_field_visible(field, {"country": "India"}) is False
        assert is_field_visible(field, {"country": "Nepal"}) is True

    def test_show_when_takes_precedence(self):
        """With both set, show_when decides."""
        field = make_field(conditional={"depends_on": "x", "show_when": "a", "hide_when": "a"})

        assert is_field_visible(field, {"x": "a"}) is True

    def test_boolean_show_when(self):
        """Checkbox dependents compare booleans, not strings."""
        field = make_field(conditional={"depends_on": "wants_80g", "show_when": True})

        assert is_field_visible(field, {"wants_80g": True}) is True
        assert is_field_visible(field, {"wants_80g": False}) is False

    def test_visible_fields_keep_declaration_order(self):
        """Inactive fields drop out; `order` does not reorder the rest."""
        fields = [
            make_field(name="c", order=3),
            make_field(name="a", order=1),
            make_field(name="b", order=2, is_active=False),
        ]

        names = [f.name for f in visible_fields(fields, {})]

        assert names == ["c", "a"]


# =============================================================================
# Single Field Validation
# =============================================================================

class TestValidateField:
    """Tests for validate_field rule order and messages."""

    @pytest.mark.parametrize("value", [None, "", []])
    def test_required_empty_values(self, value):
        """None, empty string and empty list are all missing."""
        field = make_field(label="Full Name", validation={"required": True})

        assert validate_field(field, value) == "Full Name is required"

    def test_optional_empty_value_passes(self):
        """Optional empty fields skip every other rule."""
        field = make_field(validation={"min_length": 5, "pattern": "^x$"})

        assert validate_field(field, "") is None

    def test_first_failure_only(self):
        """Pattern fails before length is checked."""
        field = make_field(label="Code", validation={"pattern": "^[A-Z]+$", "min_length": 10})

        assert validate_field(field, "abc") == "Code format is invalid"

    def test_length_rules(self):
        field = make_field(label="Name", validation={"min_length": 2, "max_length": 5})

        assert validate_field(field, "A") == "Name must be at least 2 characters"
        assert validate_field(field, "Abcdef") == "Name must be no more than 5 characters"
        assert validate_field(field, "Abc") is None

    def test_pattern_is_a_search(self):
        """Unanchored patterns match anywhere, like a JS RegExp test."""
        field = make_field(validation={"pattern": "[0-9]"})

        assert validate_field(field, "abc1") is None

    def test_number_bounds_with_string_input(self):
        """Numeric strings are coerced for number fields."""
        field = make_field(label="Age", type="number", validation={"min": 18, "max": 60})

        assert validate_field(field, "17") == "Age must be at least 18"
        assert validate_field(field, 61) == "Age must be no more than 60"
        assert validate_field(field, "30") is None

    def test_number_type_check(self):
        field = make_field(label="Age", type="number")

        assert validate_field(field, "abc") == "Age must be a number"

    def test_email_type_check(self):
        field = make_field(label="Email", type="email")

        assert validate_field(field, "not-an-email") == "Email must be a valid email address"
        assert validate_field(field, "seva@harekrishnavidya.org") is None

    def test_select_must_match_option(self):
        field = make_field(
            label="Status",
            type="select",
            options=[{"label": "Student", "value": "student"}],
        )

        assert validate_field(field, "retired") == "Status must be one of the available options"
        assert validate_field(field, "student") is None

    def test_date_type_check(self):
        field = make_field(label="Date of Birth", type="date")

        assert validate_field(field, "31/12/2000") == "Date of Birth must be a valid date"
        assert validate_field(field, "2000-12-31") is None

    def test_custom_message_replaces_default(self):
        """custom_message wins for every rule."""
        field = make_field(validation={"required": True, "min_length": 3, "custom_message": "Please check"})

        assert validate_field(field, "") == "Please check"
        assert validate_field(field, "ab") == "Please check"


# =============================================================================
# Whole Submission
# =============================================================================

class TestValidateSubmission:
    """Tests for validate_submission and value helpers."""

    @pytest.fixture
    def fields(self, volunteer_form_payload):
        return [FormField.model_validate(f) for f in volunteer_form_payload["fields"]]

    def test_hidden_required_field_is_skipped(self, fields):
        """college is required but hidden for working volunteers."""
        values = {"full_name": "Asha", "email": "asha@example.com", "status": "working"}

        assert validate_submission(fields, values) == {}

    def test_visible_required_field_is_checked(self, fields):
        values = {"full_name": "Asha", "email": "asha@example.com", "status": "student"}

        assert validate_submission(fields, values) == {"college": "College is required"}

    def test_errors_reported_per_field(self, fields):
        errors = validate_submission(fields, {"full_name": "A", "email": "bad"})

        assert errors == {
            "full_name": "Full Name must be at least 2 characters",
            "email": "Email must be a valid email address",
            "status": "Status is required",
        }

    def test_extract_visible_values_drops_hidden_and_unknown(self, fields):
        values = {
            "full_name": "Asha",
            "email": "asha@example.com",
            "status": "working",
            "college": "IIT",
            "extra": "ignored",
        }

        kept = extract_visible_values(fields, values)

        assert kept == {"full_name": "Asha", "email": "asha@example.com", "status": "working"}

    def test_apply_defaults_fills_empty_values(self):
        fields = [make_field(name="country", default_value="India")]
        values = {"country": ""}

        filled = apply_defaults(fields, values)

        assert filled == {"country": "India"}
        # Input is not modified
        assert values == {"country": ""}

    def test_is_empty(self):
        assert is_empty(None) and is_empty("") and is_empty([])
        assert not is_empty(0)
        assert not is_empty(False)
