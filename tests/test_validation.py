"""Validation engine unit tests"""

import logging

import pytest

from formengine.consts import ErrorMessages
from formengine.form_schema import FieldSchema, FileUpload, FormSchema, ValidationRule
from formengine.validation import (
    is_absolute_url,
    is_file_type_accepted,
    is_valid_email,
    validate_field,
    validate_form,
    validate_rule,
)


def _field(field_type="text", field_id="f", conditions=None, **config):
    data = {"id": field_id, "type": field_type, "label": field_id, "config": config}
    if conditions is not None:
        data["conditions"] = conditions
    return FieldSchema.model_validate(data)


def _rule(kind, value=None, message=""):
    return ValidationRule.model_validate({"type": kind, "value": value, "message": message})


class TestRequired:
    @pytest.mark.parametrize("value", ["", None, "   ", []])
    def test_required_and_empty_fails(self, value):
        result = validate_field(_field(required=True), value)

        assert result.valid is False
        assert result.error == ErrorMessages.REQUIRED

    def test_required_with_value_passes(self):
        result = validate_field(_field(required=True), "a")

        assert result.valid is True
        assert result.error is None

    def test_optional_and_empty_skips_rules(self):
        field = _field(validation=[{"type": "minLength", "value": 5, "message": "short"}])
        assert validate_field(field, "").valid is True

    def test_zero_is_not_empty(self):
        assert validate_field(_field("number", required=True), 0).valid is True


class TestRules:
    def test_min_length_with_custom_and_default_message(self):
        assert validate_rule(_rule("minLength", 3, "Too short"), "ab").error == "Too short"
        assert validate_rule(_rule("minLength", 3), "ab").error == "Minimum length is 3 characters"
        assert validate_rule(_rule("minLength", 3), "abc").valid is True

    def test_max_length(self):
        assert validate_rule(_rule("maxLength", 2), "abc").error == "Maximum length is 2 characters"
        assert validate_rule(_rule("maxLength", 2), "ab").valid is True

    def test_numeric_bounds_only_apply_to_numbers(self):
        assert validate_rule(_rule("min", 5), 4).error == "Minimum value is 5"
        assert validate_rule(_rule("max", 5), 6).error == "Maximum value is 5"
        assert validate_rule(_rule("min", 5), "4").valid is True
        assert validate_rule(_rule("min", "5"), 4).valid is True

    def test_pattern_searches_the_value(self):
        rule = _rule("pattern", r"\d{3}", "Need three digits")

        assert validate_rule(rule, "ab123").valid is True
        assert validate_rule(rule, "ab12").error == "Need three digits"

    def test_malformed_pattern_does_not_apply(self, caplog):
        with caplog.at_level(logging.WARNING, logger="formengine.validation"):
            result = validate_rule(_rule("pattern", "([a-z"), "anything")

        assert result.valid is True
        assert "Invalid regex pattern" in caplog.text

    def test_email_rule(self):
        assert validate_rule(_rule("email"), "a@b.co").valid is True
        assert validate_rule(_rule("email"), "a@b").error == ErrorMessages.INVALID_EMAIL
        assert validate_rule(_rule("email", message="Bad email"), "a b@c.d").error == "Bad email"

    def test_url_rule(self):
        assert validate_rule(_rule("url"), "https://example.com/path?q=1").valid is True
        assert validate_rule(_rule("url"), "example.com").error == ErrorMessages.INVALID_URL

    def test_custom_rule_always_passes(self):
        assert validate_rule(_rule("custom", "anything", "never shown"), "x").valid is True

    def test_first_failing_rule_wins(self):
        field = _field(
            validation=[
                {"type": "minLength", "value": 5, "message": "first"},
                {"type": "pattern", "value": "^z", "message": "second"},
            ]
        )

        assert validate_field(field, "abc").error == "first"
        assert validate_field(field, "abcdef").error == "second"
        assert validate_field(field, "zebra").valid is True


@pytest.mark.parametrize(
    "value,expected",
    [
        ("user@example.com", True),
        ("first.last+tag@sub.example.org", True),
        ("user@example", False),
        ("user example.com", False),
        ("@example.com", False),
        ("user@example.com\n", False),
    ],
)
def test_is_valid_email(value, expected):
    assert is_valid_email(value) is expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("https://example.com", True),
        ("http://localhost:8080/a", True),
        ("mailto:user@example.com", True),
        ("ftp://files.example.com/x.zip", True),
        ("example.com", False),
        ("/relative/path", False),
        ("https://", False),
        ("http://exa mple.com", False),
        ("", False),
    ],
)
def test_is_absolute_url(value, expected):
    assert is_absolute_url(value) is expected


class TestFieldTypeChecks:
    def test_email_field_checks_shape_without_rules(self):
        field = _field("email")

        assert validate_field(field, "nope").error == ErrorMessages.INVALID_EMAIL
        assert validate_field(field, "a@b.io").valid is True

    def test_number_bounds(self):
        field = _field("number", min=1, max=10)

        assert validate_field(field, 0).error == "Minimum value is 1"
        assert validate_field(field, 11).error == "Maximum value is 10"
        assert validate_field(field, 10).valid is True

    def test_range_bounds(self):
        field = _field("range", min=0, max=5)
        assert validate_field(field, 6).error == "Maximum value is 5"

    def test_declared_rules_run_before_type_checks(self):
        field = _field("number", max=10, validation=[{"type": "max", "value": 3, "message": "rule"}])
        assert validate_field(field, 20).error == "rule"

    def test_checkbox_selection_counts(self):
        field = _field("checkbox", minSelections=2, maxSelections=3)

        assert validate_field(field, ["a"]).error == "Please select at least 2 option(s)"
        assert validate_field(field, ["a", "b", "c", "d"]).error == "Please select at most 3 option(s)"
        assert validate_field(field, ["a", "b"]).valid is True

    def test_file_max_size(self):
        field = _field("file", maxSize=5 * 1024 * 1024)
        small = FileUpload(name="a.pdf", type="application/pdf", size=1024)
        large = FileUpload(name="b.pdf", type="application/pdf", size=6 * 1024 * 1024)

        assert validate_field(field, small).valid is True
        assert validate_field(field, large).error == "File size must be less than 5MB"
        assert validate_field(field, [small, large]).error == "File size must be less than 5MB"

    def test_file_size_message_keeps_one_decimal(self):
        field = _field("file", maxSize=1536 * 1024)
        large = FileUpload(name="b.pdf", type="application/pdf", size=2 * 1024 * 1024)

        assert validate_field(field, large).error == "File size must be less than 1.5MB"

    def test_file_accept(self):
        field = _field("file", accept="image/*, .pdf")

        assert validate_field(field, FileUpload(name="a.png", type="image/png", size=1)).valid is True
        assert validate_field(field, FileUpload(name="a.PDF", type="", size=1)).valid is True
        assert (
            validate_field(field, FileUpload(name="a.txt", type="text/plain", size=1)).error
            == ErrorMessages.INVALID_FILE_TYPE
        )

    def test_file_accept_exact_mime_type(self):
        field = _field("file", accept="application/pdf")

        assert validate_field(field, FileUpload(name="x", type="application/pdf", size=1)).valid is True
        assert validate_field(field, FileUpload(name="x.pdf", type="image/png", size=1)).valid is False

    def test_untyped_file_skips_accept_check(self, caplog):
        field = _field("file", accept="image/*")

        with caplog.at_level(logging.WARNING, logger="formengine.validation"):
            result = validate_field(field, FileUpload(name="README", type="", size=1))

        assert result.valid is True
        assert "check skipped" in caplog.text

    def test_file_values_from_plain_dicts(self):
        field = _field("file", maxSize=10)
        assert validate_field(field, [{"name": "a.bin", "size": 11}]).valid is False


def test_is_file_type_accepted_wildcard_needs_category_boundary():
    file = FileUpload(name="x", type="imagery/custom", size=1)
    assert is_file_type_accepted(file, ["image/*"]) is False


class TestValidateForm:
    def test_hidden_dependent_field_is_not_validated(self, country_state_document):
        schema = FormSchema.model_validate(country_state_document)

        result = validate_form(schema.fields, {"country": "CA"})

        assert result.valid is True
        assert "state" not in result.errors

    def test_visible_dependent_field_is_validated(self, country_state_document):
        schema = FormSchema.model_validate(country_state_document)

        result = validate_form(schema.fields, {"country": "US", "state": ""})

        assert result.valid is False
        assert result.errors == {"state": ErrorMessages.REQUIRED}

    def test_errors_are_collected_per_field(self, country_state_document):
        schema = FormSchema.model_validate(country_state_document)

        result = validate_form(schema.fields, {})

        assert result.errors == {"country": ErrorMessages.REQUIRED}

    def test_section_and_hidden_fields_are_skipped(self):
        fields = [
            _field("section", "intro", heading="Intro"),
            _field("hidden", "utm", defaultValue="x"),
            _field("text", "name", required=True),
        ]

        result = validate_form(fields, {"name": "Ada"})

        assert result.valid is True
        assert result.errors == {}

    def test_result_does_not_depend_on_field_order(self, country_state_document):
        schema = FormSchema.model_validate(country_state_document)
        answers = {"country": "US"}

        forward = validate_form(schema.fields, answers)
        backward = validate_form(list(reversed(schema.fields)), answers)

        assert forward.errors == backward.errors
