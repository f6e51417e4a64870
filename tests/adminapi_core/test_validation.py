"""Unit tests for ValidationContext."""

import pytest

from adminapi_core.domain.exceptions import ValidationError, ValidationFailure
from adminapi_core.validation import ValidationContext, is_blank


class TestValidationContext:
    """Tests for failure accumulation and message formatting."""

    def test_new_context_is_valid(self):
        context = ValidationContext()

        assert context.is_valid
        assert context.failures == []

    def test_add_failure_formats_placeholders(self):
        """Context-wide and per-failure arguments should both be substituted."""
        context = ValidationContext(claim_set_name="My Set")

        context.add_failure("resourceClaims", "'{claim_set_name}' has '{resource_claim_name}'", resource_claim_name="x")

        assert context.failures == [ValidationFailure("resourceClaims", "'My Set' has 'x'")]
        assert not context.is_valid

    def test_per_failure_arguments_take_precedence(self):
        context = ValidationContext(name="outer")

        context.add_failure("name", "{name}", name="inner")

        assert context.failures[0].error_message == "inner"

    def test_append_argument_applies_to_later_failures(self):
        context = ValidationContext()
        context.add_failure("name", "{name}")
        context.append_argument("name", "late")
        context.add_failure("name", "{name}")

        assert [f.error_message for f in context.failures] == ["{name}", "late"]

    def test_unknown_placeholder_is_left_as_is(self):
        context = ValidationContext()

        context.add_failure("name", "Missing {unknown}.")

        assert context.failures[0].error_message == "Missing {unknown}."

    def test_failures_accumulate(self):
        context = ValidationContext()
        context.add_failure("a", "first")
        context.add_failure("b", "second")

        assert len(context.failures) == 2

    def test_raise_if_invalid_carries_every_failure(self):
        context = ValidationContext()
        context.add_failure("a", "first")
        context.add_failure("a", "second")

        with pytest.raises(ValidationError) as exc_info:
            context.raise_if_invalid()

        assert exc_info.value.errors_by_property() == {"a": ["first", "second"]}

    def test_raise_if_invalid_is_silent_when_valid(self):
        ValidationContext().raise_if_invalid()


class TestIsBlank:
    @pytest.mark.parametrize("value", [None, "", "   ", "\t"])
    def test_blank_values(self, value):
        assert is_blank(value)

    def test_text_is_not_blank(self):
        assert not is_blank(" x ")
