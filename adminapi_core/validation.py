"""
Validation context shared by every request validator.

Validators record failures here instead of raising, so one request reports
all of its violations together. Messages are templates with named
placeholders (``{claim_set_name}``) substituted when the failure is added.
"""

from __future__ import annotations

from typing import Any

from adminapi_core.domain.exceptions import ValidationError, ValidationFailure


class _Arguments(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


class ValidationContext:
    """Collects validation failures for one request."""

    def __init__(self, **arguments: Any):
        self._arguments: dict[str, Any] = dict(arguments)
        self.failures: list[ValidationFailure] = []

    def append_argument(self, name: str, value: Any) -> None:
        """Set a placeholder value for every later failure of this context."""
        self._arguments[name] = value

    def add_failure(self, property_name: str, message: str, **arguments: Any) -> None:
        """Record a failure, formatting the message with the named arguments.

        Arguments passed here take precedence over the context-wide ones.
        Unknown placeholders are left as-is.
        """
        values = _Arguments(self._arguments)
        values.update(arguments)
        self.failures.append(
            ValidationFailure(property_name=property_name, error_message=message.format_map(values))
        )

    @property
    def is_valid(self) -> bool:
        return not self.failures

    def raise_if_invalid(self) -> None:
        """Raise ValidationError carrying every recorded failure."""
        if self.failures:
            raise ValidationError(self.failures)


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()
