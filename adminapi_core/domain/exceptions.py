"""
Standard exceptions for the ODS admin API.

This module defines the hierarchy of exceptions raised by queries, validators
and commands. Each error carries a machine-readable code so the HTTP layer
can translate it without inspecting messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class ErrorCode:
    """Standard error codes for admin API failures."""

    NOT_FOUND = "NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    SYSTEM_RESERVED = "SYSTEM_RESERVED"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AdminApiError(Exception):
    """Base exception for all admin API errors."""

    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {"code": self.code, "message": self.message}


class NotFoundError(AdminApiError):
    """A referenced entity does not exist.

    Attributes:
        resource_name: Kind of entity that was looked up (e.g. "application").
        resource_id: Identifier that was not found.
    """

    code = ErrorCode.NOT_FOUND

    def __init__(self, resource_name: str, resource_id: Any):
        super().__init__(f"Not found: {resource_name} with ID {resource_id}")
        self.resource_name = resource_name
        self.resource_id = resource_id

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["resource"] = self.resource_name
        data["id"] = self.resource_id
        return data


class InvalidReferenceError(AdminApiError):
    """A command was given an identifier that no longer resolves.

    Validators are expected to catch these first; reaching a command with a
    dangling vendor, profile or ODS instance id is a data-integrity problem.
    """

    code = ErrorCode.INVALID_REFERENCE

    def __init__(self, resource_name: str, resource_id: Any):
        super().__init__(f"Invalid reference: {resource_name} with ID {resource_id} does not exist")
        self.resource_name = resource_name
        self.resource_id = resource_id


class ConflictError(AdminApiError):
    """A unit of work changed a row that was modified or deleted after it was read.

    Nothing from the failing unit of work is saved.
    """

    code = ErrorCode.CONFLICT

    def __init__(self, resource_name: str, resource_id: Any):
        super().__init__(f"Conflict: {resource_name} with ID {resource_id} was changed by another request")
        self.resource_name = resource_name
        self.resource_id = resource_id

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["resource"] = self.resource_name
        data["id"] = self.resource_id
        return data


class SystemReservedError(AdminApiError):
    """Attempted mutation of an entity required for platform operation."""

    code = ErrorCode.SYSTEM_RESERVED


@dataclass(frozen=True)
class ValidationFailure:
    """A single rule violation recorded against a request field."""

    property_name: str
    error_message: str


class ValidationError(AdminApiError):
    """One or more validation rules failed.

    All failures of a request are collected before this is raised.
    """

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, failures: list[ValidationFailure]):
        super().__init__("Validation failed")
        self.failures = list(failures)

    def errors_by_property(self) -> dict[str, list[str]]:
        """Group failure messages by the property they were recorded on."""
        grouped: dict[str, list[str]] = {}
        for failure in self.failures:
            grouped.setdefault(failure.property_name, []).append(failure.error_message)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors_by_property()
        return data
