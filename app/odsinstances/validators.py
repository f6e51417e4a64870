"""
Request validators for ODS instances.

Names are unique across all instances. Connection strings are checked
against the grammar of the configured database engine whenever present.
"""

from __future__ import annotations

from adminapi_core.config import DatabaseEngine, settings
from adminapi_core.connection_strings import validate_connection_string
from adminapi_core.domain.exceptions import ValidationError
from adminapi_core.domain.interfaces import AdminContext
from adminapi_core.validation import ValidationContext, is_blank
from app.odsinstances.queries import GetOdsInstanceQuery, GetOdsInstancesQuery
from app.odsinstances.schemas import AddOdsInstanceRequest, EditOdsInstanceRequest

NAME_EMPTY = "'Name' must not be empty."
INSTANCE_TYPE_EMPTY = "'Instance Type' must not be empty."
CONNECTION_STRING_EMPTY = "'Connection String' must not be empty."
ODS_INSTANCE_ALREADY_EXISTS = "An ODS instance with this name already exists in the database. Please enter a unique name."
CONNECTION_STRING_INVALID = "The connection string is not valid."


class _OdsInstanceValidator:
    def __init__(self, context: AdminContext, database_engine: DatabaseEngine | str | None = None):
        self._context = context
        self._database_engine = database_engine or settings.DATABASE_ENGINE

    def _is_unique_name(self, name: str | None) -> bool:
        return all(instance.name != name for instance in GetOdsInstancesQuery(self._context).execute())

    def _validate_connection_string(self, connection_string: str | None, context: ValidationContext) -> None:
        if is_blank(connection_string):
            return
        if not validate_connection_string(self._database_engine, connection_string):
            context.add_failure("connectionString", CONNECTION_STRING_INVALID)

    def guard(self, request) -> None:
        context = self.validate(request)
        if not context.is_valid:
            raise ValidationError(context.failures)


class AddOdsInstanceValidator(_OdsInstanceValidator):
    def validate(self, request: AddOdsInstanceRequest) -> ValidationContext:
        context = ValidationContext()

        if is_blank(request.name):
            context.add_failure("name", NAME_EMPTY)
        elif not self._is_unique_name(request.name):
            context.add_failure("name", ODS_INSTANCE_ALREADY_EXISTS)

        if is_blank(request.instance_type):
            context.add_failure("instanceType", INSTANCE_TYPE_EMPTY)

        if is_blank(request.connection_string):
            context.add_failure("connectionString", CONNECTION_STRING_EMPTY)
        self._validate_connection_string(request.connection_string, context)

        return context


class EditOdsInstanceValidator(_OdsInstanceValidator):
    def validate(self, request: EditOdsInstanceRequest) -> ValidationContext:
        """
        Raises:
            NotFoundError: If the ODS instance being edited does not exist.
        """
        existing = GetOdsInstanceQuery(self._context).execute(request.id)
        context = ValidationContext()

        if is_blank(request.name):
            context.add_failure("name", NAME_EMPTY)
        elif request.name != existing.name and not self._is_unique_name(request.name):
            context.add_failure("name", ODS_INSTANCE_ALREADY_EXISTS)

        if is_blank(request.instance_type):
            context.add_failure("instanceType", INSTANCE_TYPE_EMPTY)

        self._validate_connection_string(request.connection_string, context)
        return context
