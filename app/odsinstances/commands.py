"""
ODS instance commands. Input is expected to have passed the validators.
"""

from __future__ import annotations

from loguru import logger

from adminapi_core.domain.interfaces import AdminContext
from adminapi_core.domain.models import OdsInstance
from adminapi_core.validation import is_blank
from app.odsinstances.queries import GetOdsInstanceQuery
from app.odsinstances.schemas import AddOdsInstanceRequest, EditOdsInstanceRequest


class AddOdsInstanceCommand:
    def __init__(self, context: AdminContext):
        self._context = context

    def execute(self, model: AddOdsInstanceRequest) -> OdsInstance:
        ods_instance = self._context.ods_instances.add(
            OdsInstance(
                name=model.name or "",
                instance_type=model.instance_type or "",
                connection_string=model.connection_string or "",
            )
        )
        self._context.save_changes()
        logger.info(f"Created ODS instance {ods_instance.ods_instance_id} ('{ods_instance.name}')")
        return ods_instance


class EditOdsInstanceCommand:
    def __init__(self, context: AdminContext):
        self._context = context

    def execute(self, model: EditOdsInstanceRequest) -> OdsInstance:
        """
        Overwrite an ODS instance's fields. A blank connection string leaves
        the stored one in place.

        Raises:
            NotFoundError: If the ODS instance does not exist.
        """
        ods_instance = GetOdsInstanceQuery(self._context).execute(model.id)

        ods_instance.name = model.name or ""
        ods_instance.instance_type = model.instance_type or ""
        if not is_blank(model.connection_string):
            ods_instance.connection_string = model.connection_string

        self._context.save_changes()
        logger.info(f"Updated ODS instance {ods_instance.ods_instance_id}")
        return ods_instance


class DeleteOdsInstanceCommand:
    def __init__(self, context: AdminContext):
        self._context = context

    def execute(self, ods_instance_id: int) -> None:
        """
        Delete an ODS instance and detach it from every API client.

        Raises:
            NotFoundError: If the ODS instance does not exist.
        """
        ods_instance = GetOdsInstanceQuery(self._context).execute(ods_instance_id)

        self._context.api_client_ods_instances.remove_range(
            self._context.api_client_ods_instances.where(lambda row: row.ods_instance_id == ods_instance_id)
        )
        self._context.ods_instances.remove(ods_instance)

        self._context.save_changes()
        logger.info(f"Deleted ODS instance {ods_instance_id}")
