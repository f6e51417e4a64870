"""
ODS instance read queries.
"""

from __future__ import annotations

from adminapi_core.domain.exceptions import NotFoundError
from adminapi_core.domain.interfaces import AdminContext
from adminapi_core.domain.models import OdsInstance


class GetOdsInstancesQuery:
    def __init__(self, context: AdminContext):
        self._context = context

    def execute(self) -> list[OdsInstance]:
        return list(self._context.ods_instances)


class GetOdsInstanceQuery:
    def __init__(self, context: AdminContext):
        self._context = context

    def execute(self, ods_instance_id: int) -> OdsInstance:
        """
        Raises:
            NotFoundError: If no ODS instance has this id.
        """
        ods_instance = self._context.ods_instances.get(ods_instance_id)
        if ods_instance is None:
            raise NotFoundError("odsInstance", ods_instance_id)
        return ods_instance
