"""
Application commands.

Each command works inside one AdminContext and commits once, so an
application, its API client and its association rows are either all written
or not written at all. Commands expect validated input: a vendor, profile or
ODS instance id that does not resolve here raises InvalidReferenceError.
"""

from __future__ import annotations

from typing import Iterable, TypeVar

from loguru import logger

from adminapi_core.credentials import generate_key_secret
from adminapi_core.domain.exceptions import InvalidReferenceError, NotFoundError, SystemReservedError
from adminapi_core.domain.interfaces import AdminContext, EntitySet
from adminapi_core.domain.models import (
    AddApplicationResult,
    ApiClient,
    ApiClientOdsInstance,
    Application,
    ApplicationEducationOrganization,
    Vendor,
)
from app.applications.queries import get_single_api_client
from app.applications.schemas import AddApplicationRequest, EditApplicationRequest

T = TypeVar("T")

SYSTEM_RESERVED_APPLICATION = "This Application is required for proper system function and may not be modified"


def _distinct(ids: Iterable[int] | None) -> list[int]:
    return list(dict.fromkeys(ids or []))


def _resolve(entities: EntitySet[T], ids: Iterable[int] | None, resource_name: str) -> list[T]:
    resolved = []
    for entity_id in _distinct(ids):
        entity = entities.get(entity_id)
        if entity is None:
            raise InvalidReferenceError(resource_name, entity_id)
        resolved.append(entity)
    return resolved


def _resolve_vendor(context: AdminContext, vendor_id: int) -> Vendor:
    vendor = context.vendors.get(vendor_id)
    if vendor is None:
        raise InvalidReferenceError("vendor", vendor_id)
    return vendor


def _guard_system_reserved(context: AdminContext, application: Application) -> None:
    vendor = context.vendors.get(application.vendor_id)
    if vendor is not None and vendor.is_system_reserved:
        raise SystemReservedError(SYSTEM_RESERVED_APPLICATION)


class AddApplicationCommand:
    def __init__(self, context: AdminContext):
        self._context = context

    def execute(self, model: AddApplicationRequest) -> AddApplicationResult:
        """
        Create an application with its API client and associations.

        Returns:
            The new application and API client ids plus the generated
            credentials. The secret is not retrievable afterwards.

        Raises:
            InvalidReferenceError: If the vendor, a profile or an ODS instance
                does not exist.
        """
        context = self._context
        vendor = _resolve_vendor(context, model.vendor_id)
        profiles = _resolve(context.profiles, model.profile_ids, "profile")
        ods_instances = _resolve(context.ods_instances, model.ods_instance_ids, "odsInstance")

        key, secret = generate_key_secret()

        application = context.applications.add(
            Application(
                application_name=model.application_name or "",
                claim_set_name=model.claim_set_name or "",
                vendor_id=vendor.vendor_id,
                profile_ids=[p.profile_id for p in profiles],
            )
        )
        api_client = context.api_clients.add(
            ApiClient(
                application_id=application.application_id,
                name=model.application_name or "",
                key=key,
                secret=secret,
                is_approved=True,
                use_sandbox=False,
            )
        )

        for education_organization_id in _distinct(model.education_organization_ids):
            context.application_education_organizations.add(
                ApplicationEducationOrganization(
                    application_id=application.application_id,
                    education_organization_id=education_organization_id,
                    api_client_ids=[api_client.api_client_id],
                )
            )

        for ods_instance in ods_instances:
            context.api_client_ods_instances.add(
                ApiClientOdsInstance(
                    api_client_id=api_client.api_client_id,
                    ods_instance_id=ods_instance.ods_instance_id,
                )
            )

        context.save_changes()
        logger.info(
            f"Created application {application.application_id} with API client {api_client.api_client_id} "
            f"for vendor {vendor.vendor_id}"
        )

        return AddApplicationResult(
            application_id=application.application_id,
            api_client_id=api_client.api_client_id,
            key=key,
            secret=secret,
        )


class EditApplicationCommand:
    def __init__(self, context: AdminContext):
        self._context = context

    def execute(self, model: EditApplicationRequest) -> Application:
        """
        Replace an application's fields and associations.

        Education organizations, profiles and ODS instances are deleted and
        rebuilt from the model rather than diffed; a missing list clears the
        collection.

        Raises:
            NotFoundError: If the application does not exist.
            SystemReservedError: If the application belongs to a reserved vendor.
            InvalidReferenceError: If the new vendor, a profile or an ODS
                instance does not exist.
        """
        context = self._context
        application = context.applications.get(model.id)
        if application is None:
            raise NotFoundError("application", model.id)

        _guard_system_reserved(context, application)

        new_vendor = _resolve_vendor(context, model.vendor_id)
        new_profiles = _resolve(context.profiles, model.profile_ids, "profile")
        new_ods_instances = _resolve(context.ods_instances, model.ods_instance_ids, "odsInstance")

        api_client = get_single_api_client(context, application.application_id)
        api_client.name = model.application_name or ""

        context.api_client_ods_instances.remove_range(
            context.api_client_ods_instances.where(lambda row: row.api_client_id == api_client.api_client_id)
        )
        context.application_education_organizations.remove_range(
            context.application_education_organizations.where(
                lambda aeo: aeo.application_id == application.application_id
            )
        )
        application.profile_ids = []

        application.application_name = model.application_name or ""
        application.claim_set_name = model.claim_set_name or ""
        application.vendor_id = new_vendor.vendor_id

        for education_organization_id in _distinct(model.education_organization_ids):
            context.application_education_organizations.add(
                ApplicationEducationOrganization(
                    application_id=application.application_id,
                    education_organization_id=education_organization_id,
                    api_client_ids=[api_client.api_client_id],
                )
            )

        application.profile_ids = [p.profile_id for p in new_profiles]

        for ods_instance in new_ods_instances:
            context.api_client_ods_instances.add(
                ApiClientOdsInstance(
                    api_client_id=api_client.api_client_id,
                    ods_instance_id=ods_instance.ods_instance_id,
                )
            )

        context.save_changes()
        logger.info(f"Updated application {application.application_id}")
        return application


class DeleteApplicationCommand:
    def __init__(self, context: AdminContext):
        self._context = context

    def execute(self, application_id: int) -> None:
        """
        Delete an application, its API clients and every association row.

        Raises:
            NotFoundError: If the application does not exist.
            SystemReservedError: If the application belongs to a reserved vendor.
        """
        context = self._context
        application = context.applications.get(application_id)
        if application is None:
            raise NotFoundError("application", application_id)

        _guard_system_reserved(context, application)

        api_clients = context.api_clients.where(lambda c: c.application_id == application_id)
        api_client_ids = {c.api_client_id for c in api_clients}

        context.api_client_ods_instances.remove_range(
            context.api_client_ods_instances.where(lambda row: row.api_client_id in api_client_ids)
        )
        context.application_education_organizations.remove_range(
            context.application_education_organizations.where(lambda aeo: aeo.application_id == application_id)
        )
        context.api_clients.remove_range(api_clients)
        context.applications.remove(application)

        context.save_changes()
        logger.info(f"Deleted application {application_id}")
