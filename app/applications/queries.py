"""
Application read queries against the admin store.
"""

from __future__ import annotations

from adminapi_core.domain.exceptions import AdminApiError, NotFoundError
from adminapi_core.domain.interfaces import AdminContext
from adminapi_core.domain.models import ApiClient, Application, ApplicationDetails


def get_single_api_client(context: AdminContext, application_id: int) -> ApiClient:
    """Return the application's API client, enforcing that there is exactly one."""
    api_clients = context.api_clients.where(lambda c: c.application_id == application_id)
    if len(api_clients) != 1:
        raise AdminApiError(
            f"Application {application_id} has {len(api_clients)} API clients; exactly one is required"
        )
    return api_clients[0]


def load_application_details(context: AdminContext, application: Application) -> ApplicationDetails:
    """Load an application together with all of its associations."""
    api_client = get_single_api_client(context, application.application_id)
    education_organizations = context.application_education_organizations.where(
        lambda aeo: aeo.application_id == application.application_id
    )
    vendor = context.vendors.get(application.vendor_id)
    if vendor is None:
        raise NotFoundError("vendor", application.vendor_id)

    return ApplicationDetails(
        application=application,
        vendor=vendor,
        profiles=[p for p in context.profiles if p.profile_id in application.profile_ids],
        education_organization_ids=[aeo.education_organization_id for aeo in education_organizations],
        api_client=api_client,
        api_client_education_organization_ids=[
            aeo.education_organization_id
            for aeo in education_organizations
            if api_client.api_client_id in aeo.api_client_ids
        ],
        ods_instance_ids=[
            row.ods_instance_id
            for row in context.api_client_ods_instances
            if row.api_client_id == api_client.api_client_id
        ],
    )


class GetApplicationByIdQuery:
    def __init__(self, context: AdminContext):
        self._context = context

    def execute(self, application_id: int) -> ApplicationDetails:
        """
        Raises:
            NotFoundError: If no application has this id.
        """
        application = self._context.applications.get(application_id)
        if application is None:
            raise NotFoundError("application", application_id)
        return load_application_details(self._context, application)


class GetApplicationsQuery:
    def __init__(self, context: AdminContext):
        self._context = context

    def execute(self) -> list[ApplicationDetails]:
        return [load_application_details(self._context, a) for a in self._context.applications]
