"""
Application API routes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from adminapi_core.domain.interfaces import AdminContext, SecurityContext
from adminapi_core.domain.models import ApplicationDetails
from app.applications.commands import AddApplicationCommand, DeleteApplicationCommand, EditApplicationCommand
from app.applications.queries import GetApplicationByIdQuery, GetApplicationsQuery
from app.applications.schemas import (
    AddApplicationRequest,
    AddApplicationResponse,
    ApplicationResponse,
    EditApplicationRequest,
)
from app.applications.validators import AddApplicationValidator, EditApplicationValidator
from app.factory import get_admin_context, get_security_context

router = APIRouter()


def _to_response(details: ApplicationDetails) -> ApplicationResponse:
    return ApplicationResponse(
        id=details.application.application_id,
        application_name=details.application.application_name,
        claim_set_name=details.application.claim_set_name,
        vendor_id=details.vendor.vendor_id,
        profile_ids=[p.profile_id for p in details.profiles],
        education_organization_ids=details.education_organization_ids,
        ods_instance_ids=details.ods_instance_ids,
    )


@router.get("/applications", response_model=list[ApplicationResponse])
def list_applications(context: AdminContext = Depends(get_admin_context)):
    return [_to_response(d) for d in GetApplicationsQuery(context).execute()]


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
def get_application(application_id: int, context: AdminContext = Depends(get_admin_context)):
    return _to_response(GetApplicationByIdQuery(context).execute(application_id))


@router.post("/applications", response_model=AddApplicationResponse, status_code=201)
def add_application(
    request: AddApplicationRequest,
    response: Response,
    context: AdminContext = Depends(get_admin_context),
    security_context: SecurityContext = Depends(get_security_context),
):
    """
    Create an application and its API client.

    The secret is only returned here; store it, it cannot be read back.
    """
    AddApplicationValidator(context, security_context).guard(request)
    result = AddApplicationCommand(context).execute(request)
    response.headers["Location"] = f"/applications/{result.application_id}"
    return AddApplicationResponse(id=result.application_id, key=result.key, secret=result.secret)


@router.put("/applications/{application_id}", response_model=ApplicationResponse)
def edit_application(
    application_id: int,
    request: EditApplicationRequest,
    context: AdminContext = Depends(get_admin_context),
    security_context: SecurityContext = Depends(get_security_context),
):
    """Replace an application. Omitted id lists clear the corresponding association."""
    request.id = application_id
    EditApplicationValidator(context, security_context).guard(request)
    EditApplicationCommand(context).execute(request)
    return _to_response(GetApplicationByIdQuery(context).execute(application_id))


@router.delete("/applications/{application_id}", status_code=204)
def delete_application(application_id: int, context: AdminContext = Depends(get_admin_context)):
    DeleteApplicationCommand(context).execute(application_id)
    return Response(status_code=204)
