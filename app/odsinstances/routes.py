"""
ODS instance API routes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from adminapi_core.domain.interfaces import AdminContext
from adminapi_core.domain.models import OdsInstance
from app.factory import get_admin_context
from app.odsinstances.commands import AddOdsInstanceCommand, DeleteOdsInstanceCommand, EditOdsInstanceCommand
from app.odsinstances.queries import GetOdsInstanceQuery, GetOdsInstancesQuery
from app.odsinstances.schemas import AddOdsInstanceRequest, EditOdsInstanceRequest, OdsInstanceResponse
from app.odsinstances.validators import AddOdsInstanceValidator, EditOdsInstanceValidator

router = APIRouter()


def _to_response(ods_instance: OdsInstance) -> OdsInstanceResponse:
    return OdsInstanceResponse(
        id=ods_instance.ods_instance_id,
        name=ods_instance.name,
        instance_type=ods_instance.instance_type,
    )


@router.get("/odsInstances", response_model=list[OdsInstanceResponse])
def list_ods_instances(context: AdminContext = Depends(get_admin_context)):
    return [_to_response(i) for i in GetOdsInstancesQuery(context).execute()]


@router.get("/odsInstances/{ods_instance_id}", response_model=OdsInstanceResponse)
def get_ods_instance(ods_instance_id: int, context: AdminContext = Depends(get_admin_context)):
    return _to_response(GetOdsInstanceQuery(context).execute(ods_instance_id))


@router.post("/odsInstances", response_model=OdsInstanceResponse, status_code=201)
def add_ods_instance(
    request: AddOdsInstanceRequest,
    response: Response,
    context: AdminContext = Depends(get_admin_context),
):
    AddOdsInstanceValidator(context).guard(request)
    ods_instance = AddOdsInstanceCommand(context).execute(request)
    response.headers["Location"] = f"/odsInstances/{ods_instance.ods_instance_id}"
    return _to_response(ods_instance)


@router.put("/odsInstances/{ods_instance_id}", response_model=OdsInstanceResponse)
def edit_ods_instance(
    ods_instance_id: int,
    request: EditOdsInstanceRequest,
    context: AdminContext = Depends(get_admin_context),
):
    request.id = ods_instance_id
    EditOdsInstanceValidator(context).guard(request)
    return _to_response(EditOdsInstanceCommand(context).execute(request))


@router.delete("/odsInstances/{ods_instance_id}", status_code=204)
def delete_ods_instance(ods_instance_id: int, context: AdminContext = Depends(get_admin_context)):
    DeleteOdsInstanceCommand(context).execute(ods_instance_id)
    return Response(status_code=204)
