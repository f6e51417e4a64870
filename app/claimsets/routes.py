"""
Claim set API routes.

- GET /claimSets - list claim sets
- GET /claimSets/{id} - one claim set
- POST /claimSets/validate - validate a new claim set definition without saving it
- POST /claimSets/{id}/validate - validate an edit of an existing claim set
- POST /claimSets/{id}/resourceClaimActions/validate - validate the actions
  being set on one resource claim of a claim set
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from adminapi_core.domain.interfaces import SecurityContext
from app.claimsets.queries import GetClaimSetByIdQuery, GetClaimSetsQuery
from app.claimsets.schemas import (
    AddClaimSetRequest,
    ClaimSetResponse,
    EditClaimSetRequest,
    EditResourceClaimOnClaimSetRequest,
    ValidationResponse,
)
from app.claimsets.validators import (
    AddClaimSetValidator,
    EditClaimSetValidator,
    EditResourceClaimActionsValidator,
)
from app.factory import get_security_context

router = APIRouter()


def _to_response(claim_set) -> ClaimSetResponse:
    return ClaimSetResponse(id=claim_set.id, name=claim_set.name, is_editable=claim_set.is_editable)


@router.get("/claimSets", response_model=list[ClaimSetResponse])
def list_claim_sets(security_context: SecurityContext = Depends(get_security_context)):
    return [_to_response(c) for c in GetClaimSetsQuery(security_context).execute()]


@router.get("/claimSets/{claim_set_id}", response_model=ClaimSetResponse)
def get_claim_set(claim_set_id: int, security_context: SecurityContext = Depends(get_security_context)):
    return _to_response(GetClaimSetByIdQuery(security_context).execute(claim_set_id))


@router.post("/claimSets/validate", response_model=ValidationResponse)
def validate_claim_set(
    request: AddClaimSetRequest,
    security_context: SecurityContext = Depends(get_security_context),
):
    """
    Run the claim set validation rules, resource claims included.

    Returns 200 when the definition is valid and 400 with every failure,
    grouped by field, when it is not.
    """
    AddClaimSetValidator(security_context).guard(request)
    return ValidationResponse(valid=True)


@router.post("/claimSets/{claim_set_id}/validate", response_model=ValidationResponse)
def validate_claim_set_edit(
    claim_set_id: int,
    request: EditClaimSetRequest,
    security_context: SecurityContext = Depends(get_security_context),
):
    """Validate an edit of an existing claim set. The path id wins over the body."""
    request.id = claim_set_id
    EditClaimSetValidator(security_context).guard(request)
    return ValidationResponse(valid=True)


@router.post("/claimSets/{claim_set_id}/resourceClaimActions/validate", response_model=ValidationResponse)
def validate_resource_claim_actions(
    claim_set_id: int,
    request: EditResourceClaimOnClaimSetRequest,
    security_context: SecurityContext = Depends(get_security_context),
):
    request.claim_set_id = claim_set_id
    EditResourceClaimActionsValidator(security_context).guard(request)
    return ValidationResponse(valid=True)
