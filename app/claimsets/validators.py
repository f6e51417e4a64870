"""
Request validators for claim sets.

Validators read reference data fresh on every call and never mutate the
stores. validate() returns the populated ValidationContext; guard() raises
ValidationError when anything failed.
"""

from __future__ import annotations

from adminapi_core.domain.exceptions import ValidationError
from adminapi_core.domain.interfaces import SecurityContext
from adminapi_core.validation import ValidationContext, is_blank
from app.claimsets.queries import (
    GetActionsQuery,
    GetAuthStrategiesQuery,
    GetClaimSetByIdQuery,
    GetClaimSetsQuery,
    GetResourceClaimsQuery,
)
from app.claimsets.resource_claim_validator import ResourceClaimValidator
from app.claimsets.schemas import (
    AddClaimSetRequest,
    EditClaimSetRequest,
    EditResourceClaimOnClaimSetRequest,
)

MAXIMUM_CLAIM_SET_NAME_LENGTH = 255

NAME_EMPTY = "'Name' must not be empty."
NAME_TOO_LONG = "The claim set name must be less than 255 characters."
CLAIM_SET_ALREADY_EXISTS = "A claim set with this name already exists in the database. Please enter a unique name."
CLAIM_SET_NOT_EDITABLE = "Only user created claim sets can be edited."


def build_resource_claim_validator(security_context: SecurityContext) -> ResourceClaimValidator:
    """Snapshot the security store's catalogs into a ResourceClaimValidator."""
    return ResourceClaimValidator(
        GetResourceClaimsQuery(security_context).execute(),
        GetActionsQuery(security_context).execute(),
        GetAuthStrategiesQuery(security_context).execute(),
    )


class _ClaimSetValidator:
    def __init__(self, security_context: SecurityContext):
        self._security_context = security_context

    def _is_unique_name(self, name: str, ignore_id: int | None = None) -> bool:
        wanted = name.strip().lower()
        return all(
            claim_set.name.strip().lower() != wanted
            for claim_set in GetClaimSetsQuery(self._security_context).execute()
            if claim_set.id != ignore_id
        )

    def _validate_name(self, name: str | None, context: ValidationContext, ignore_id: int | None = None) -> None:
        if is_blank(name):
            context.add_failure("name", NAME_EMPTY)
            return
        if len(name) > MAXIMUM_CLAIM_SET_NAME_LENGTH:
            context.add_failure("name", NAME_TOO_LONG)
        if not self._is_unique_name(name, ignore_id):
            context.add_failure("name", CLAIM_SET_ALREADY_EXISTS)

    def guard(self, request) -> None:
        context = self.validate(request)
        if not context.is_valid:
            raise ValidationError(context.failures)


class AddClaimSetValidator(_ClaimSetValidator):
    def validate(self, request: AddClaimSetRequest) -> ValidationContext:
        context = ValidationContext(claim_set_name=request.name)
        self._validate_name(request.name, context)

        validator = build_resource_claim_validator(self._security_context)
        validator.validate_resource_claims(request.resource_claims, context, request.name)
        return context


class EditClaimSetValidator(_ClaimSetValidator):
    def validate(self, request: EditClaimSetRequest) -> ValidationContext:
        """
        Raises:
            NotFoundError: If the claim set being edited does not exist.
        """
        existing = GetClaimSetByIdQuery(self._security_context).execute(request.id)
        context = ValidationContext(claim_set_name=request.name)

        if not existing.is_editable:
            context.add_failure("id", CLAIM_SET_NOT_EDITABLE)

        if is_blank(request.name) or request.name != existing.name:
            self._validate_name(request.name, context, ignore_id=existing.id)

        validator = build_resource_claim_validator(self._security_context)
        validator.validate_resource_claims(request.resource_claims, context, request.name)
        return context


class EditResourceClaimActionsValidator(_ClaimSetValidator):
    def validate(self, request: EditResourceClaimOnClaimSetRequest) -> ValidationContext:
        """
        Raises:
            NotFoundError: If the claim set does not exist.
        """
        claim_set = GetClaimSetByIdQuery(self._security_context).execute(request.claim_set_id)
        context = ValidationContext(claim_set_name=claim_set.name)

        if not claim_set.is_editable:
            context.add_failure("claimSetId", CLAIM_SET_NOT_EDITABLE)

        validator = build_resource_claim_validator(self._security_context)
        validator.validate_by_id(request, context, claim_set.name)
        return context
