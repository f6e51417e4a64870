"""
Read-only claim-set queries against the security store.

Each query reads through the SecurityContext it was built with; contexts are
opened per request, so results always reflect the current store.
"""

from __future__ import annotations

from adminapi_core.domain.exceptions import NotFoundError
from adminapi_core.domain.interfaces import SecurityContext
from adminapi_core.domain.security import ClaimSet, ClaimSetRow, ResourceClaim


def to_claim_set(row: ClaimSetRow) -> ClaimSet:
    """Map a security store row to the domain ClaimSet."""
    return ClaimSet(
        id=row.claim_set_id,
        name=row.claim_set_name,
        is_editable=not row.for_application_use_only and not row.is_edfi_preset,
    )


class GetClaimSetByIdQuery:
    def __init__(self, security_context: SecurityContext):
        self._security_context = security_context

    def execute(self, claim_set_id: int) -> ClaimSet:
        """
        Look up a claim set by id.

        Raises:
            NotFoundError: If no claim set has this id.
        """
        row = self._security_context.claim_sets.get(claim_set_id)
        if row is None:
            raise NotFoundError("claimset", claim_set_id)
        return to_claim_set(row)


class GetClaimSetsQuery:
    def __init__(self, security_context: SecurityContext):
        self._security_context = security_context

    def execute(self) -> list[ClaimSet]:
        return [to_claim_set(row) for row in self._security_context.claim_sets]


class GetResourceClaimsQuery:
    """All catalog resource claims, with parent names resolved."""

    def __init__(self, security_context: SecurityContext):
        self._security_context = security_context

    def execute(self) -> list[ResourceClaim]:
        rows = list(self._security_context.resource_claims)
        names = {row.resource_claim_id: row.resource_name for row in rows}
        return [
            ResourceClaim(
                id=row.resource_claim_id,
                name=row.resource_name,
                parent_id=row.parent_resource_claim_id or 0,
                parent_name=names.get(row.parent_resource_claim_id or 0),
            )
            for row in rows
        ]


class GetActionsQuery:
    def __init__(self, security_context: SecurityContext):
        self._security_context = security_context

    def execute(self) -> list[str]:
        return [row.action_name for row in self._security_context.actions]


class GetAuthStrategiesQuery:
    def __init__(self, security_context: SecurityContext):
        self._security_context = security_context

    def execute(self) -> list[str]:
        return [row.authorization_strategy_name for row in self._security_context.authorization_strategies]
