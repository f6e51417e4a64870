"""
Structural and semantic validation of a claim set's resource claims.

A claim set attaches a tree of resource claims, each with CRUD actions and
optional default/override authorization strategies. Every entry is checked
against a snapshot of the security store's catalog:

- no resource claim appears twice at the same level
- at least one action is enabled, action names are known and not repeated
- the resource claim exists in the catalog
- every authorization strategy name exists
- children really are children of the entry they are nested under

Failures accumulate on the ValidationContext; nothing short-circuits.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from loguru import logger

from adminapi_core.domain.security import ResourceClaim
from adminapi_core.validation import ValidationContext
from app.claimsets.schemas import (
    ClaimSetResourceClaimActionAuthStrategies,
    ClaimSetResourceClaimModel,
    EditResourceClaimOnClaimSetRequest,
    ResourceClaimAction,
)

RESOURCE_CLAIMS_PROPERTY = "resourceClaims"
RESOURCE_CLAIM_ACTIONS_PROPERTY = "resourceClaimActions"

RESOURCE_NOT_IN_SYSTEM = (
    "This Claim Set contains a resource which is not in the system. "
    "Claimset Name: '{claim_set_name}' Resource: '{resource_claim_name}'."
)
DUPLICATE_RESOURCE = (
    "Only unique resource claims can be added. "
    "The following is a duplicate resource: '{resource_claim_name}'."
)
NOT_A_CHILD_RESOURCE = "'{child_resource}' can not be added as a child resource."
WRONG_PARENT_RESOURCE = (
    "Child resource: '{child_resource}' added to the wrong parent resource. "
    "Correct parent resource is: '{correct_parent_resource}'."
)
AUTH_STRATEGY_NOT_IN_SYSTEM = (
    "This resource claim contains an authorization strategy which is not in the system. "
    "Claimset Name: '{claim_set_name}' Resource name: '{resource_claim_name}' "
    "Authorization strategy: '{auth_strategy_name}'."
)
ACTIONS_EMPTY = "Actions can not be empty."
NO_ACTION_ENABLED = "A resource must have at least one action associated with it to be added."
ACTION_DUPLICATED = "{action_name} action is duplicated."
ACTION_NOT_VALID = "{action_name} is not a valid action."


class ResourceClaimCatalog:
    """Catalog resource claims indexed by case-insensitive name and by id."""

    def __init__(self, resource_claims: Iterable[ResourceClaim]):
        self._by_name: dict[str, list[ResourceClaim]] = defaultdict(list)
        self._by_id: dict[int, list[ResourceClaim]] = defaultdict(list)
        for resource_claim in resource_claims:
            self._by_name[(resource_claim.name or "").lower()].append(resource_claim)
            self._by_id[resource_claim.id].append(resource_claim)

    def by_name(self, name: str | None) -> list[ResourceClaim]:
        return list(self._by_name.get((name or "").lower(), []))

    def by_id(self, resource_claim_id: int) -> list[ResourceClaim]:
        return list(self._by_id.get(resource_claim_id, []))


class ResourceClaimValidator:
    """
    Validates resource-claim entries against one snapshot of reference data.

    Duplicate names are reported once per validation run. The set of names
    already reported is created by the entry points and passed down the
    recursion, so separate runs on the same validator never share it.

    Usage:
        validator = ResourceClaimValidator(catalog_claims, action_names, strategy_names)
        context = ValidationContext()
        validator.validate_resource_claims(request.resource_claims, context, request.name)
        context.raise_if_invalid()
    """

    def __init__(
        self,
        resource_claims: Iterable[ResourceClaim] | ResourceClaimCatalog,
        actions: Iterable[str],
        authorization_strategies: Iterable[str | None],
    ):
        if isinstance(resource_claims, ResourceClaimCatalog):
            self.catalog = resource_claims
        else:
            self.catalog = ResourceClaimCatalog(resource_claims)
        self.actions = {name.lower() for name in actions if name is not None}
        self.authorization_strategies = {name for name in authorization_strategies if name is not None}

    def validate_resource_claims(
        self,
        resource_claims: list[ClaimSetResourceClaimModel],
        context: ValidationContext,
        claim_set_name: str | None,
    ) -> None:
        """Validate every top-level resource claim of a claim set in one run."""
        flagged_duplicates: set[str] = set()
        failures_before = len(context.failures)

        for resource_claim in resource_claims:
            self.validate_by_name(resource_claim, resource_claims, context, claim_set_name, flagged_duplicates)

        logger.debug(
            f"Validated {len(resource_claims)} resource claim(s) for claim set '{claim_set_name}': "
            f"{len(context.failures) - failures_before} failure(s)"
        )

    def validate_by_name(
        self,
        resource_claim: ClaimSetResourceClaimModel,
        existing_resource_claims: list[ClaimSetResourceClaimModel],
        context: ValidationContext,
        claim_set_name: str | None,
        flagged_duplicates: set[str] | None = None,
    ) -> None:
        """
        Validate one resource claim entry and its children.

        Args:
            resource_claim: The entry to validate.
            existing_resource_claims: All entries at the same level, the
                entry itself included; used for duplicate detection.
            context: Receives the failures.
            claim_set_name: Name of the claim set being created or edited.
            flagged_duplicates: Duplicate names already reported in this run.
                A fresh set is used when omitted.
        """
        if flagged_duplicates is None:
            flagged_duplicates = set()
        self._validate(resource_claim, existing_resource_claims, context, claim_set_name, flagged_duplicates)

    def validate_by_id(
        self,
        request: EditResourceClaimOnClaimSetRequest,
        context: ValidationContext,
        claim_set_name: str | None,
    ) -> None:
        """Validate the actions being set on a resource claim identified by id."""
        resources = self.catalog.by_id(request.resource_claim_id)
        arguments = {"claim_set_name": claim_set_name, "resource_claim_name": request.resource_claim_id}

        if not resources:
            context.add_failure(RESOURCE_CLAIM_ACTIONS_PROPERTY, RESOURCE_NOT_IN_SYSTEM, **arguments)
        self._validate_crud(request.resource_claim_actions, context, RESOURCE_CLAIM_ACTIONS_PROPERTY)

    def _validate(
        self,
        resource_claim: ClaimSetResourceClaimModel,
        existing_resource_claims: list[ClaimSetResourceClaimModel],
        context: ValidationContext,
        claim_set_name: str | None,
        flagged_duplicates: set[str],
    ) -> None:
        arguments = {"claim_set_name": claim_set_name, "resource_claim_name": resource_claim.name}

        self._validate_duplicate(resource_claim, existing_resource_claims, context, flagged_duplicates, arguments)
        self._validate_crud(resource_claim.actions, context, RESOURCE_CLAIMS_PROPERTY)

        resources = self.catalog.by_name(resource_claim.name)
        if not resources:
            context.add_failure(RESOURCE_CLAIMS_PROPERTY, RESOURCE_NOT_IN_SYSTEM, **arguments)

        self._validate_auth_strategies(resource_claim.default_authorization_strategies_for_crud, context, arguments)
        self._validate_auth_strategies(resource_claim.authorization_strategy_overrides_for_crud, context, arguments)
        self._validate_children(resource_claim, resources, context, claim_set_name, flagged_duplicates)

    def _validate_duplicate(
        self,
        resource_claim: ClaimSetResourceClaimModel,
        existing_resource_claims: list[ClaimSetResourceClaimModel],
        context: ValidationContext,
        flagged_duplicates: set[str],
        arguments: dict,
    ) -> None:
        name = resource_claim.name
        if name is None or name in flagged_duplicates:
            return
        if sum(1 for existing in existing_resource_claims if existing.name == name) > 1:
            flagged_duplicates.add(name)
            context.add_failure(RESOURCE_CLAIMS_PROPERTY, DUPLICATE_RESOURCE, **arguments)

    def _validate_crud(
        self,
        actions: list[ResourceClaimAction] | None,
        context: ValidationContext,
        property_name: str,
    ) -> None:
        if not actions:
            context.add_failure(property_name, ACTIONS_EMPTY)
            return

        if not any(action.enabled for action in actions):
            context.add_failure(property_name, NO_ACTION_ENABLED)
            return

        counts: dict[str | None, int] = {}
        for action in actions:
            counts[action.name] = counts.get(action.name, 0) + 1
        for name, count in counts.items():
            if count > 1:
                context.add_failure(property_name, ACTION_DUPLICATED, action_name=name)

        for action in actions:
            if action.name is None or action.name.lower() not in self.actions:
                context.add_failure(property_name, ACTION_NOT_VALID, action_name=action.name)

    def _validate_auth_strategies(
        self,
        strategies_for_crud: list[ClaimSetResourceClaimActionAuthStrategies | None] | None,
        context: ValidationContext,
        arguments: dict,
    ) -> None:
        for strategies_with_action in strategies_for_crud or []:
            if strategies_with_action is None or strategies_with_action.authorization_strategies is None:
                continue
            for strategy in strategies_with_action.authorization_strategies:
                name = strategy.auth_strategy_name if strategy is not None else None
                if name is not None and name not in self.authorization_strategies:
                    context.add_failure(
                        RESOURCE_CLAIMS_PROPERTY, AUTH_STRATEGY_NOT_IN_SYSTEM, auth_strategy_name=name, **arguments
                    )

    def _validate_children(
        self,
        resource_claim: ClaimSetResourceClaimModel,
        resources: list[ResourceClaim],
        context: ValidationContext,
        claim_set_name: str | None,
        flagged_duplicates: set[str],
    ) -> None:
        parent_ids = {resource.id for resource in resources}

        for child in resource_claim.children:
            for child_resource in self.catalog.by_name(child.name):
                if child_resource.parent_id == 0:
                    context.add_failure(
                        RESOURCE_CLAIMS_PROPERTY, NOT_A_CHILD_RESOURCE, child_resource=child_resource.name
                    )
                elif child_resource.parent_id not in parent_ids:
                    context.add_failure(
                        RESOURCE_CLAIMS_PROPERTY,
                        WRONG_PARENT_RESOURCE,
                        child_resource=child_resource.name,
                        correct_parent_resource=child_resource.parent_name,
                    )
            self._validate(child, resource_claim.children, context, claim_set_name, flagged_duplicates)
