"""
Pydantic schemas for the claim-set module.

Request bodies use camelCase on the wire; the models accept either spelling.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResourceClaimAction(ApiModel):
    name: str | None = None
    enabled: bool = False


class AuthorizationStrategy(ApiModel):
    auth_strategy_id: int = 0
    auth_strategy_name: str | None = None
    is_inherited_from_parent: bool = False


class ClaimSetResourceClaimActionAuthStrategies(ApiModel):
    """Authorization strategies assigned to one action of a resource claim."""

    action_id: int | None = None
    action_name: str | None = None
    authorization_strategies: list[AuthorizationStrategy | None] | None = None


class ClaimSetResourceClaimModel(ApiModel):
    """A resource claim as attached to a claim set, with nested children."""

    id: int = 0
    name: str | None = None
    actions: list[ResourceClaimAction] | None = None
    default_authorization_strategies_for_crud: list[ClaimSetResourceClaimActionAuthStrategies | None] | None = Field(
        default=None, alias="defaultAuthorizationStrategiesForCRUD"
    )
    authorization_strategy_overrides_for_crud: list[ClaimSetResourceClaimActionAuthStrategies | None] | None = Field(
        default=None, alias="authorizationStrategyOverridesForCRUD"
    )
    children: list[ClaimSetResourceClaimModel] = Field(default_factory=list)


class AddClaimSetRequest(ApiModel):
    name: str | None = None
    resource_claims: list[ClaimSetResourceClaimModel] = Field(default_factory=list)


class EditClaimSetRequest(ApiModel):
    id: int = 0
    name: str | None = None
    resource_claims: list[ClaimSetResourceClaimModel] = Field(default_factory=list)


class EditResourceClaimOnClaimSetRequest(ApiModel):
    claim_set_id: int = 0
    resource_claim_id: int = 0
    resource_claim_actions: list[ResourceClaimAction] | None = None


class ClaimSetResponse(ApiModel):
    id: int
    name: str
    is_editable: bool


class ValidationResponse(ApiModel):
    valid: bool
