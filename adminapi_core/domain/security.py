"""
Security store rows and the claim-set domain objects built from them.

Claim sets live in a different database than applications, which is why an
application refers to its claim set by name only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


# --- Security store rows ---


@dataclass
class ClaimSetRow:
    claim_set_id: int = 0
    claim_set_name: str = ""
    is_edfi_preset: bool = False
    for_application_use_only: bool = False

    id_field: ClassVar[str] = "claim_set_id"


@dataclass
class ResourceClaimRow:
    resource_claim_id: int = 0
    resource_name: str = ""
    claim_name: str = ""
    parent_resource_claim_id: int | None = None

    id_field: ClassVar[str] = "resource_claim_id"


@dataclass
class ActionRow:
    action_id: int = 0
    action_name: str = ""
    action_uri: str = ""

    id_field: ClassVar[str] = "action_id"


@dataclass
class AuthorizationStrategyRow:
    authorization_strategy_id: int = 0
    authorization_strategy_name: str = ""
    display_name: str = ""

    id_field: ClassVar[str] = "authorization_strategy_id"


# --- Domain objects ---


@dataclass(frozen=True)
class ClaimSet:
    id: int
    name: str
    is_editable: bool


@dataclass(frozen=True)
class ResourceClaim:
    """A catalog resource claim. parent_id 0 means it has no parent."""

    id: int
    name: str
    parent_id: int = 0
    parent_name: str | None = None
