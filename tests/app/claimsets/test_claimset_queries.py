"""
Unit tests for the claim-set queries over the default security data.
"""

import pytest

from adminapi_core.domain.exceptions import NotFoundError
from adminapi_core.domain.security import ClaimSet, ClaimSetRow
from adminapi_core.infrastructure.seed import build_security_store
from app.claimsets.queries import (
    GetActionsQuery,
    GetAuthStrategiesQuery,
    GetClaimSetByIdQuery,
    GetClaimSetsQuery,
    GetResourceClaimsQuery,
)


class TestGetClaimSetByIdQuery:
    def test_preset_claim_set_is_not_editable(self, security_store):
        claim_set = GetClaimSetByIdQuery(security_store.context()).execute(1)

        assert claim_set == ClaimSet(id=1, name="SIS Vendor", is_editable=False)

    def test_application_only_claim_set_is_not_editable(self, security_store):
        claim_set = GetClaimSetByIdQuery(security_store.context()).execute(3)

        assert claim_set.name == "Bootstrap Descriptors and EdOrgs"
        assert claim_set.is_editable is False

    def test_user_claim_set_is_editable(self, security_store):
        claim_set = GetClaimSetByIdQuery(security_store.context()).execute(5)

        assert claim_set.is_editable is True

    def test_missing_claim_set_raises_not_found(self, security_store):
        with pytest.raises(NotFoundError) as exc_info:
            GetClaimSetByIdQuery(security_store.context()).execute(404)

        assert exc_info.value.resource_name == "claimset"
        assert exc_info.value.resource_id == 404

    def test_reads_current_store_state(self, security_store):
        """A claim set added to the store should be visible to the next context."""
        security_store.claim_sets.append(ClaimSetRow(claim_set_id=6, claim_set_name="Late"))

        assert GetClaimSetByIdQuery(security_store.context()).execute(6).name == "Late"


class TestGetClaimSetsQuery:
    def test_returns_every_claim_set(self, security_store):
        names = [c.name for c in GetClaimSetsQuery(security_store.context()).execute()]

        assert names == [
            "SIS Vendor",
            "Ed-Fi Sandbox",
            "Bootstrap Descriptors and EdOrgs",
            "District Hosted SIS Vendor",
            "District Custom",
        ]


class TestGetResourceClaimsQuery:
    def test_top_level_claim_has_no_parent(self, security_store):
        claims = {c.name: c for c in GetResourceClaimsQuery(security_store.context()).execute()}

        assert claims["types"].parent_id == 0
        assert claims["types"].parent_name is None

    def test_child_claim_has_parent_name(self, security_store):
        claims = {c.name: c for c in GetResourceClaimsQuery(security_store.context()).execute()}

        assert claims["school"].parent_id == claims["educationOrganizations"].id
        assert claims["school"].parent_name == "educationOrganizations"


class TestReferenceDataQueries:
    def test_actions(self, security_store):
        assert GetActionsQuery(security_store.context()).execute() == [
            "Create",
            "Read",
            "Update",
            "Delete",
            "ReadChanges",
        ]

    def test_auth_strategies_include_defaults(self, security_store):
        strategies = GetAuthStrategiesQuery(security_store.context()).execute()

        assert "NoFurtherAuthorizationRequired" in strategies
        assert "NamespaceBased" in strategies


# --- Fixtures ---


@pytest.fixture
def security_store():
    """Provides the default security data plus one user-created claim set."""
    store = build_security_store()
    store.claim_sets.append(ClaimSetRow(claim_set_id=5, claim_set_name="District Custom"))
    return store
