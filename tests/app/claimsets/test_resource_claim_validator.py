"""
Unit tests for ResourceClaimValidator.

The catalog used here mirrors a small security database:

    educationOrganizations (1)
        school (2)
        localEducationAgency (3)
    people (4)
        student (5)
    types (6)
"""

import pytest

from adminapi_core.domain.security import ResourceClaim
from adminapi_core.validation import ValidationContext
from app.claimsets.resource_claim_validator import (
    RESOURCE_CLAIM_ACTIONS_PROPERTY,
    RESOURCE_CLAIMS_PROPERTY,
    ResourceClaimValidator,
)
from app.claimsets.schemas import ClaimSetResourceClaimModel, EditResourceClaimOnClaimSetRequest

CLAIM_SET_NAME = "Test Claim Set"


def messages(context):
    return [f.error_message for f in context.failures]


class TestValidResourceClaims:
    """Tests for trees that should pass."""

    def test_valid_tree_has_no_failures(self, validator, context):
        claims = [
            resource(
                "educationOrganizations",
                children=[resource("school"), resource("localEducationAgency")],
                defaults=["NamespaceBased"],
                overrides=["NoFurtherAuthorizationRequired"],
            ),
            resource("types"),
        ]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert context.is_valid

    def test_resource_names_match_case_insensitively(self, validator, context):
        validator.validate_resource_claims([resource("EducationOrganizations")], context, CLAIM_SET_NAME)

        assert context.is_valid

    def test_action_names_match_case_insensitively(self, validator, context):
        claims = [resource("types", actions=[("read", True), ("CREATE", True)])]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert context.is_valid

    def test_empty_claim_set_is_valid(self, validator, context):
        validator.validate_resource_claims([], context, CLAIM_SET_NAME)

        assert context.is_valid


class TestResourceExistence:
    def test_unknown_resource_is_reported(self, validator, context):
        validator.validate_resource_claims([resource("doesNotExist")], context, CLAIM_SET_NAME)

        assert messages(context) == [
            "This Claim Set contains a resource which is not in the system. "
            "Claimset Name: 'Test Claim Set' Resource: 'doesNotExist'."
        ]
        assert context.failures[0].property_name == RESOURCE_CLAIMS_PROPERTY

    def test_unknown_child_is_reported_by_recursion(self, validator, context):
        claims = [resource("people", children=[resource("ghost")])]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert len(context.failures) == 1
        assert "Resource: 'ghost'" in context.failures[0].error_message


class TestDuplicateResources:
    def test_duplicate_is_reported_once(self, validator, context):
        claims = [resource("types"), resource("types"), resource("types")]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert messages(context) == [
            "Only unique resource claims can be added. The following is a duplicate resource: 'types'."
        ]

    def test_each_run_reports_duplicates_again(self, validator):
        claims = [resource("types"), resource("types")]
        first = ValidationContext()
        second = ValidationContext()

        validator.validate_resource_claims(claims, first, CLAIM_SET_NAME)
        validator.validate_resource_claims(claims, second, CLAIM_SET_NAME)

        assert len(first.failures) == 1
        assert len(second.failures) == 1

    def test_duplicate_children_are_reported(self, validator, context):
        claims = [resource("people", children=[resource("student"), resource("student")])]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert messages(context) == [
            "Only unique resource claims can be added. The following is a duplicate resource: 'student'."
        ]

    def test_same_name_at_different_levels_is_not_a_duplicate(self, validator, context):
        claims = [resource("people", children=[resource("student")]), resource("types")]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert context.is_valid

    def test_validate_by_name_shares_flagged_duplicates(self, validator, context):
        claims = [resource("types"), resource("types")]
        flagged = set()

        for claim in claims:
            validator.validate_by_name(claim, claims, context, CLAIM_SET_NAME, flagged)

        assert len(context.failures) == 1
        assert flagged == {"types"}


class TestActions:
    def test_empty_actions(self, validator, context):
        validator.validate_resource_claims([resource("types", actions=[])], context, CLAIM_SET_NAME)

        assert messages(context) == ["Actions can not be empty."]

    def test_missing_actions(self, validator, context):
        claim = ClaimSetResourceClaimModel(name="types", actions=None)

        validator.validate_resource_claims([claim], context, CLAIM_SET_NAME)

        assert messages(context) == ["Actions can not be empty."]

    def test_no_enabled_action(self, validator, context):
        claims = [resource("types", actions=[("Read", False), ("Create", False)])]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert messages(context) == ["A resource must have at least one action associated with it to be added."]

    def test_duplicated_and_invalid_actions(self, validator, context):
        claims = [resource("types", actions=[("Read", True), ("Read", False), ("Fly", True)])]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert messages(context) == ["Read action is duplicated.", "Fly is not a valid action."]

    def test_every_invalid_action_is_reported(self, validator, context):
        claims = [resource("types", actions=[("Fly", True), ("Swim", True)])]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert messages(context) == ["Fly is not a valid action.", "Swim is not a valid action."]


class TestAuthorizationStrategies:
    def test_unknown_default_and_override_are_reported(self, validator, context):
        claims = [resource("types", defaults=["Magic"], overrides=["AlsoMagic"])]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert messages(context) == [
            "This resource claim contains an authorization strategy which is not in the system. "
            "Claimset Name: 'Test Claim Set' Resource name: 'types' Authorization strategy: 'Magic'.",
            "This resource claim contains an authorization strategy which is not in the system. "
            "Claimset Name: 'Test Claim Set' Resource name: 'types' Authorization strategy: 'AlsoMagic'.",
        ]

    def test_strategy_names_are_case_sensitive(self, validator, context):
        validator.validate_resource_claims([resource("types", defaults=["namespacebased"])], context, CLAIM_SET_NAME)

        assert len(context.failures) == 1

    def test_null_entries_are_skipped(self, validator, context):
        claim = ClaimSetResourceClaimModel.model_validate(
            {
                "name": "types",
                "actions": [{"name": "Read", "enabled": True}],
                "defaultAuthorizationStrategiesForCRUD": [None, {"actionName": "Read", "authorizationStrategies": None}],
                "authorizationStrategyOverridesForCRUD": [
                    {"actionName": "Read", "authorizationStrategies": [None, {"authStrategyName": None}]}
                ],
            }
        )

        validator.validate_resource_claims([claim], context, CLAIM_SET_NAME)

        assert context.is_valid


class TestParentChildConsistency:
    def test_top_level_resource_cannot_be_a_child(self, validator, context):
        claims = [resource("educationOrganizations", children=[resource("types")])]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert messages(context) == ["'types' can not be added as a child resource."]

    def test_child_under_wrong_parent_names_correct_parent(self, validator, context):
        claims = [resource("educationOrganizations", children=[resource("student")])]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert messages(context) == [
            "Child resource: 'student' added to the wrong parent resource. Correct parent resource is: 'people'."
        ]

    def test_failures_accumulate_across_checks(self, validator, context):
        claims = [
            resource("types"),
            resource("types"),
            resource("unknown", actions=[]),
            resource("people", children=[resource("school")]),
        ]

        validator.validate_resource_claims(claims, context, CLAIM_SET_NAME)

        assert len(context.failures) == 4
        assert all(f.property_name == RESOURCE_CLAIMS_PROPERTY for f in context.failures)


class TestValidateById:
    def test_known_resource_with_actions_is_valid(self, validator, context):
        request = edit_request(resource_claim_id=2, actions=[("Read", True)])

        validator.validate_by_id(request, context, CLAIM_SET_NAME)

        assert context.is_valid

    def test_unknown_resource_id_is_reported(self, validator, context):
        request = edit_request(resource_claim_id=999, actions=[("Read", True)])

        validator.validate_by_id(request, context, CLAIM_SET_NAME)

        assert messages(context) == [
            "This Claim Set contains a resource which is not in the system. "
            "Claimset Name: 'Test Claim Set' Resource: '999'."
        ]
        assert context.failures[0].property_name == RESOURCE_CLAIM_ACTIONS_PROPERTY

    def test_actions_are_checked(self, validator, context):
        request = edit_request(resource_claim_id=999, actions=[])

        validator.validate_by_id(request, context, CLAIM_SET_NAME)

        assert len(context.failures) == 2
        assert messages(context)[1] == "Actions can not be empty."


# --- Helpers ---


def resource(name, actions=None, children=None, defaults=None, overrides=None):
    """Build a resource claim entry. Defaults to a single enabled Read action."""
    if actions is None:
        actions = [("Read", True)]
    return ClaimSetResourceClaimModel(
        name=name,
        actions=[{"name": n, "enabled": e} for n, e in actions],
        children=children or [],
        default_authorization_strategies_for_crud=_strategies(defaults),
        authorization_strategy_overrides_for_crud=_strategies(overrides),
    )


def _strategies(names):
    if names is None:
        return None
    return [{"actionName": "Read", "authorizationStrategies": [{"authStrategyName": n} for n in names]}]


def edit_request(resource_claim_id, actions):
    return EditResourceClaimOnClaimSetRequest(
        claim_set_id=1,
        resource_claim_id=resource_claim_id,
        resource_claim_actions=[{"name": n, "enabled": e} for n, e in actions],
    )


# --- Fixtures ---


@pytest.fixture
def validator():
    """Provides a validator over a small resource-claim hierarchy."""
    return ResourceClaimValidator(
        [
            ResourceClaim(id=1, name="educationOrganizations"),
            ResourceClaim(id=2, name="school", parent_id=1, parent_name="educationOrganizations"),
            ResourceClaim(id=3, name="localEducationAgency", parent_id=1, parent_name="educationOrganizations"),
            ResourceClaim(id=4, name="people"),
            ResourceClaim(id=5, name="student", parent_id=4, parent_name="people"),
            ResourceClaim(id=6, name="types"),
        ],
        ["Create", "Read", "Update", "Delete"],
        ["NoFurtherAuthorizationRequired", "NamespaceBased", "RelationshipsWithEdOrgsOnly"],
    )


@pytest.fixture
def context():
    return ValidationContext()
