"""
Default security reference data for the in-memory security store.

Mirrors the shape of a freshly installed security database: the CRUD actions,
the standard authorization strategies, the preset claim sets and a small
resource-claim hierarchy.
"""

from __future__ import annotations

from adminapi_core.domain.security import (
    ActionRow,
    AuthorizationStrategyRow,
    ClaimSetRow,
    ResourceClaimRow,
)
from adminapi_core.infrastructure.memory import InMemorySecurityStore

ACTIONS = ["Create", "Read", "Update", "Delete", "ReadChanges"]

AUTHORIZATION_STRATEGIES = [
    ("NoFurtherAuthorizationRequired", "No Further Authorization Required"),
    ("RelationshipsWithEdOrgsAndPeople", "Relationships with Education Organizations and People"),
    ("RelationshipsWithEdOrgsOnly", "Relationships with Education Organizations only"),
    ("NamespaceBased", "Namespace Based"),
    ("RelationshipsWithPeopleOnly", "Relationships with People only"),
    ("RelationshipsWithStudentsOnly", "Relationships with Students only"),
    ("OwnershipBased", "Ownership Based"),
]

CLAIM_SETS = [
    # name, is_edfi_preset, for_application_use_only
    ("SIS Vendor", True, False),
    ("Ed-Fi Sandbox", True, False),
    ("Bootstrap Descriptors and EdOrgs", False, True),
    ("District Hosted SIS Vendor", True, False),
]

# id, name, parent id
RESOURCE_CLAIMS = [
    (1, "types", None),
    (2, "systemDescriptors", None),
    (3, "educationOrganizations", None),
    (4, "people", None),
    (5, "relationshipBasedData", None),
    (6, "academicSubjectDescriptor", 2),
    (7, "gradeLevelDescriptor", 2),
    (8, "school", 3),
    (9, "localEducationAgency", 3),
    (10, "student", 4),
    (11, "staff", 4),
    (12, "studentSchoolAssociation", 5),
    (13, "studentSectionAssociation", 5),
]


def build_security_store() -> InMemorySecurityStore:
    """Create an in-memory security store with the default reference data."""
    return InMemorySecurityStore(
        claim_sets=[
            ClaimSetRow(
                claim_set_id=index,
                claim_set_name=name,
                is_edfi_preset=preset,
                for_application_use_only=app_only,
            )
            for index, (name, preset, app_only) in enumerate(CLAIM_SETS, start=1)
        ],
        resource_claims=[
            ResourceClaimRow(
                resource_claim_id=claim_id,
                resource_name=name,
                claim_name=f"http://ed-fi.org/ods/identity/claims/domains/{name}",
                parent_resource_claim_id=parent_id,
            )
            for claim_id, name, parent_id in RESOURCE_CLAIMS
        ],
        actions=[
            ActionRow(
                action_id=index,
                action_name=name,
                action_uri=f"http://ed-fi.org/odsapi/actions/{name[0].lower()}{name[1:]}",
            )
            for index, name in enumerate(ACTIONS, start=1)
        ],
        authorization_strategies=[
            AuthorizationStrategyRow(
                authorization_strategy_id=index,
                authorization_strategy_name=name,
                display_name=display,
            )
            for index, (name, display) in enumerate(AUTHORIZATION_STRATEGIES, start=1)
        ],
    )
