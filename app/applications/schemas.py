"""
Pydantic schemas for the applications module.
"""

from __future__ import annotations

from app.claimsets.schemas import ApiModel


class AddApplicationRequest(ApiModel):
    """Request model for creating an application.

    Omitted id lists mean "none": an application can be created without
    profiles, education organizations or ODS instances.
    """

    application_name: str | None = None
    vendor_id: int = 0
    claim_set_name: str | None = None
    profile_ids: list[int] | None = None
    education_organization_ids: list[int] | None = None
    ods_instance_ids: list[int] | None = None


class EditApplicationRequest(AddApplicationRequest):
    """Request model for replacing an application.

    Every collection is replaced wholesale: an omitted list clears it.
    """

    id: int = 0


class AddApplicationResponse(ApiModel):
    id: int
    key: str
    secret: str


class ApplicationResponse(ApiModel):
    id: int
    application_name: str
    claim_set_name: str
    vendor_id: int
    profile_ids: list[int]
    education_organization_ids: list[int]
    ods_instance_ids: list[int]
