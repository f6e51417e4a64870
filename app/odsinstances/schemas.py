"""
Pydantic schemas for the ODS instances module.
"""

from __future__ import annotations

from app.claimsets.schemas import ApiModel


class AddOdsInstanceRequest(ApiModel):
    name: str | None = None
    instance_type: str | None = None
    connection_string: str | None = None


class EditOdsInstanceRequest(AddOdsInstanceRequest):
    """A blank connection string keeps the stored one."""

    id: int = 0


class OdsInstanceResponse(ApiModel):
    """ODS instance as returned to callers. The connection string is never echoed."""

    id: int
    name: str
    instance_type: str
