"""
Admin store entities.

Rows reference each other by identifier only. An identifier of 0 means the
row has not been added to a context yet; the context assigns one on add.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from adminapi_core.config import settings


@dataclass
class Vendor:
    vendor_id: int = 0
    vendor_name: str = ""
    namespace_prefixes: list[str] = field(default_factory=list)

    id_field: ClassVar[str] = "vendor_id"

    @property
    def is_system_reserved(self) -> bool:
        """Reserved vendors own the applications the platform itself needs."""
        return (self.vendor_name or "").strip() in settings.RESERVED_VENDOR_NAMES


@dataclass
class Profile:
    profile_id: int = 0
    profile_name: str = ""
    definition: str | None = None

    id_field: ClassVar[str] = "profile_id"


@dataclass
class OdsInstance:
    ods_instance_id: int = 0
    name: str = ""
    instance_type: str = ""
    connection_string: str = ""

    id_field: ClassVar[str] = "ods_instance_id"


@dataclass
class Application:
    application_id: int = 0
    application_name: str = ""
    claim_set_name: str = ""
    vendor_id: int = 0
    profile_ids: list[int] = field(default_factory=list)
    operational_context_uri: str = "uri://ed-fi.org"

    id_field: ClassVar[str] = "application_id"


@dataclass
class ApiClient:
    api_client_id: int = 0
    application_id: int = 0
    name: str = ""
    key: str = ""
    secret: str = ""
    is_approved: bool = True
    use_sandbox: bool = False
    sandbox_type: int = 0

    id_field: ClassVar[str] = "api_client_id"


@dataclass
class ApplicationEducationOrganization:
    application_education_organization_id: int = 0
    application_id: int = 0
    education_organization_id: int = 0
    api_client_ids: list[int] = field(default_factory=list)

    id_field: ClassVar[str] = "application_education_organization_id"


@dataclass
class ApiClientOdsInstance:
    api_client_ods_instance_id: int = 0
    api_client_id: int = 0
    ods_instance_id: int = 0

    id_field: ClassVar[str] = "api_client_ods_instance_id"


@dataclass
class ApplicationDetails:
    """Read model: an application with its associations loaded."""

    application: Application
    vendor: Vendor
    profiles: list[Profile]
    education_organization_ids: list[int]
    api_client: ApiClient
    api_client_education_organization_ids: list[int]
    ods_instance_ids: list[int]


@dataclass
class AddApplicationResult:
    application_id: int
    api_client_id: int
    key: str
    secret: str
