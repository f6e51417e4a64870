"""
Request validators for applications.

Checks span both stores: vendors, profiles and ODS instances come from the
admin store, claim set names from the security store.
"""

from __future__ import annotations

from adminapi_core.domain.exceptions import NotFoundError, ValidationError
from adminapi_core.domain.interfaces import AdminContext, SecurityContext
from adminapi_core.validation import ValidationContext, is_blank
from app.applications.schemas import AddApplicationRequest, EditApplicationRequest

MAXIMUM_APPLICATION_NAME_LENGTH = 50

APPLICATION_NAME_EMPTY = "'Application Name' must not be empty."
APPLICATION_NAME_TOO_LONG = (
    "The Application Name {application_name} would be too long for Admin App to set up necessary "
    "Application records. Consider shortening the name by {extra_characters} character(s)."
)
CLAIM_SET_NAME_EMPTY = "'Claim Set Name' must not be empty."
CLAIM_SET_NOT_FOUND = "Claim set '{claim_set_name}' does not exist."
VENDOR_NOT_FOUND = "Please provide valid Vendor Id."
PROFILE_NOT_FOUND = "Profile with ID {profile_id} does not exist."
ODS_INSTANCE_NOT_FOUND = "ODS instance with ID {ods_instance_id} does not exist."


class AddApplicationValidator:
    def __init__(self, context: AdminContext, security_context: SecurityContext):
        self._context = context
        self._security_context = security_context

    def validate(self, request: AddApplicationRequest) -> ValidationContext:
        context = ValidationContext(application_name=request.application_name)

        if is_blank(request.application_name):
            context.add_failure("applicationName", APPLICATION_NAME_EMPTY)
        elif len(request.application_name) > MAXIMUM_APPLICATION_NAME_LENGTH:
            context.add_failure(
                "applicationName",
                APPLICATION_NAME_TOO_LONG,
                extra_characters=len(request.application_name) - MAXIMUM_APPLICATION_NAME_LENGTH,
            )

        if is_blank(request.claim_set_name):
            context.add_failure("claimSetName", CLAIM_SET_NAME_EMPTY)
        elif not any(row.claim_set_name == request.claim_set_name for row in self._security_context.claim_sets):
            context.add_failure("claimSetName", CLAIM_SET_NOT_FOUND, claim_set_name=request.claim_set_name)

        if self._context.vendors.get(request.vendor_id) is None:
            context.add_failure("vendorId", VENDOR_NOT_FOUND)

        for profile_id in request.profile_ids or []:
            if self._context.profiles.get(profile_id) is None:
                context.add_failure("profileIds", PROFILE_NOT_FOUND, profile_id=profile_id)

        for ods_instance_id in request.ods_instance_ids or []:
            if self._context.ods_instances.get(ods_instance_id) is None:
                context.add_failure("odsInstanceIds", ODS_INSTANCE_NOT_FOUND, ods_instance_id=ods_instance_id)

        return context

    def guard(self, request: AddApplicationRequest) -> None:
        context = self.validate(request)
        if not context.is_valid:
            raise ValidationError(context.failures)


class EditApplicationValidator(AddApplicationValidator):
    def validate(self, request: EditApplicationRequest) -> ValidationContext:
        """
        Raises:
            NotFoundError: If the application being edited does not exist.
        """
        if self._context.applications.get(request.id) is None:
            raise NotFoundError("application", request.id)
        return super().validate(request)
