"""Domain errors raised by the teacher onboarding workflow."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from app.shared.exceptions import (
    AppException,
    ConflictException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)


class NotEligible(AppException):
    """Marker for eligibility failures when starting an application."""


class InvalidTaxonomy(AppException):
    """Marker for category selection failures."""


class UserNotFound(NotEligible, NotFoundException):
    code = "user_not_found"

    def __init__(self, user_id: UUID) -> None:
        super().__init__("User not found", {"user_id": str(user_id)})


class RoleForbidden(NotEligible, UnauthorizedException):
    code = "role_forbidden"

    def __init__(self, required_role: str) -> None:
        super().__init__(
            f"Only users with the {required_role} role can apply to teach",
            {"required_role": required_role},
        )


class AccountInactive(NotEligible, UnauthorizedException):
    code = "account_inactive"

    def __init__(self, account_status: str) -> None:
        super().__init__("Account is not active", {"account_status": account_status})


class DuplicateApplication(ConflictException):
    code = "duplicate_application"

    def __init__(self) -> None:
        super().__init__("A teacher application already exists for this user")


class ApplicationNotFound(NotFoundException):
    code = "application_not_found"

    def __init__(self) -> None:
        super().__init__("Teacher application not found")


class InvalidApplicationState(ConflictException):
    code = "invalid_application_state"

    def __init__(self, event: str, status: str | None) -> None:
        super().__init__(
            f"Cannot {event} an application in status {status or 'none'}",
            {"event": event, "status": status},
        )


class AlreadySubmitted(ConflictException):
    code = "already_submitted"

    def __init__(self) -> None:
        super().__init__("Application has already been submitted")


class IncompleteApplication(ValidationException):
    code = "incomplete_application"

    def __init__(self, missing: str) -> None:
        super().__init__(f"Application is incomplete: {missing} is missing", {"missing": missing})
        self.missing = missing


class PermissionDenied(UnauthorizedException):
    code = "permission_denied"

    def __init__(self, message: str = "Teacher or applicant permission is required") -> None:
        super().__init__(message)


class InvalidCategory(InvalidTaxonomy, ValidationException):
    code = "invalid_category"

    def __init__(self, main_category_id: int) -> None:
        super().__init__(
            "Main category does not exist or is inactive",
            {"field": "main_category_id", "main_category_id": main_category_id},
        )


class InvalidSecondaryCount(InvalidTaxonomy, ValidationException):
    code = "invalid_secondary_count"

    def __init__(self, count: int, maximum: int) -> None:
        super().__init__(
            f"Select between 1 and {maximum} sub categories",
            {"field": "sub_category_ids", "count": count, "maximum": maximum},
        )


class DuplicateSecondary(InvalidTaxonomy, ValidationException):
    code = "duplicate_secondary"

    def __init__(self, duplicates: Sequence[int]) -> None:
        super().__init__(
            "Sub categories must not repeat",
            {"field": "sub_category_ids", "duplicates": sorted(duplicates)},
        )


class SecondaryNotInPrimary(InvalidTaxonomy, ValidationException):
    code = "secondary_not_in_primary"

    def __init__(self, main_category_id: int, unresolved: Sequence[int]) -> None:
        super().__init__(
            "Some sub categories do not exist, are inactive or belong to another main category",
            {
                "field": "sub_category_ids",
                "main_category_id": main_category_id,
                "unresolved": sorted(unresolved),
            },
        )


class BatchSizeInvalid(ValidationException):
    code = "batch_size_invalid"

    def __init__(self, size: int, maximum: int) -> None:
        super().__init__(
            f"Batch must contain between 1 and {maximum} items",
            {"size": size, "maximum": maximum},
        )


class CredentialItemInvalid(ValidationException):
    code = "credential_item_invalid"

    def __init__(self, index: int, field: str | None, reason: str) -> None:
        super().__init__(f"item[{index}]: {reason}", {"index": index, "field": field, "reason": reason})
        self.index = index


class CredentialNotFound(NotFoundException):
    code = "credential_not_found"

    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(f"{kind} record {record_id} not found", {"kind": kind, "id": record_id})


class OwnershipMismatch(UnauthorizedException):
    code = "ownership_mismatch"

    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(
            f"{kind} record {record_id} belongs to another application",
            {"kind": kind, "id": record_id},
        )
