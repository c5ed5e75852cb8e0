"""Credential collections: item types, field rules and the kind registry."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from app.core.enums import CredentialKindEnum
from app.modules.teachers.models import Certificate, CredentialMixin, LearningExperience, WorkExperience
from app.shared.utils import month_index, utc_now

PERIOD_END_FIELDS = ("end_year", "end_month")


@dataclass(frozen=True, slots=True)
class NewCredential:
    """Batch item that creates a record."""

    fields: dict[str, Any]


@dataclass(frozen=True, slots=True)
class CredentialPatch:
    """Batch item that updates the record with the given id."""

    id: int
    fields: dict[str, Any] = field(default_factory=dict)


CredentialItem = NewCredential | CredentialPatch
ItemValidator = Callable[[Mapping[str, Any]], None]


class CredentialFieldError(ValueError):
    """Single field rule violation inside one credential item."""

    def __init__(self, field_name: str, reason: str) -> None:
        self.field = field_name
        self.reason = reason
        super().__init__(reason)


def to_credential_item(payload: BaseModel) -> CredentialItem:
    """Turn a request item into an explicit create or update instruction.

    The period is always replaced as a whole, so omitted end fields are
    written as empty.
    """
    fields = payload.model_dump(exclude={"id"}, exclude_unset=True)
    for name in PERIOD_END_FIELDS:
        fields.setdefault(name, None)
    record_id = getattr(payload, "id", None)
    if record_id is None:
        return NewCredential(fields=fields)
    return CredentialPatch(id=record_id, fields=fields)


def _check_year(fields: Mapping[str, Any], name: str, min_year: int, max_year: int) -> None:
    value = fields.get(name)
    if value is None:
        raise CredentialFieldError(name, f"{name} is required")
    if not min_year <= value <= max_year:
        raise CredentialFieldError(name, f"{name} must be between {min_year} and {max_year}")


def _check_month(fields: Mapping[str, Any], name: str) -> None:
    value = fields.get(name)
    if value is None:
        raise CredentialFieldError(name, f"{name} is required")
    if not 1 <= value <= 12:
        raise CredentialFieldError(name, f"{name} must be between 1 and 12")


def validate_period(fields: Mapping[str, Any], active_flag: str, *, min_year: int) -> None:
    """Check the start/end range against the "currently active" flag."""
    max_year = utc_now().year + 1
    _check_year(fields, "start_year", min_year, max_year)
    _check_month(fields, "start_month")

    is_active = fields.get(active_flag)
    if is_active is None:
        raise CredentialFieldError(active_flag, f"{active_flag} is required")

    if is_active:
        if fields.get("end_year") is not None or fields.get("end_month") is not None:
            raise CredentialFieldError("end_year", f"end date must be empty when {active_flag} is true")
        return

    _check_year(fields, "end_year", min_year, max_year)
    _check_month(fields, "end_month")
    start = month_index(fields["start_year"], fields["start_month"])
    end = month_index(fields["end_year"], fields["end_month"])
    if end < start:
        raise CredentialFieldError("end_year", "end date must not be earlier than start date")


def validate_required_text(fields: Mapping[str, Any], names: tuple[str, ...]) -> None:
    for name in names:
        value = fields.get(name)
        if not isinstance(value, str) or not value.strip():
            raise CredentialFieldError(name, f"{name} is required")


@dataclass(frozen=True, slots=True)
class CredentialSpec:
    """Describes one credential collection to the generic machinery."""

    kind: CredentialKindEnum
    model: type[CredentialMixin]
    active_flag: str
    required_text_fields: tuple[str, ...]
    document_required_for_submission: bool

    def validate(self, fields: Mapping[str, Any], *, min_year: int) -> None:
        validate_required_text(fields, self.required_text_fields)
        validate_period(fields, self.active_flag, min_year=min_year)

    def validator(self, *, min_year: int) -> ItemValidator:
        def _validate(fields: Mapping[str, Any]) -> None:
            self.validate(fields, min_year=min_year)

        return _validate


CREDENTIAL_SPECS: dict[CredentialKindEnum, CredentialSpec] = {
    CredentialKindEnum.WORK_EXPERIENCE: CredentialSpec(
        kind=CredentialKindEnum.WORK_EXPERIENCE,
        model=WorkExperience,
        active_flag="is_working",
        required_text_fields=("company_name", "workplace", "job_category", "job_title"),
        document_required_for_submission=False,
    ),
    CredentialKindEnum.LEARNING_EXPERIENCE: CredentialSpec(
        kind=CredentialKindEnum.LEARNING_EXPERIENCE,
        model=LearningExperience,
        active_flag="is_in_school",
        required_text_fields=("degree", "school_name", "department"),
        document_required_for_submission=True,
    ),
    CredentialKindEnum.CERTIFICATE: CredentialSpec(
        kind=CredentialKindEnum.CERTIFICATE,
        model=Certificate,
        active_flag="no_expiry",
        required_text_fields=(
            "verifying_institution",
            "license_name",
            "holder_name",
            "license_number",
            "category",
            "subject",
        ),
        document_required_for_submission=True,
    ),
}


def get_credential_spec(kind: CredentialKindEnum) -> CredentialSpec:
    return CREDENTIAL_SPECS[kind]
