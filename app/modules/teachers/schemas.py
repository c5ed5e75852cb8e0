"""Teachers schemas."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import ApplicationStatusEnum, CredentialKindEnum

ItemT = TypeVar("ItemT")
ReadT = TypeVar("ReadT")


class ApplicationCreate(BaseModel):
    """Start a teacher application."""

    city: str = Field(min_length=1, max_length=50)
    district: str = Field(min_length=1, max_length=50)
    address: str = Field(min_length=1, max_length=200)
    main_category_id: int
    sub_category_ids: list[int]
    introduction: str = Field(min_length=100, max_length=1000)


class ApplicationUpdate(BaseModel):
    """Partial update of an application that is not yet approved."""

    city: str | None = Field(default=None, min_length=1, max_length=50)
    district: str | None = Field(default=None, min_length=1, max_length=50)
    address: str | None = Field(default=None, min_length=1, max_length=200)
    main_category_id: int | None = None
    sub_category_ids: list[int] | None = None
    introduction: str | None = Field(default=None, min_length=100, max_length=1000)


class ProfileUpdate(ApplicationUpdate):
    """Partial update of the published profile. Always sends it back to review."""


class ApplicationRead(BaseModel):
    """Teacher application response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: UUID
    user_id: UUID
    city: str
    district: str
    address: str
    main_category_id: int
    sub_category_ids: list[int]
    introduction: str
    status: ApplicationStatusEnum
    submitted_at: datetime | None
    reviewed_at: datetime | None
    reviewer_id: UUID | None
    review_notes: str | None
    created_at: datetime
    updated_at: datetime


class CredentialPeriodWrite(BaseModel):
    start_year: int
    start_month: int
    end_year: int | None = None
    end_month: int | None = None
    file_path: str | None = Field(default=None, max_length=500)


class CredentialRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    start_year: int
    start_month: int
    end_year: int | None
    end_month: int | None
    file_path: str | None
    created_at: datetime
    updated_at: datetime


class WorkExperienceFields(BaseModel):
    is_working: bool
    company_name: str = Field(max_length=200)
    workplace: str = Field(max_length=200)
    job_category: str = Field(max_length=100)
    job_title: str = Field(max_length=100)


class LearningExperienceFields(BaseModel):
    is_in_school: bool
    degree: str = Field(max_length=50)
    school_name: str = Field(max_length=200)
    department: str = Field(max_length=200)
    region: str | None = Field(default=None, max_length=50)


class CertificateFields(BaseModel):
    no_expiry: bool
    verifying_institution: str = Field(max_length=200)
    license_name: str = Field(max_length=200)
    holder_name: str = Field(max_length=100)
    license_number: str = Field(max_length=100)
    category: str = Field(max_length=50)
    subject: str = Field(max_length=100)


class WorkExperienceWrite(CredentialPeriodWrite, WorkExperienceFields):
    """Create a work experience record."""


class WorkExperienceItem(WorkExperienceWrite):
    """Batch item; an ``id`` updates that record, no ``id`` creates one."""

    id: int | None = Field(default=None, ge=1)


class WorkExperienceRead(CredentialRecordRead, WorkExperienceFields):
    """Work experience response schema."""


class LearningExperienceWrite(CredentialPeriodWrite, LearningExperienceFields):
    """Create a learning experience record."""


class LearningExperienceItem(LearningExperienceWrite):
    id: int | None = Field(default=None, ge=1)


class LearningExperienceRead(CredentialRecordRead, LearningExperienceFields):
    """Learning experience response schema."""


class CertificateWrite(CredentialPeriodWrite, CertificateFields):
    """Create a certificate record. Start is the issue date, end the expiry."""


class CertificateItem(CertificateWrite):
    id: int | None = Field(default=None, ge=1)


class CertificateRead(CredentialRecordRead, CertificateFields):
    """Certificate response schema."""


class CredentialBatch(BaseModel, Generic[ItemT]):
    """Create-or-update batch request."""

    items: list[ItemT]


class CredentialBatchRead(BaseModel, Generic[ReadT]):
    """Batch outcome; ``items`` holds created and updated records, newest first."""

    items: list[ReadT]
    created: list[ReadT]
    updated: list[ReadT]
    created_count: int
    updated_count: int


@dataclass(frozen=True, slots=True)
class CredentialSchemas:
    write: type[BaseModel]
    item: type[BaseModel]
    read: type[BaseModel]


CREDENTIAL_SCHEMAS: dict[CredentialKindEnum, CredentialSchemas] = {
    CredentialKindEnum.WORK_EXPERIENCE: CredentialSchemas(
        WorkExperienceWrite,
        WorkExperienceItem,
        WorkExperienceRead,
    ),
    CredentialKindEnum.LEARNING_EXPERIENCE: CredentialSchemas(
        LearningExperienceWrite,
        LearningExperienceItem,
        LearningExperienceRead,
    ),
    CredentialKindEnum.CERTIFICATE: CredentialSchemas(
        CertificateWrite,
        CertificateItem,
        CertificateRead,
    ),
}
