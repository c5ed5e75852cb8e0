"""Teachers ORM models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, SerialModelMixin
from app.core.enums import ApplicationStatusEnum


class TeacherApplication(SerialModelMixin, Base):
    """Teacher application owned by exactly one user.

    The same row backs the published teacher profile once approved; profile
    edits send it back to review.
    """

    __tablename__ = "teacher_applications"

    uuid: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), default=uuid4, unique=True, nullable=False)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    city: Mapped[str] = mapped_column(String(50), nullable=False)
    district: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[str] = mapped_column(String(200), nullable=False)
    main_category_id: Mapped[int] = mapped_column(
        ForeignKey("main_categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    sub_category_ids: Mapped[list[int]] = mapped_column(JSONB, default=list, nullable=False)
    introduction: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[ApplicationStatusEnum] = mapped_column(
        SAEnum(ApplicationStatusEnum, name="application_status_enum", native_enum=False),
        default=ApplicationStatusEnum.PENDING,
        nullable=False,
        index=True,
    )
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewer_id: Mapped[UUID | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class CredentialMixin(SerialModelMixin):
    """Columns shared by every credential collection."""

    application_id: Mapped[int] = mapped_column(
        ForeignKey("teacher_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_year: Mapped[int] = mapped_column(Integer, nullable=False)
    start_month: Mapped[int] = mapped_column(Integer, nullable=False)
    end_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    end_month: Mapped[int | None] = mapped_column(Integer, nullable=True)
    file_path: Mapped[str | None] = mapped_column(Text, nullable=True)


class WorkExperience(CredentialMixin, Base):
    """Employment record."""

    __tablename__ = "teacher_work_experiences"
    __table_args__ = (Index("ix_teacher_work_experiences_application_created", "application_id", "created_at"),)

    is_working: Mapped[bool] = mapped_column(Boolean, nullable=False)
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    workplace: Mapped[str] = mapped_column(String(200), nullable=False)
    job_category: Mapped[str] = mapped_column(String(100), nullable=False)
    job_title: Mapped[str] = mapped_column(String(100), nullable=False)


class LearningExperience(CredentialMixin, Base):
    """Education record."""

    __tablename__ = "teacher_learning_experiences"
    __table_args__ = (Index("ix_teacher_learning_experiences_application_created", "application_id", "created_at"),)

    is_in_school: Mapped[bool] = mapped_column(Boolean, nullable=False)
    degree: Mapped[str] = mapped_column(String(50), nullable=False)
    school_name: Mapped[str] = mapped_column(String(200), nullable=False)
    department: Mapped[str] = mapped_column(String(200), nullable=False)
    region: Mapped[str | None] = mapped_column(String(50), nullable=True)


class Certificate(CredentialMixin, Base):
    """Professional license or certificate; start is the issue date, end the expiry."""

    __tablename__ = "teacher_certificates"
    __table_args__ = (Index("ix_teacher_certificates_application_created", "application_id", "created_at"),)

    no_expiry: Mapped[bool] = mapped_column(Boolean, nullable=False)
    verifying_institution: Mapped[str] = mapped_column(String(200), nullable=False)
    license_name: Mapped[str] = mapped_column(String(200), nullable=False)
    holder_name: Mapped[str] = mapped_column(String(100), nullable=False)
    license_number: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
