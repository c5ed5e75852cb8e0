"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """System roles. A user may hold several at once."""

    STUDENT = "student"
    TEACHER_APPLICANT = "teacher_applicant"
    TEACHER = "teacher"
    ADMIN = "admin"


class AccountStatusEnum(StrEnum):
    """User account status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    LOCKED = "locked"
    DEACTIVATED = "deactivated"


class ApplicationStatusEnum(StrEnum):
    """Teacher application lifecycle status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApplicationEventEnum(StrEnum):
    """Events that drive teacher application transitions."""

    APPLY = "apply"
    EDIT = "edit"
    RESUBMIT = "resubmit"
    PROFILE_EDIT = "profile_edit"
    SUBMIT = "submit"
    CREDENTIALS_CHANGED = "credentials_changed"
    APPROVE = "approve"
    REJECT = "reject"


class CredentialKindEnum(StrEnum):
    """Credential collections attached to a teacher application."""

    WORK_EXPERIENCE = "work_experience"
    LEARNING_EXPERIENCE = "learning_experience"
    CERTIFICATE = "certificate"


class ReviewDecisionEnum(StrEnum):
    """Reviewer decision on a pending application."""

    APPROVE = "approve"
    REJECT = "reject"
