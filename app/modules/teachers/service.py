"""Teachers business logic layer."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any
from uuid import UUID

from fastapi import Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db_session
from app.core.enums import ApplicationEventEnum, ApplicationStatusEnum, CredentialKindEnum, ReviewDecisionEnum
from app.modules.admin.repository import AdminRepository
from app.modules.admin.schemas import ApplicationReviewRequest
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.service import RoleService
from app.modules.taxonomy.repository import TaxonomyRepository
from app.modules.teachers.completeness import CompletenessGate
from app.modules.teachers.credentials import CREDENTIAL_SPECS, CredentialItem, to_credential_item
from app.modules.teachers.exceptions import (
    AlreadySubmitted,
    ApplicationNotFound,
    CredentialNotFound,
    DuplicateApplication,
    IncompleteApplication,
    InvalidApplicationState,
    OwnershipMismatch,
    PermissionDenied,
)
from app.modules.teachers.models import CredentialMixin, TeacherApplication
from app.modules.teachers.reconciliation import CredentialReconciler, ReconcileResult
from app.modules.teachers.repository import CredentialRepository, TeacherApplicationRepository
from app.modules.teachers.roles import TeacherRoleManager
from app.modules.teachers.schemas import ApplicationCreate, ApplicationUpdate, ProfileUpdate
from app.modules.teachers.transitions import apply_transition, can_transition
from app.modules.teachers.validators import EligibilityValidator, TaxonomyValidator

logger = logging.getLogger(__name__)

TAXONOMY_FIELDS = ("main_category_id", "sub_category_ids")


class TeacherApplicationService:
    """Owns the teacher application lifecycle."""

    def __init__(
        self,
        applications: TeacherApplicationRepository,
        eligibility: EligibilityValidator,
        taxonomy: TaxonomyValidator,
        roles: TeacherRoleManager,
        completeness: CompletenessGate,
        admin_repository: AdminRepository,
    ) -> None:
        self.applications = applications
        self.eligibility = eligibility
        self.taxonomy = taxonomy
        self.roles = roles
        self.completeness = completeness
        self.admin_repository = admin_repository

    async def apply(self, user_id: UUID, payload: ApplicationCreate) -> TeacherApplication:
        """Start an application and grant the applicant role."""
        await self.eligibility.validate(user_id)
        if await self.applications.get_by_user_id(user_id) is not None:
            raise DuplicateApplication()
        await self.taxonomy.validate(payload.main_category_id, payload.sub_category_ids)

        application = await self.applications.create(user_id, **payload.model_dump())
        apply_transition(application, ApplicationEventEnum.APPLY)
        application = await self.applications.save(application)
        await self.roles.grant_applicant_role(user_id)
        return application

    async def get_application(self, user_id: UUID) -> TeacherApplication:
        return await self._require_application(user_id)

    async def update_application(self, user_id: UUID, payload: ApplicationUpdate) -> TeacherApplication:
        """Edit a pending or rejected application; a rejected one goes back to pending."""
        application = await self._require_application(user_id)
        if not can_transition(ApplicationEventEnum.EDIT, application.status):
            raise InvalidApplicationState(ApplicationEventEnum.EDIT.value, application.status.value)

        await self._apply_changes(application, payload.model_dump(exclude_none=True))
        apply_transition(application, ApplicationEventEnum.EDIT)
        return await self.applications.save(application)

    async def resubmit_application(self, user_id: UUID) -> TeacherApplication:
        application = await self._require_application(user_id)
        apply_transition(application, ApplicationEventEnum.RESUBMIT)
        return await self.applications.save(application)

    async def submit_application(self, user_id: UUID) -> TeacherApplication:
        """Submit for review once every credential category is filled in."""
        application = await self._require_application(user_id)
        if application.submitted_at is not None:
            raise AlreadySubmitted()

        missing = await self.completeness.check(application.id)
        if missing:
            logger.info("Application %s is missing %s", application.uuid, ", ".join(missing))
            raise IncompleteApplication(missing[0])

        apply_transition(application, ApplicationEventEnum.SUBMIT)
        return await self.applications.save(application)

    async def get_profile(self, user_id: UUID) -> TeacherApplication:
        application = await self._require_application(user_id)
        if application.status == ApplicationStatusEnum.APPROVED:
            return application
        permission = await self.roles.resolve_permission(user_id, application)
        if not permission.can_edit_approved_profile:
            raise PermissionDenied("Profile is available once the application is approved")
        return application

    async def update_profile(self, user_id: UUID, payload: ProfileUpdate) -> TeacherApplication:
        """Edit profile fields. Any edit sends the application back to review."""
        application = await self.applications.get_by_user_id(user_id)
        permission = await self.roles.resolve_permission(user_id, application)
        if not permission.can_edit:
            raise PermissionDenied()
        if application is None:
            raise ApplicationNotFound()

        await self._apply_changes(application, payload.model_dump(exclude_none=True))
        apply_transition(application, ApplicationEventEnum.PROFILE_EDIT)
        return await self.applications.save(application)

    async def review_application(
        self,
        application_id: int,
        payload: ApplicationReviewRequest,
        reviewer: User,
    ) -> TeacherApplication:
        """Approve or reject a pending application."""
        application = await self.applications.get_by_id(application_id)
        if application is None:
            raise ApplicationNotFound()

        event = (
            ApplicationEventEnum.APPROVE
            if payload.decision == ReviewDecisionEnum.APPROVE
            else ApplicationEventEnum.REJECT
        )
        apply_transition(application, event, reviewer_id=reviewer.id, review_notes=payload.notes)
        application = await self.applications.save(application)
        if event == ApplicationEventEnum.APPROVE:
            await self.roles.promote_to_teacher(application.user_id, granted_by=reviewer.id)

        await self.admin_repository.create_action(
            admin_id=reviewer.id,
            action=f"teacher_application.{event.value}",
            target_type="teacher_application",
            target_id=str(application.uuid),
            payload={"application_id": application.id, "notes": payload.notes},
        )
        return application

    async def list_applications(
        self,
        status: ApplicationStatusEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[TeacherApplication], int]:
        return await self.applications.list_by_status(status, limit=limit, offset=offset)

    async def _require_application(self, user_id: UUID) -> TeacherApplication:
        application = await self.applications.get_by_user_id(user_id)
        if application is None:
            raise ApplicationNotFound()
        return application

    async def _apply_changes(self, application: TeacherApplication, changes: Mapping[str, Any]) -> None:
        # Changing only the main category re-checks the stored sub categories against it.
        if any(name in changes for name in TAXONOMY_FIELDS):
            await self.taxonomy.validate(
                changes.get("main_category_id", application.main_category_id),
                changes.get("sub_category_ids", application.sub_category_ids),
            )
        for key, value in changes.items():
            setattr(application, key, value)


class CredentialService:
    """Reads and edits the credential collections of the caller's application."""

    def __init__(
        self,
        applications: TeacherApplicationRepository,
        repositories: Mapping[CredentialKindEnum, CredentialRepository],
        roles: TeacherRoleManager,
        max_batch_items: int = 20,
        min_year: int = 1900,
    ) -> None:
        self.applications = applications
        self.repositories = repositories
        self.roles = roles
        self.max_batch_items = max_batch_items
        self.min_year = min_year

    async def list_credentials(self, user_id: UUID, kind: CredentialKindEnum) -> list[CredentialMixin]:
        application = await self.applications.get_by_user_id(user_id)
        if application is None:
            raise ApplicationNotFound()
        return await self.repositories[kind].list_for_application(application.id)

    async def create_credential(
        self,
        user_id: UUID,
        kind: CredentialKindEnum,
        payload: BaseModel,
    ) -> CredentialMixin:
        """Create one record through the same checks as a batch."""
        result = await self.upsert_credentials(user_id, kind, [to_credential_item(payload)])
        return result.created[0]

    async def upsert_credentials(
        self,
        user_id: UUID,
        kind: CredentialKindEnum,
        items: Sequence[CredentialItem],
    ) -> ReconcileResult:
        reconciler = self._reconciler(kind)
        plan = reconciler.prepare(items, CREDENTIAL_SPECS[kind].validator(min_year=self.min_year))

        application = await self._require_editable_application(user_id)
        result = await reconciler.apply(application.id, plan)
        await self._mark_changed(application)
        return result

    async def delete_credential(self, user_id: UUID, kind: CredentialKindEnum, record_id: int) -> None:
        application = await self._require_editable_application(user_id)
        repository = self.repositories[kind]
        record = await repository.get_by_id(record_id)
        if record is None:
            raise CredentialNotFound(kind.value, record_id)
        if record.application_id != application.id:
            raise OwnershipMismatch(kind.value, record_id)

        await repository.delete(record)
        logger.info("Deleted %s record %s of application %s", kind.value, record_id, application.uuid)
        await self._mark_changed(application)

    def _reconciler(self, kind: CredentialKindEnum) -> CredentialReconciler:
        return CredentialReconciler(self.repositories[kind], kind.value, max_items=self.max_batch_items)

    async def _require_editable_application(self, user_id: UUID) -> TeacherApplication:
        application = await self.applications.get_by_user_id(user_id)
        permission = await self.roles.resolve_permission(user_id, application)
        if not permission.can_edit:
            raise PermissionDenied()
        if application is None:
            raise ApplicationNotFound()
        return application

    async def _mark_changed(self, application: TeacherApplication) -> None:
        apply_transition(application, ApplicationEventEnum.CREDENTIALS_CHANGED)
        await self.applications.save(application)


def build_credential_repositories(session: AsyncSession) -> dict[CredentialKindEnum, CredentialRepository]:
    return {kind: CredentialRepository(session, spec.model) for kind, spec in CREDENTIAL_SPECS.items()}


async def get_teacher_application_service(
    session: AsyncSession = Depends(get_db_session),
) -> TeacherApplicationService:
    """Dependency provider for the application lifecycle service."""
    settings = get_settings()
    identity_repository = IdentityRepository(session)
    return TeacherApplicationService(
        applications=TeacherApplicationRepository(session),
        eligibility=EligibilityValidator(identity_repository),
        taxonomy=TaxonomyValidator(TaxonomyRepository(session), settings.taxonomy_max_sub_categories),
        roles=TeacherRoleManager(RoleService(identity_repository)),
        completeness=CompletenessGate(build_credential_repositories(session)),
        admin_repository=AdminRepository(session),
    )


async def get_credential_service(session: AsyncSession = Depends(get_db_session)) -> CredentialService:
    """Dependency provider for credential collections."""
    settings = get_settings()
    return CredentialService(
        applications=TeacherApplicationRepository(session),
        repositories=build_credential_repositories(session),
        roles=TeacherRoleManager(RoleService(IdentityRepository(session))),
        max_batch_items=settings.credential_batch_max_items,
        min_year=settings.credential_min_year,
    )
