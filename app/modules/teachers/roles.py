"""Role side effects of the teacher application lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from app.core.enums import ApplicationStatusEnum, RoleEnum
from app.modules.admin.repository import AdminRepository
from app.modules.identity.service import RoleService
from app.modules.teachers.models import TeacherApplication
from app.modules.teachers.repository import TeacherApplicationRepository

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = frozenset({ApplicationStatusEnum.PENDING, ApplicationStatusEnum.REJECTED})


@dataclass(frozen=True, slots=True)
class ApplicationPermission:
    """What the current user may change, resolved once per request."""

    can_edit_application: bool
    can_edit_approved_profile: bool

    @property
    def can_edit(self) -> bool:
        return self.can_edit_application or self.can_edit_approved_profile


class TeacherRoleManager:
    """Grants and reads the roles tied to the application lifecycle."""

    def __init__(self, role_service: RoleService) -> None:
        self.role_service = role_service

    async def grant_applicant_role(self, user_id: UUID) -> bool:
        """Grant ``teacher_applicant`` unless the user already teaches."""
        if await self.role_service.has_role(user_id, RoleEnum.TEACHER):
            return False
        return await self.role_service.add_role(user_id, RoleEnum.TEACHER_APPLICANT)

    async def promote_to_teacher(self, user_id: UUID, granted_by: UUID | None) -> None:
        await self.role_service.revoke_role(user_id, RoleEnum.TEACHER_APPLICANT)
        await self.role_service.add_role(user_id, RoleEnum.TEACHER, granted_by=granted_by)

    async def resolve_permission(
        self,
        user_id: UUID,
        application: TeacherApplication | None,
    ) -> ApplicationPermission:
        roles = await self.role_service.list_roles(user_id)
        return ApplicationPermission(
            can_edit_application=(
                RoleEnum.TEACHER_APPLICANT in roles
                and application is not None
                and application.status in EDITABLE_STATUSES
            ),
            can_edit_approved_profile=RoleEnum.TEACHER in roles,
        )


class ApplicantRoleBackfill:
    """One-off repair for application owners that never got a role.

    Grants ``teacher_applicant`` to owners holding neither applicant nor
    teacher role and records one admin action per grant.
    """

    action = "backfill_applicant_role"

    def __init__(
        self,
        application_repository: TeacherApplicationRepository,
        role_manager: TeacherRoleManager,
        admin_repository: AdminRepository,
    ) -> None:
        self.application_repository = application_repository
        self.role_manager = role_manager
        self.admin_repository = admin_repository

    async def run(self, *, dry_run: bool = False) -> list[UUID]:
        owners = await self.application_repository.list_owners_missing_roles(
            [RoleEnum.TEACHER_APPLICANT, RoleEnum.TEACHER],
        )
        logger.info("Applicant role backfill found %s owner(s) without a role", len(owners))
        if dry_run:
            for user_id in owners:
                logger.info("Dry run: would grant teacher_applicant to %s", user_id)
            return owners

        for user_id in owners:
            await self.role_manager.grant_applicant_role(user_id)
            await self.admin_repository.create_action(
                admin_id=None,
                action=self.action,
                target_type="user",
                target_id=str(user_id),
                payload={"role": RoleEnum.TEACHER_APPLICANT.value},
            )
            logger.info("Backfilled teacher_applicant for %s", user_id)
        return owners
