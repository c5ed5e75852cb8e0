"""Teachers repository layer."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ApplicationStatusEnum, RoleEnum
from app.modules.identity.models import UserRole
from app.modules.teachers.models import CredentialMixin, TeacherApplication


class TeacherApplicationRepository:
    """DB operations for teacher applications."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_user_id(self, user_id: UUID) -> TeacherApplication | None:
        stmt = select(TeacherApplication).where(TeacherApplication.user_id == user_id)
        return await self.session.scalar(stmt)

    async def get_by_id(self, application_id: int) -> TeacherApplication | None:
        stmt = select(TeacherApplication).where(TeacherApplication.id == application_id)
        return await self.session.scalar(stmt)

    async def create(self, user_id: UUID, **fields: Any) -> TeacherApplication:
        application = TeacherApplication(uuid=uuid4(), user_id=user_id, **fields)
        self.session.add(application)
        await self.session.flush()
        return application

    async def save(self, application: TeacherApplication) -> TeacherApplication:
        await self.session.flush()
        await self.session.refresh(application)
        return application

    async def list_by_status(
        self,
        status: ApplicationStatusEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[TeacherApplication], int]:
        base_stmt: Select[tuple[TeacherApplication]] = select(TeacherApplication)
        if status is not None:
            base_stmt = base_stmt.where(TeacherApplication.status == status)
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = (
            base_stmt.order_by(
                TeacherApplication.submitted_at.asc().nulls_last(),
                TeacherApplication.created_at.asc(),
            )
            .limit(limit)
            .offset(offset)
        )
        items = list((await self.session.scalars(stmt)).all())
        return items, total

    async def list_owners_missing_roles(self, roles: Sequence[RoleEnum]) -> list[UUID]:
        """Owners of applications holding none of ``roles`` as an active grant."""
        active_grant = (
            select(UserRole.id)
            .where(
                and_(
                    UserRole.user_id == TeacherApplication.user_id,
                    UserRole.is_active.is_(True),
                    or_(*(UserRole.role == role for role in roles)),
                )
            )
            .exists()
        )
        stmt = select(TeacherApplication.user_id).where(~active_grant).order_by(TeacherApplication.id.asc())
        return list((await self.session.scalars(stmt)).all())


class CredentialRepository:
    """DB operations for one credential collection."""

    def __init__(self, session: AsyncSession, model: type[CredentialMixin]) -> None:
        self.session = session
        self.model = model

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Run a block atomically inside the request transaction.

        Uses a SAVEPOINT so a failed batch leaves the outer session usable
        and nothing of the batch persisted.
        """
        async with self.session.begin_nested():
            yield

    async def get_by_id(self, record_id: int) -> CredentialMixin | None:
        stmt = select(self.model).where(self.model.id == record_id)
        return await self.session.scalar(stmt)

    async def list_for_application(self, application_id: int) -> list[CredentialMixin]:
        stmt = (
            select(self.model)
            .where(self.model.application_id == application_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        return list((await self.session.scalars(stmt)).all())

    async def add_many(self, application_id: int, rows: Sequence[dict[str, Any]]) -> list[CredentialMixin]:
        records = [self.model(application_id=application_id, **row) for row in rows]
        if not records:
            return records
        self.session.add_all(records)
        await self.session.flush()
        for record in records:
            await self.session.refresh(record)
        return records

    async def save(self, record: CredentialMixin) -> CredentialMixin:
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def delete(self, record: CredentialMixin) -> None:
        await self.session.delete(record)
        await self.session.flush()

    async def count_for_application(self, application_id: int, *, with_document: bool = False) -> int:
        stmt = select(func.count()).select_from(self.model).where(self.model.application_id == application_id)
        if with_document:
            stmt = stmt.where(self.model.file_path.is_not(None), func.trim(self.model.file_path) != "")
        return int((await self.session.scalar(stmt)) or 0)
