"""Identity repository layer."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.enums import RoleEnum
from app.modules.identity.models import User, UserRole


class IdentityRepository:
    """DB operations for identity domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_user_by_email(self, email: str) -> User | None:
        stmt = select(User).options(selectinload(User.roles)).where(User.email == email)
        return await self.session.scalar(stmt)

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        stmt = (
            select(User)
            .options(selectinload(User.roles))
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return await self.session.scalar(stmt)

    async def create_user(self, email: str, password_hash: str, timezone: str) -> User:
        user = User(email=email, password_hash=password_hash, timezone=timezone)
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_role_grant(self, user_id: UUID, role: RoleEnum) -> UserRole | None:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
        return await self.session.scalar(stmt)

    async def list_active_roles(self, user_id: UUID) -> list[RoleEnum]:
        stmt = select(UserRole.role).where(UserRole.user_id == user_id, UserRole.is_active.is_(True))
        return list((await self.session.scalars(stmt)).all())

    async def create_role_grant(self, user_id: UUID, role: RoleEnum, granted_by: UUID | None) -> UserRole:
        grant = UserRole(user_id=user_id, role=role, is_active=True, granted_by=granted_by)
        self.session.add(grant)
        await self.session.flush()
        return grant

    async def activate_role_grant(self, grant: UserRole, granted_by: UUID | None) -> UserRole:
        grant.is_active = True
        grant.revoked_at = None
        grant.granted_by = granted_by
        await self.session.flush()
        return grant

    async def revoke_role_grant(self, grant: UserRole, revoked_at: datetime) -> UserRole:
        grant.is_active = False
        grant.revoked_at = revoked_at
        await self.session.flush()
        return grant
