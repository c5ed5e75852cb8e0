"""Admin business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.modules.admin.models import AdminAction
from app.modules.admin.repository import AdminRepository


class AdminService:
    """Read access to the admin action journal."""

    def __init__(self, repository: AdminRepository) -> None:
        self.repository = repository

    async def list_actions(
        self,
        limit: int,
        offset: int,
        target_type: str | None = None,
    ) -> tuple[list[AdminAction], int]:
        """List admin actions, newest first."""
        return await self.repository.list_actions(limit=limit, offset=offset, target_type=target_type)


async def get_admin_service(session: AsyncSession = Depends(get_db_session)) -> AdminService:
    """Dependency provider for admin service."""
    return AdminService(AdminRepository(session))
