"""Identity business logic layer."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.enums import AccountStatusEnum, RoleEnum
from app.core.security import create_access_token, decode_token, hash_password, oauth2_scheme, verify_password
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.schemas import LoginRequest, TokenRead, UserCreate
from app.shared.exceptions import ConflictException, NotFoundException, UnauthorizedException
from app.shared.utils import utc_now

logger = logging.getLogger(__name__)


class IdentityService:
    """Identity domain service."""

    def __init__(self, repository: IdentityRepository) -> None:
        self.repository = repository

    async def register(self, payload: UserCreate) -> User:
        """Register new user with the student role."""
        existing_user = await self.repository.get_user_by_email(payload.email)
        if existing_user is not None:
            raise ConflictException("User with this email already exists")

        user = await self.repository.create_user(
            email=payload.email,
            password_hash=hash_password(payload.password),
            timezone=payload.timezone,
        )
        await self.repository.create_role_grant(user.id, RoleEnum.STUDENT, granted_by=None)
        return await self.repository.get_user_by_id(user.id)

    async def login(self, payload: LoginRequest) -> TokenRead:
        """Authenticate user and issue access token."""
        user = await self.repository.get_user_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            raise UnauthorizedException("Invalid credentials")

        if user.account_status != AccountStatusEnum.ACTIVE:
            raise UnauthorizedException("User is inactive")

        return TokenRead(access_token=create_access_token(subject=str(user.id)))

    async def get_user_from_access_token(self, token: str) -> User:
        """Resolve user from access token."""
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise UnauthorizedException("Invalid access token")

        subject = payload.get("sub")
        if not subject:
            raise UnauthorizedException("Token subject is missing")

        user = await self.repository.get_user_by_id(UUID(subject))
        if user is None:
            raise UnauthorizedException("User not found")
        if user.account_status != AccountStatusEnum.ACTIVE:
            raise UnauthorizedException("User is inactive")

        return user


class RoleService:
    """Role grants lookup and mutation."""

    def __init__(self, repository: IdentityRepository) -> None:
        self.repository = repository

    async def list_roles(self, user_id: UUID) -> set[RoleEnum]:
        return set(await self.repository.list_active_roles(user_id))

    async def has_role(self, user_id: UUID, role: RoleEnum) -> bool:
        grant = await self.repository.get_role_grant(user_id, role)
        return grant is not None and grant.is_active

    async def add_role(self, user_id: UUID, role: RoleEnum, granted_by: UUID | None = None) -> bool:
        """Grant role to user. Returns False when the grant was already active."""
        user = await self.repository.get_user_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found")

        grant = await self.repository.get_role_grant(user_id, role)
        if grant is not None and grant.is_active:
            return False
        if grant is not None:
            await self.repository.activate_role_grant(grant, granted_by)
        else:
            await self.repository.create_role_grant(user_id, role, granted_by)
        logger.info("Granted role %s to user %s", role, user_id)
        return True

    async def revoke_role(self, user_id: UUID, role: RoleEnum) -> bool:
        """Soft-revoke role. Returns False when there was no active grant."""
        grant = await self.repository.get_role_grant(user_id, role)
        if grant is None or not grant.is_active:
            return False
        await self.repository.revoke_role_grant(grant, utc_now())
        logger.info("Revoked role %s from user %s", role, user_id)
        return True


async def get_identity_service(session: AsyncSession = Depends(get_db_session)) -> IdentityService:
    """Dependency to provide identity service."""
    return IdentityService(IdentityRepository(session))


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    service: IdentityService = Depends(get_identity_service),
) -> User:
    """Resolve currently authenticated user from bearer token."""
    return await service.get_user_from_access_token(token)


def require_roles(*roles: RoleEnum):
    """Dependency factory for role-based access."""

    async def _checker(current_user: User = Depends(get_current_user)) -> User:
        if not current_user.active_roles.intersection(roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Operation not permitted for your role",
            )
        return current_user

    return _checker
