"""Admin API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.core.enums import ApplicationStatusEnum, RoleEnum
from app.modules.admin.schemas import AdminActionRead, ApplicationReviewRequest
from app.modules.admin.service import AdminService, get_admin_service
from app.modules.identity.models import User
from app.modules.identity.service import require_roles
from app.modules.teachers.schemas import ApplicationRead
from app.modules.teachers.service import TeacherApplicationService, get_teacher_application_service
from app.shared.pagination import Page, PaginationParams, build_page, get_pagination_params

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/teacher-applications", response_model=Page[ApplicationRead])
async def list_teacher_applications(
    status: ApplicationStatusEnum | None = Query(default=ApplicationStatusEnum.PENDING),
    pagination: PaginationParams = Depends(get_pagination_params),
    service: TeacherApplicationService = Depends(get_teacher_application_service),
    current_user: User = Depends(require_roles(RoleEnum.ADMIN)),
) -> Page[ApplicationRead]:
    """List teacher applications awaiting review, oldest submission first."""
    items, total = await service.list_applications(status, pagination.limit, pagination.offset)
    return build_page(items, total, pagination, ApplicationRead)


@router.post("/teacher-applications/{application_id}/review", response_model=ApplicationRead)
async def review_teacher_application(
    application_id: int,
    payload: ApplicationReviewRequest,
    service: TeacherApplicationService = Depends(get_teacher_application_service),
    current_user: User = Depends(require_roles(RoleEnum.ADMIN)),
) -> ApplicationRead:
    """Approve or reject a pending teacher application."""
    application = await service.review_application(application_id, payload, current_user)
    return ApplicationRead.model_validate(application)


@router.get("/actions", response_model=Page[AdminActionRead])
async def list_admin_actions(
    target_type: str | None = Query(default=None, max_length=128),
    pagination: PaginationParams = Depends(get_pagination_params),
    service: AdminService = Depends(get_admin_service),
    current_user: User = Depends(require_roles(RoleEnum.ADMIN)),
) -> Page[AdminActionRead]:
    """List admin action logs."""
    items, total = await service.list_actions(pagination.limit, pagination.offset, target_type)
    return build_page(items, total, pagination, AdminActionRead)
