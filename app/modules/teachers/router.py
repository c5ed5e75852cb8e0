"""Teachers API router."""

from fastapi import APIRouter, Depends, status

from app.core.enums import CredentialKindEnum
from app.modules.identity.models import User
from app.modules.identity.service import get_current_user
from app.modules.teachers.credentials import to_credential_item
from app.modules.teachers.schemas import (
    CREDENTIAL_SCHEMAS,
    ApplicationCreate,
    ApplicationRead,
    ApplicationUpdate,
    CredentialBatch,
    CredentialBatchRead,
    CredentialSchemas,
    ProfileUpdate,
)
from app.modules.teachers.service import (
    CredentialService,
    TeacherApplicationService,
    get_credential_service,
    get_teacher_application_service,
)

router = APIRouter(prefix="/teachers", tags=["teachers"])


@router.post("/application", response_model=ApplicationRead, status_code=status.HTTP_201_CREATED)
async def apply(
    payload: ApplicationCreate,
    service: TeacherApplicationService = Depends(get_teacher_application_service),
    current_user: User = Depends(get_current_user),
) -> ApplicationRead:
    """Start a teacher application."""
    application = await service.apply(current_user.id, payload)
    return ApplicationRead.model_validate(application)


@router.get("/application", response_model=ApplicationRead)
async def get_application(
    service: TeacherApplicationService = Depends(get_teacher_application_service),
    current_user: User = Depends(get_current_user),
) -> ApplicationRead:
    """Return the caller's application."""
    application = await service.get_application(current_user.id)
    return ApplicationRead.model_validate(application)


@router.patch("/application", response_model=ApplicationRead)
async def update_application(
    payload: ApplicationUpdate,
    service: TeacherApplicationService = Depends(get_teacher_application_service),
    current_user: User = Depends(get_current_user),
) -> ApplicationRead:
    """Edit a pending or rejected application."""
    application = await service.update_application(current_user.id, payload)
    return ApplicationRead.model_validate(application)


@router.post("/application/resubmit", response_model=ApplicationRead)
async def resubmit_application(
    service: TeacherApplicationService = Depends(get_teacher_application_service),
    current_user: User = Depends(get_current_user),
) -> ApplicationRead:
    """Send a rejected application back to review."""
    application = await service.resubmit_application(current_user.id)
    return ApplicationRead.model_validate(application)


@router.post("/application/submit", response_model=ApplicationRead)
async def submit_application(
    service: TeacherApplicationService = Depends(get_teacher_application_service),
    current_user: User = Depends(get_current_user),
) -> ApplicationRead:
    """Submit the application for review."""
    application = await service.submit_application(current_user.id)
    return ApplicationRead.model_validate(application)


@router.get("/profile", response_model=ApplicationRead)
async def get_profile(
    service: TeacherApplicationService = Depends(get_teacher_application_service),
    current_user: User = Depends(get_current_user),
) -> ApplicationRead:
    """Return the published teacher profile."""
    application = await service.get_profile(current_user.id)
    return ApplicationRead.model_validate(application)


@router.patch("/profile", response_model=ApplicationRead)
async def update_profile(
    payload: ProfileUpdate,
    service: TeacherApplicationService = Depends(get_teacher_application_service),
    current_user: User = Depends(get_current_user),
) -> ApplicationRead:
    """Edit the teacher profile; the application returns to review."""
    application = await service.update_profile(current_user.id, payload)
    return ApplicationRead.model_validate(application)


def build_credential_router(kind: CredentialKindEnum, schemas: CredentialSchemas) -> APIRouter:
    """Routes for one credential collection."""
    kind_router = APIRouter(prefix=f"/credentials/{kind.value}")
    write_schema = schemas.write
    read_schema = schemas.read
    batch_schema = CredentialBatch[schemas.item]
    batch_read_schema = CredentialBatchRead[read_schema]

    @kind_router.get("", response_model=list[read_schema], name=f"list_{kind.value}")
    async def list_credentials(
        service: CredentialService = Depends(get_credential_service),
        current_user: User = Depends(get_current_user),
    ):
        records = await service.list_credentials(current_user.id, kind)
        return [read_schema.model_validate(record) for record in records]

    @kind_router.post(
        "",
        response_model=read_schema,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{kind.value}",
    )
    async def create_credential(
        payload: write_schema,
        service: CredentialService = Depends(get_credential_service),
        current_user: User = Depends(get_current_user),
    ):
        record = await service.create_credential(current_user.id, kind, payload)
        return read_schema.model_validate(record)

    @kind_router.put("", response_model=batch_read_schema, name=f"upsert_{kind.value}")
    async def upsert_credentials(
        payload: batch_schema,
        service: CredentialService = Depends(get_credential_service),
        current_user: User = Depends(get_current_user),
    ):
        items = [to_credential_item(item) for item in payload.items]
        result = await service.upsert_credentials(current_user.id, kind, items)
        return batch_read_schema(
            items=[read_schema.model_validate(record) for record in result.records],
            created=[read_schema.model_validate(record) for record in result.created],
            updated=[read_schema.model_validate(record) for record in result.updated],
            created_count=result.created_count,
            updated_count=result.updated_count,
        )

    @kind_router.delete(
        "/{record_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        name=f"delete_{kind.value}",
    )
    async def delete_credential(
        record_id: int,
        service: CredentialService = Depends(get_credential_service),
        current_user: User = Depends(get_current_user),
    ) -> None:
        await service.delete_credential(current_user.id, kind, record_id)

    return kind_router


for _kind, _schemas in CREDENTIAL_SCHEMAS.items():
    router.include_router(build_credential_router(_kind, _schemas))
