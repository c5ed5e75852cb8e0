"""In-process API tests for the teacher onboarding routes."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from types import SimpleNamespace
from uuid import UUID, uuid4

import httpx
import pytest
import pytest_asyncio

from app.core.enums import ApplicationStatusEnum, CredentialKindEnum, RoleEnum
from app.main import app
from app.modules.identity.service import get_current_user
from app.modules.teachers.exceptions import InvalidApplicationState
from app.modules.teachers.roles import TeacherRoleManager
from app.modules.teachers.service import CredentialService, get_credential_service, get_teacher_application_service

CREATED_AT = datetime(2026, 1, 5, tzinfo=UTC)


@dataclass
class FakeApplication:
    id: int
    uuid: UUID
    user_id: UUID
    status: ApplicationStatusEnum = ApplicationStatusEnum.PENDING
    submitted_at: datetime | None = None
    reviewed_at: datetime | None = None
    reviewer_id: UUID | None = None
    review_notes: str | None = None


class FakeApplicationRepository:
    def __init__(self, application: FakeApplication | None) -> None:
        self.application = application

    async def get_by_user_id(self, user_id: UUID):
        if self.application is not None and self.application.user_id == user_id:
            return self.application
        return None

    async def save(self, application):
        return application


class FakeRoleService:
    def __init__(self, roles: set[RoleEnum]) -> None:
        self._roles = roles

    async def list_roles(self, user_id: UUID) -> set[RoleEnum]:
        return set(self._roles)


class FakeCredentialRepository:
    def __init__(self) -> None:
        self.records: dict[int, SimpleNamespace] = {}

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        yield

    async def get_by_id(self, record_id: int):
        return self.records.get(record_id)

    async def save(self, record):
        record.updated_at = CREATED_AT
        return record

    async def add_many(self, application_id: int, rows: list[dict]):
        created = []
        for row in rows:
            record_id = len(self.records) + 1
            record = SimpleNamespace(
                id=record_id,
                application_id=application_id,
                created_at=CREATED_AT,
                updated_at=CREATED_AT,
                **{"file_path": None, **row},
            )
            self.records[record_id] = record
            created.append(record)
        return created

    async def delete(self, record) -> None:
        del self.records[record.id]


def _work_item(**overrides) -> dict:
    item = {
        "is_working": False,
        "company_name": "Acme Music School",
        "workplace": "Downtown studio",
        "job_category": "Education",
        "job_title": "Guitar teacher",
        "start_year": 2018,
        "start_month": 1,
        "end_year": 2021,
        "end_month": 6,
    }
    item.update(overrides)
    return item


@dataclass
class ApiContext:
    client: httpx.AsyncClient
    user: SimpleNamespace
    application: FakeApplication
    repositories: dict[CredentialKindEnum, FakeCredentialRepository]


@pytest_asyncio.fixture()
async def api() -> AsyncIterator[ApiContext]:
    user = SimpleNamespace(id=uuid4(), active_roles={RoleEnum.STUDENT, RoleEnum.TEACHER_APPLICANT})
    application = FakeApplication(id=1, uuid=uuid4(), user_id=user.id)
    repositories = {kind: FakeCredentialRepository() for kind in CredentialKindEnum}

    async def _credential_service() -> CredentialService:
        return CredentialService(
            applications=FakeApplicationRepository(application),
            repositories=repositories,
            roles=TeacherRoleManager(FakeRoleService({RoleEnum.STUDENT, RoleEnum.TEACHER_APPLICANT})),
        )

    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_credential_service] = _credential_service
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver/api/v1") as client:
            yield ApiContext(client, user, application, repositories)
    finally:
        app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_batch_upsert_returns_created_and_updated_records(api: ApiContext) -> None:
    first = await api.client.post("/teachers/credentials/work_experience", json=_work_item())
    assert first.status_code == 201
    record_id = first.json()["id"]

    response = await api.client.put(
        "/teachers/credentials/work_experience",
        json={"items": [_work_item(company_name="New place"), {**_work_item(job_title="Lead teacher"), "id": record_id}]},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["created_count"] == 1
    assert payload["updated_count"] == 1
    assert len(payload["items"]) == 2
    assert payload["updated"][0]["job_title"] == "Lead teacher"
    assert payload["created"][0]["company_name"] == "New place"


@pytest.mark.asyncio
async def test_oversized_batch_maps_to_validation_envelope(api: ApiContext) -> None:
    response = await api.client.put(
        "/teachers/credentials/work_experience",
        json={"items": [_work_item() for _ in range(21)]},
    )

    assert response.status_code == 422
    assert response.json()["error"] == {
        "code": "batch_size_invalid",
        "message": "Batch must contain between 1 and 20 items",
        "details": {"size": 21, "maximum": 20},
    }
    assert api.repositories[CredentialKindEnum.WORK_EXPERIENCE].records == {}


@pytest.mark.asyncio
async def test_invalid_item_error_names_index(api: ApiContext) -> None:
    response = await api.client.put(
        "/teachers/credentials/work_experience",
        json={"items": [_work_item(), _work_item(end_year=2017)]},
    )

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "credential_item_invalid"
    assert error["message"].startswith("item[1]: ")
    assert error["details"]["index"] == 1


@pytest.mark.asyncio
async def test_foreign_record_maps_to_forbidden(api: ApiContext) -> None:
    repository = api.repositories[CredentialKindEnum.WORK_EXPERIENCE]
    repository.records[7] = SimpleNamespace(id=7, application_id=99, created_at=CREATED_AT, **_work_item())

    response = await api.client.put(
        "/teachers/credentials/work_experience",
        json={"items": [_work_item(company_name="Acme"), {**_work_item(company_name="Beta"), "id": 7}]},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ownership_mismatch"
    assert list(repository.records) == [7]


@pytest.mark.asyncio
async def test_delete_returns_no_content(api: ApiContext) -> None:
    created = await api.client.post("/teachers/credentials/work_experience", json=_work_item())

    response = await api.client.delete(f"/teachers/credentials/work_experience/{created.json()['id']}")

    assert response.status_code == 204
    assert api.repositories[CredentialKindEnum.WORK_EXPERIENCE].records == {}


@pytest.mark.asyncio
async def test_state_conflict_maps_to_409(api: ApiContext) -> None:
    class _RejectingService:
        async def resubmit_application(self, user_id: UUID):
            raise InvalidApplicationState("resubmit", "pending")

    app.dependency_overrides[get_teacher_application_service] = lambda: _RejectingService()

    response = await api.client.post("/teachers/application/resubmit")

    assert response.status_code == 409
    assert response.json()["error"]["details"] == {"event": "resubmit", "status": "pending"}


@pytest.mark.asyncio
async def test_admin_listing_requires_admin_role(api: ApiContext) -> None:
    response = await api.client.get("/admin/teacher-applications")

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "http_error"


@pytest.mark.asyncio
async def test_admin_listing_pages_pending_applications(api: ApiContext) -> None:
    api.user.active_roles = {RoleEnum.STUDENT, RoleEnum.ADMIN}
    pending = SimpleNamespace(
        id=api.application.id,
        uuid=api.application.uuid,
        user_id=api.application.user_id,
        city="Istanbul",
        district="Kadikoy",
        address="Moda street 12",
        main_category_id=1,
        sub_category_ids=[2, 3],
        introduction="x" * 120,
        status=ApplicationStatusEnum.PENDING,
        submitted_at=CREATED_AT,
        reviewed_at=None,
        reviewer_id=None,
        review_notes=None,
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )
    calls: list[tuple] = []

    class _ListingService:
        async def list_applications(self, status, limit: int, offset: int):
            calls.append((status, limit, offset))
            return [pending], 41

    app.dependency_overrides[get_teacher_application_service] = lambda: _ListingService()

    response = await api.client.get("/admin/teacher-applications", params={"limit": 1, "offset": 40})

    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 41
    assert (payload["limit"], payload["offset"]) == (1, 40)
    assert payload["items"][0]["sub_category_ids"] == [2, 3]
    assert calls == [(ApplicationStatusEnum.PENDING, 1, 40)]
