from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from copy import copy
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest

from app.modules.teachers.credentials import CredentialFieldError, CredentialPatch, NewCredential
from app.modules.teachers.exceptions import (
    BatchSizeInvalid,
    CredentialItemInvalid,
    CredentialNotFound,
    OwnershipMismatch,
)
from app.modules.teachers.reconciliation import CredentialReconciler

BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)


def _record(record_id: int, application_id: int, company_name: str, minutes: int = 0) -> SimpleNamespace:
    return SimpleNamespace(
        id=record_id,
        application_id=application_id,
        company_name=company_name,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


class FakeCredentialRepository:
    """In-memory store whose transaction restores the snapshot on error."""

    def __init__(self, records: list[SimpleNamespace] | None = None) -> None:
        self.records = {record.id: record for record in records or []}
        self.calls: list[str] = []
        self._next_id = max(self.records, default=0) + 1
        self._clock = BASE_TIME + timedelta(days=1)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        self.calls.append("transaction")
        snapshot = {record_id: copy(record) for record_id, record in self.records.items()}
        next_id = self._next_id
        try:
            yield
        except Exception:
            self.records = snapshot
            self._next_id = next_id
            raise

    async def get_by_id(self, record_id: int):
        self.calls.append("get_by_id")
        return self.records.get(record_id)

    async def save(self, record):
        self.calls.append("save")
        return record

    async def add_many(self, application_id: int, rows: list[dict]):
        self.calls.append("add_many")
        created = []
        for row in rows:
            record = SimpleNamespace(id=self._next_id, application_id=application_id, created_at=self._clock, **row)
            self.records[record.id] = record
            created.append(record)
            self._next_id += 1
        return created


def _require_company(fields) -> None:
    if not fields.get("company_name"):
        raise CredentialFieldError("company_name", "company_name is required")


def _reconciler(repository: FakeCredentialRepository) -> CredentialReconciler:
    return CredentialReconciler(repository, "work_experience", max_items=20)


@pytest.mark.asyncio
async def test_batch_creates_and_updates_with_matching_counts() -> None:
    repository = FakeCredentialRepository([_record(1, 10, "Old", minutes=1), _record(2, 10, "Other", minutes=2)])
    items = [
        NewCredential({"company_name": "Acme"}),
        CredentialPatch(1, {"company_name": "Renamed"}),
        NewCredential({"company_name": "Beta"}),
    ]

    result = await _reconciler(repository).reconcile(10, items, _require_company)

    assert result.created_count == 2
    assert result.updated_count == 1
    assert result.created_count + result.updated_count == len(items)
    assert repository.records[1].company_name == "Renamed"
    assert repository.records[2].company_name == "Other"
    assert len([r for r in repository.records.values() if r.application_id == 10]) == 4


@pytest.mark.asyncio
async def test_result_records_are_newest_first_with_id_as_tie_break() -> None:
    repository = FakeCredentialRepository([_record(1, 10, "Old", minutes=5)])
    items = [
        CredentialPatch(1, {"company_name": "Old but edited"}),
        NewCredential({"company_name": "First"}),
        NewCredential({"company_name": "Second"}),
    ]

    result = await _reconciler(repository).reconcile(10, items, _require_company)

    assert [record.company_name for record in result.records] == ["Second", "First", "Old but edited"]


@pytest.mark.asyncio
async def test_foreign_record_in_batch_fails_whole_batch() -> None:
    repository = FakeCredentialRepository([_record(7, 99, "Foreign")])
    items = [
        NewCredential({"company_name": "Acme"}),
        CredentialPatch(7, {"company_name": "Beta"}),
    ]

    with pytest.raises(OwnershipMismatch) as exc:
        await _reconciler(repository).reconcile(10, items, _require_company)

    assert exc.value.details == {"kind": "work_experience", "id": 7}
    assert exc.value.status_code == 403
    assert list(repository.records) == [7]
    assert repository.records[7].company_name == "Foreign"
    assert "add_many" not in repository.calls


@pytest.mark.asyncio
async def test_missing_record_rolls_back_earlier_updates() -> None:
    repository = FakeCredentialRepository([_record(1, 10, "Kept")])
    items = [
        CredentialPatch(1, {"company_name": "Changed"}),
        CredentialPatch(404, {"company_name": "Ghost"}),
    ]

    with pytest.raises(CredentialNotFound):
        await _reconciler(repository).reconcile(10, items, _require_company)

    assert repository.records[1].company_name == "Kept"


@pytest.mark.asyncio
async def test_oversized_batch_is_rejected_before_any_storage_call() -> None:
    repository = FakeCredentialRepository()
    items = [NewCredential({"company_name": f"Company {index}"}) for index in range(21)]

    with pytest.raises(BatchSizeInvalid) as exc:
        await _reconciler(repository).reconcile(10, items, _require_company)

    assert exc.value.details == {"size": 21, "maximum": 20}
    assert repository.calls == []


@pytest.mark.asyncio
async def test_empty_batch_is_rejected() -> None:
    repository = FakeCredentialRepository()

    with pytest.raises(BatchSizeInvalid):
        await _reconciler(repository).reconcile(10, [], _require_company)
    assert repository.calls == []


@pytest.mark.asyncio
async def test_invalid_item_reports_its_index_and_writes_nothing() -> None:
    repository = FakeCredentialRepository()
    items = [NewCredential({"company_name": "Acme"}), NewCredential({"company_name": ""})]

    with pytest.raises(CredentialItemInvalid) as exc:
        await _reconciler(repository).reconcile(10, items, _require_company)

    assert exc.value.message == "item[1]: company_name is required"
    assert exc.value.details["index"] == 1
    assert exc.value.details["field"] == "company_name"
    assert repository.calls == []


@pytest.mark.asyncio
async def test_repeated_record_id_is_rejected_before_any_storage_call() -> None:
    repository = FakeCredentialRepository([_record(1, 10, "Acme")])
    items = [
        CredentialPatch(1, {"company_name": "A"}),
        NewCredential({"company_name": "C"}),
        CredentialPatch(1, {"company_name": "B"}),
    ]

    with pytest.raises(CredentialItemInvalid) as exc:
        await _reconciler(repository).reconcile(10, items, _require_company)

    assert exc.value.message == "item[2]: duplicate id 1"
    assert exc.value.details["field"] == "id"
    assert repository.calls == []
    assert repository.records[1].company_name == "Acme"


@pytest.mark.asyncio
async def test_patch_never_rewrites_identity_or_owner() -> None:
    repository = FakeCredentialRepository([_record(5, 10, "Acme")])
    patch = CredentialPatch(5, {"id": 500, "application_id": 99, "company_name": "Acme GmbH"})

    result = await _reconciler(repository).reconcile(10, [patch], _require_company)

    record = result.updated[0]
    assert record.id == 5
    assert record.application_id == 10
    assert record.company_name == "Acme GmbH"


def test_prepare_partitions_by_item_type() -> None:
    plan = _reconciler(FakeCredentialRepository()).prepare(
        [NewCredential({"company_name": "A"}), CredentialPatch(3, {"company_name": "B"})],
        _require_company,
    )

    assert [item.fields["company_name"] for item in plan.to_create] == ["A"]
    assert [item.id for item in plan.to_update] == [3]
    assert plan.size == 2
