from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi import Request, Response

import app.main as main_module
from app.core.enums import ApplicationEventEnum, ApplicationStatusEnum
from app.core.metrics import (
    CREDENTIAL_BATCH_ITEMS_TOTAL,
    TEACHER_APPLICATION_TRANSITIONS_TOTAL,
    build_metrics_response,
    instrument_http_request,
    record_credential_batch,
)
from app.modules.teachers.transitions import apply_transition


def _make_request(path: str) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": [],
        "client": ("127.0.0.1", 12345),
        "scheme": "http",
        "server": ("testserver", 80),
        "query_string": b"",
    }
    return Request(scope)


@pytest.mark.asyncio
async def test_http_metrics_instrumentation_tracks_status_and_path() -> None:
    async def _no_content(_: Request) -> Response:
        return Response(status_code=204)

    request = _make_request("/health")
    await instrument_http_request(request, _no_content)

    payload = build_metrics_response().body.decode("utf-8")
    assert "tutorly_http_requests_total" in payload
    assert 'path="/health"' in payload
    assert 'status_code="204"' in payload


@pytest.mark.asyncio
async def test_metrics_endpoint_exposes_prometheus_payload() -> None:
    response = await main_module.metrics_endpoint(_make_request("/metrics"))
    payload = response.body.decode("utf-8")

    assert response.status_code == 200
    assert "tutorly_http_requests_total" in payload


def test_application_transition_is_counted() -> None:
    counter = TEACHER_APPLICATION_TRANSITIONS_TOTAL.labels(
        event="reject",
        from_status="pending",
        to_status="rejected",
    )
    before = counter._value.get()
    application = SimpleNamespace(
        uuid=uuid4(),
        status=ApplicationStatusEnum.PENDING,
        submitted_at=None,
        reviewed_at=None,
        reviewer_id=None,
        review_notes=None,
    )

    apply_transition(application, ApplicationEventEnum.REJECT, reviewer_id=uuid4(), review_notes="incomplete")

    assert counter._value.get() == before + 1


def test_credential_batch_counts_created_and_updated_separately() -> None:
    created = CREDENTIAL_BATCH_ITEMS_TOTAL.labels(kind="certificate", operation="created")
    updated = CREDENTIAL_BATCH_ITEMS_TOTAL.labels(kind="certificate", operation="updated")
    created_before = created._value.get()
    updated_before = updated._value.get()

    record_credential_batch("certificate", created=2, updated=1)

    assert created._value.get() == created_before + 2
    assert updated._value.get() == updated_before + 1
