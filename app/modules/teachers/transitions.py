"""Teacher application status transitions.

Every status change goes through :func:`apply_transition`, so the rules for
who may move where, and what review metadata survives the move, live in
one table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from app.core.enums import ApplicationEventEnum, ApplicationStatusEnum
from app.core.metrics import record_application_transition
from app.modules.teachers.exceptions import InvalidApplicationState
from app.modules.teachers.models import TeacherApplication
from app.shared.utils import utc_now

logger = logging.getLogger(__name__)

PENDING = ApplicationStatusEnum.PENDING
APPROVED = ApplicationStatusEnum.APPROVED
REJECTED = ApplicationStatusEnum.REJECTED


@dataclass(frozen=True, slots=True)
class Transition:
    target: ApplicationStatusEnum | None
    stamp_submitted: bool = False
    stamp_review: bool = False


# None as source means "no application yet"; None as target keeps the status.
TRANSITIONS: dict[ApplicationEventEnum, dict[ApplicationStatusEnum | None, Transition]] = {
    ApplicationEventEnum.APPLY: {
        None: Transition(PENDING),
    },
    ApplicationEventEnum.EDIT: {
        PENDING: Transition(PENDING),
        REJECTED: Transition(PENDING),
    },
    ApplicationEventEnum.RESUBMIT: {
        REJECTED: Transition(PENDING, stamp_submitted=True),
    },
    ApplicationEventEnum.PROFILE_EDIT: {
        PENDING: Transition(PENDING),
        APPROVED: Transition(PENDING),
        REJECTED: Transition(PENDING),
    },
    ApplicationEventEnum.SUBMIT: {
        PENDING: Transition(PENDING, stamp_submitted=True),
        REJECTED: Transition(PENDING, stamp_submitted=True),
    },
    ApplicationEventEnum.CREDENTIALS_CHANGED: {
        PENDING: Transition(None),
        REJECTED: Transition(None),
        APPROVED: Transition(PENDING),
    },
    ApplicationEventEnum.APPROVE: {
        PENDING: Transition(APPROVED, stamp_review=True),
    },
    ApplicationEventEnum.REJECT: {
        PENDING: Transition(REJECTED, stamp_review=True),
    },
}


def can_transition(event: ApplicationEventEnum, status: ApplicationStatusEnum | None) -> bool:
    return status in TRANSITIONS[event]


def apply_transition(
    application: TeacherApplication,
    event: ApplicationEventEnum,
    *,
    reviewer_id: UUID | None = None,
    review_notes: str | None = None,
    now: datetime | None = None,
) -> ApplicationStatusEnum:
    """Move ``application`` along ``event`` or raise ``InvalidApplicationState``.

    A freshly built row has no source status, so ``apply`` starts from none.
    """
    source = None if event == ApplicationEventEnum.APPLY else application.status
    rule = TRANSITIONS[event].get(source)
    if rule is None:
        raise InvalidApplicationState(event.value, source.value if source else None)

    now = now or utc_now()
    target = rule.target or source

    if target == PENDING:
        application.reviewed_at = None
        application.reviewer_id = None
        application.review_notes = None
    if event == ApplicationEventEnum.APPLY:
        application.submitted_at = None
    if rule.stamp_submitted:
        application.submitted_at = now
    if rule.stamp_review:
        application.reviewed_at = now
        application.reviewer_id = reviewer_id
        application.review_notes = review_notes if event == ApplicationEventEnum.REJECT else None

    application.status = target
    record_application_transition(event.value, source.value if source else None, target.value)
    if source != target:
        logger.info(
            "Teacher application %s moved %s -> %s on %s",
            application.uuid,
            source.value if source else "none",
            target.value,
            event.value,
        )
    return target
