"""Batch create-or-update of credential records.

A batch is a list of :class:`NewCredential` and :class:`CredentialPatch`
items for one application. It is checked as a whole before anything is
written, then applied inside a single transaction: every create and update
lands, or none does.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from app.core.metrics import record_credential_batch
from app.modules.teachers.credentials import (
    CredentialFieldError,
    CredentialItem,
    CredentialPatch,
    ItemValidator,
    NewCredential,
)
from app.modules.teachers.exceptions import (
    BatchSizeInvalid,
    CredentialItemInvalid,
    CredentialNotFound,
    OwnershipMismatch,
)
from app.modules.teachers.models import CredentialMixin
from app.modules.teachers.repository import CredentialRepository

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = frozenset({"id", "application_id", "created_at", "updated_at"})


@dataclass(slots=True)
class ReconcilePlan:
    to_create: list[NewCredential] = field(default_factory=list)
    to_update: list[CredentialPatch] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.to_create) + len(self.to_update)


@dataclass(slots=True)
class ReconcileResult:
    created: list[CredentialMixin]
    updated: list[CredentialMixin]
    records: list[CredentialMixin]

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def updated_count(self) -> int:
        return len(self.updated)


def _newest_first(records: Sequence[CredentialMixin]) -> list[CredentialMixin]:
    return sorted(records, key=lambda record: (record.created_at, record.id), reverse=True)


class CredentialReconciler:
    """Applies credential batches for one collection kind."""

    def __init__(self, repository: CredentialRepository, kind: str, max_items: int = 20) -> None:
        self.repository = repository
        self.kind = kind
        self.max_items = max_items

    def prepare(self, items: Sequence[CredentialItem], validator: ItemValidator) -> ReconcilePlan:
        """Check size and fields of every item and split creates from updates.

        Touches no storage.
        """
        if not 1 <= len(items) <= self.max_items:
            raise BatchSizeInvalid(len(items), self.max_items)

        plan = ReconcilePlan()
        patched_ids: set[int] = set()
        for index, item in enumerate(items):
            try:
                validator(item.fields)
            except CredentialFieldError as exc:
                raise CredentialItemInvalid(index, exc.field, exc.reason) from exc

            if isinstance(item, CredentialPatch):
                if item.id in patched_ids:
                    raise CredentialItemInvalid(index, "id", f"duplicate id {item.id}")
                patched_ids.add(item.id)
                plan.to_update.append(item)
            else:
                plan.to_create.append(item)
        return plan

    async def apply(self, application_id: int, plan: ReconcilePlan) -> ReconcileResult:
        updated: list[CredentialMixin] = []
        async with self.repository.transaction():
            for patch in plan.to_update:
                record = await self.repository.get_by_id(patch.id)
                if record is None:
                    raise CredentialNotFound(self.kind, patch.id)
                if record.application_id != application_id:
                    raise OwnershipMismatch(self.kind, patch.id)
                _merge(record, patch.fields)
                updated.append(await self.repository.save(record))

            created = await self.repository.add_many(
                application_id,
                [dict(item.fields) for item in plan.to_create],
            )

        record_credential_batch(self.kind, len(created), len(updated))
        logger.info(
            "Reconciled %s batch for application %s: %s created, %s updated",
            self.kind,
            application_id,
            len(created),
            len(updated),
        )
        return ReconcileResult(created=created, updated=updated, records=_newest_first([*created, *updated]))

    async def reconcile(
        self,
        application_id: int,
        items: Sequence[CredentialItem],
        validator: ItemValidator,
    ) -> ReconcileResult:
        plan = self.prepare(items, validator)
        return await self.apply(application_id, plan)


def _merge(record: CredentialMixin, fields: dict[str, Any]) -> None:
    for key, value in fields.items():
        if key in IMMUTABLE_FIELDS:
            continue
        setattr(record, key, value)
