"""Offset pagination for admin listings."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel

ReadT = TypeVar("ReadT", bound=BaseModel)

MAX_PAGE_SIZE = 100


class PaginationParams(BaseModel):
    limit: int
    offset: int


def get_pagination_params(
    limit: int = Query(default=20, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
) -> PaginationParams:
    """FastAPI dependency for ``limit``/``offset`` query params."""
    return PaginationParams(limit=limit, offset=offset)


class Page(BaseModel, Generic[ReadT]):
    """One slice of a listing plus the unsliced total."""

    items: list[ReadT]
    total: int
    limit: int
    offset: int


def build_page(
    records: Sequence[Any],
    total: int,
    params: PaginationParams,
    schema: type[ReadT],
) -> Page[ReadT]:
    """Serialize ORM rows with ``schema`` and wrap them in a page."""
    return Page[schema](
        items=[schema.model_validate(record) for record in records],
        total=total,
        limit=params.limit,
        offset=params.offset,
    )
