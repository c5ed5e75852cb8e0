"""Taxonomy repository layer."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.modules.taxonomy.models import MainCategory, SubCategory


class TaxonomyRepository:
    """DB operations for category lookups."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_active_main_category(self, main_category_id: int) -> MainCategory | None:
        stmt = select(MainCategory).where(
            MainCategory.id == main_category_id,
            MainCategory.is_active.is_(True),
        )
        return await self.session.scalar(stmt)

    async def list_active_sub_categories(
        self,
        sub_category_ids: Sequence[int],
        main_category_id: int,
    ) -> list[SubCategory]:
        if not sub_category_ids:
            return []
        stmt = select(SubCategory).where(
            SubCategory.id.in_(list(sub_category_ids)),
            SubCategory.main_category_id == main_category_id,
            SubCategory.is_active.is_(True),
        )
        return list((await self.session.scalars(stmt)).all())

    async def list_active_tree(self) -> list[MainCategory]:
        stmt = (
            select(MainCategory)
            .options(selectinload(MainCategory.sub_categories))
            .where(MainCategory.is_active.is_(True))
            .order_by(MainCategory.display_order.asc(), MainCategory.id.asc())
        )
        return list((await self.session.scalars(stmt)).all())
