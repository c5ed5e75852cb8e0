"""Taxonomy business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.modules.taxonomy.repository import TaxonomyRepository
from app.modules.taxonomy.schemas import MainCategoryRead, SubCategoryRead


class TaxonomyService:
    """Read-only access to the category hierarchy."""

    def __init__(self, repository: TaxonomyRepository) -> None:
        self.repository = repository

    async def list_categories(self) -> list[MainCategoryRead]:
        """List active main categories with their active sub categories."""
        tree = await self.repository.list_active_tree()
        return [
            MainCategoryRead(
                id=main.id,
                name=main.name,
                icon_url=main.icon_url,
                display_order=main.display_order,
                sub_categories=[
                    SubCategoryRead.model_validate(sub) for sub in main.sub_categories if sub.is_active
                ],
            )
            for main in tree
        ]


async def get_taxonomy_service(session: AsyncSession = Depends(get_db_session)) -> TaxonomyService:
    """Dependency provider for taxonomy service."""
    return TaxonomyService(TaxonomyRepository(session))
