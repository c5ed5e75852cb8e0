"""Taxonomy API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.modules.taxonomy.schemas import MainCategoryRead
from app.modules.taxonomy.service import TaxonomyService, get_taxonomy_service

router = APIRouter(prefix="/taxonomy", tags=["taxonomy"])


@router.get("/categories", response_model=list[MainCategoryRead])
async def list_categories(
    service: TaxonomyService = Depends(get_taxonomy_service),
) -> list[MainCategoryRead]:
    """List active teaching subjects and specialties."""
    return await service.list_categories()
