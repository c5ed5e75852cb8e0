"""Taxonomy schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SubCategoryRead(BaseModel):
    """Sub category response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    display_order: int


class MainCategoryRead(BaseModel):
    """Main category with its active sub categories."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    icon_url: str | None
    display_order: int
    sub_categories: list[SubCategoryRead]
