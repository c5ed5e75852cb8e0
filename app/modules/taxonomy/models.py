"""Taxonomy ORM models."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, SerialModelMixin


class MainCategory(SerialModelMixin, Base):
    """Top-level teaching subject."""

    __tablename__ = "main_categories"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    icon_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    sub_categories: Mapped[list["SubCategory"]] = relationship(
        back_populates="main_category",
        order_by="SubCategory.display_order",
    )


class SubCategory(SerialModelMixin, Base):
    """Specialty under a main category."""

    __tablename__ = "sub_categories"

    main_category_id: Mapped[int] = mapped_column(
        ForeignKey("main_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    main_category: Mapped[MainCategory] = relationship(back_populates="sub_categories")
