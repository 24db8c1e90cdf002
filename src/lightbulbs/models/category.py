"""Category record."""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lightbulbs.models.base import Base, TimestampMixin


class CategoryRecord(TimestampMixin, Base):
    """A category groups bulbs; each bulb belongs to exactly one."""

    __tablename__ = "categories"
    __table_args__ = (CheckConstraint("total_bulbs >= 0", name="ck_categories_total_bulbs"),)

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    total_bulbs: Mapped[int] = mapped_column(Integer, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
