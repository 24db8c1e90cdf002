"""Tag record."""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lightbulbs.models.base import Base, TimestampMixin


class TagRecord(TimestampMixin, Base):
    """A label attached to bulbs. Tags form a forest through ``parent_id``."""

    __tablename__ = "tags"
    __table_args__ = (
        CheckConstraint("total_bulbs >= 0", name="ck_tags_total_bulbs"),
        CheckConstraint("total_children >= 0", name="ck_tags_total_children"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    label: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    parent_id: Mapped[UUID | None] = mapped_column(ForeignKey("tags.id"), index=True)
    description: Mapped[str | None] = mapped_column(Text)
    total_bulbs: Mapped[int] = mapped_column(Integer, default=0)
    total_children: Mapped[int] = mapped_column(Integer, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
