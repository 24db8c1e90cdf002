"""Bulb record and its ordered link rows."""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lightbulbs.models.base import Base, TimestampMixin


class BulbRecord(TimestampMixin, Base):
    """A note. Links to its category, reference sources and tags by id only."""

    __tablename__ = "bulbs"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String(255))
    category_id: Mapped[UUID] = mapped_column(ForeignKey("categories.id"), index=True)
    content: Mapped[str] = mapped_column(Text)
    # [{"archived_at": ISO-8601, "content": str}], most recent first
    past_versions: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), default=list
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    references: Mapped[list[BulbReferenceRecord]] = relationship(
        back_populates="bulb",
        order_by="BulbReferenceRecord.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    tags: Mapped[list[BulbTagRecord]] = relationship(
        back_populates="bulb",
        order_by="BulbTagRecord.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}


class BulbReferenceRecord(Base):
    """One entry of a bulb's reference list."""

    __tablename__ = "bulb_references"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bulb_id: Mapped[UUID] = mapped_column(ForeignKey("bulbs.id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer)
    source_id: Mapped[UUID] = mapped_column(ForeignKey("reference_sources.id"), index=True)
    detail: Mapped[str | None] = mapped_column(Text)

    bulb: Mapped[BulbRecord] = relationship(back_populates="references")


class BulbTagRecord(Base):
    """One entry of a bulb's tag list."""

    __tablename__ = "bulb_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bulb_id: Mapped[UUID] = mapped_column(ForeignKey("bulbs.id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer)
    tag_id: Mapped[UUID] = mapped_column(ForeignKey("tags.id"), index=True)

    bulb: Mapped[BulbRecord] = relationship(back_populates="tags")
