"""Reference source and reference records."""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lightbulbs.models.base import Base, TimestampMixin
from lightbulbs.models.enums import ReferenceSourceType, ReferenceType


def _enum_values(enum_cls: type[ReferenceSourceType] | type[ReferenceType]) -> list[str]:
    return [member.value for member in enum_cls]


class ReferenceSourceRecord(TimestampMixin, Base):
    """Where a bulb's idea came from: a book, a page, a song."""

    __tablename__ = "reference_sources"
    __table_args__ = (CheckConstraint("total_bulbs >= 0", name="ck_reference_sources_total_bulbs"),)

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    type: Mapped[ReferenceSourceType] = mapped_column(
        Enum(ReferenceSourceType, name="reference_source_type", values_callable=_enum_values)
    )
    locator: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    total_bulbs: Mapped[int] = mapped_column(Integer, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class ReferenceRecord(TimestampMixin, Base):
    """Standalone reference, kept alongside reference sources."""

    __tablename__ = "references"
    __table_args__ = (CheckConstraint("total_bulbs >= 0", name="ck_references_total_bulbs"),)

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    type: Mapped[ReferenceType] = mapped_column(
        Enum(ReferenceType, name="reference_type", values_callable=_enum_values)
    )
    locator: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    total_bulbs: Mapped[int] = mapped_column(Integer, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
