"""Operators for reference sources and references.

Both entities share one shape, so one transcoder layout serves both.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lightbulbs.models import (
    ReferenceRecord,
    ReferenceSourceRecord,
    ReferenceSourceType,
    ReferenceType,
)
from lightbulbs.operators.base import DatabaseOperator
from lightbulbs.operators.transcoder import Choice, Counters, FieldCodec, Plain, Transcoder
from lightbulbs.schemas import ReferenceFilter, ReferenceSourceFilter

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


def _source_codecs(enum_cls: type[ReferenceSourceType] | type[ReferenceType]) -> dict[str, FieldCodec]:
    return {
        "name": Plain("name", nullable=False),
        "type": Choice("type", enum_cls),
        "locator": Plain("locator"),
        "image_url": Plain("image_url"),
        "description": Plain("description"),
        "statistics": Counters(("total_bulbs",)),
    }


def _source_conditions(
    record_cls: type[ReferenceSourceRecord] | type[ReferenceRecord],
    criteria: Any,
) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []
    if criteria.name is not None:
        conditions.append(record_cls.name.icontains(criteria.name, autoescape=True))
    if criteria.type is not None:
        conditions.append(record_cls.type == criteria.type)
    if criteria.locator is not None:
        conditions.append(record_cls.locator.icontains(criteria.locator, autoescape=True))
    if criteria.description is not None:
        conditions.append(record_cls.description.icontains(criteria.description, autoescape=True))
    return conditions


class ReferenceSourceOperator(DatabaseOperator[ReferenceSourceRecord, ReferenceSourceFilter]):
    entity_name = "reference source"
    filter_cls = ReferenceSourceFilter
    transcoder = Transcoder(ReferenceSourceRecord, _source_codecs(ReferenceSourceType))

    @classmethod
    def conditions(cls, criteria: ReferenceSourceFilter) -> list[ColumnElement[bool]]:
        return _source_conditions(ReferenceSourceRecord, criteria)


class ReferenceOperator(DatabaseOperator[ReferenceRecord, ReferenceFilter]):
    entity_name = "reference"
    filter_cls = ReferenceFilter
    transcoder = Transcoder(ReferenceRecord, _source_codecs(ReferenceType))

    @classmethod
    def conditions(cls, criteria: ReferenceFilter) -> list[ColumnElement[bool]]:
        return _source_conditions(ReferenceRecord, criteria)
