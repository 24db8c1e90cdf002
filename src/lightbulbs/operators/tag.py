"""Operator for tags."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lightbulbs.models import TagRecord
from lightbulbs.operators.base import DatabaseOperator
from lightbulbs.operators.transcoder import Counters, Plain, Ref, Transcoder
from lightbulbs.schemas import TagFilter

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class TagOperator(DatabaseOperator[TagRecord, TagFilter]):
    entity_name = "tag"
    filter_cls = TagFilter
    transcoder = Transcoder(
        TagRecord,
        {
            "label": Plain("label", nullable=False),
            "parent": Ref("parent_id", nullable=True),
            "description": Plain("description"),
            "statistics": Counters(("total_bulbs", "total_children")),
        },
    )

    @classmethod
    def conditions(cls, criteria: TagFilter) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if criteria.label is not None:
            conditions.append(TagRecord.label.icontains(criteria.label, autoescape=True))
        if criteria.parent is not None:
            conditions.append(TagRecord.parent_id == criteria.parent)
        if criteria.description is not None:
            conditions.append(TagRecord.description.icontains(criteria.description, autoescape=True))
        return conditions
