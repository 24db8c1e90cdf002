"""Operator for categories."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lightbulbs.models import CategoryRecord
from lightbulbs.operators.base import DatabaseOperator
from lightbulbs.operators.transcoder import Counters, Plain, Transcoder
from lightbulbs.schemas import CategoryFilter

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class CategoryOperator(DatabaseOperator[CategoryRecord, CategoryFilter]):
    entity_name = "category"
    filter_cls = CategoryFilter
    transcoder = Transcoder(
        CategoryRecord,
        {
            "name": Plain("name", nullable=False),
            "description": Plain("description"),
            "statistics": Counters(("total_bulbs",)),
        },
    )

    @classmethod
    def conditions(cls, criteria: CategoryFilter) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if criteria.name is not None:
            conditions.append(CategoryRecord.name.icontains(criteria.name, autoescape=True))
        if criteria.description is not None:
            conditions.append(CategoryRecord.description.icontains(criteria.description, autoescape=True))
        return conditions
