"""Operator for bulbs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from lightbulbs.errors import InvalidDataError
from lightbulbs.models import BulbRecord, BulbReferenceRecord, BulbTagRecord
from lightbulbs.operators.base import DatabaseOperator
from lightbulbs.operators.transcoder import (
    FieldCodec,
    LinkRows,
    Plain,
    Ref,
    Transcoder,
    format_ref,
    parse_ref,
)
from lightbulbs.schemas import BulbFilter

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


def _reference_to_row(name: str, position: int, item: Any) -> BulbReferenceRecord:
    if not isinstance(item, Mapping) or "source" not in item:
        raise InvalidDataError(f"Each entry of '{name}' must have a source!")
    return BulbReferenceRecord(
        position=position,
        source_id=parse_ref(item["source"], f"{name}.source"),
        detail=item.get("detail"),
    )


def _reference_from_row(row: BulbReferenceRecord) -> dict[str, Any]:
    return {"source": format_ref(row.source_id), "detail": row.detail}


def _tag_to_row(name: str, position: int, item: Any) -> BulbTagRecord:
    return BulbTagRecord(position=position, tag_id=parse_ref(item, name))


def _tag_from_row(row: BulbTagRecord) -> dict[str, str]:
    return format_ref(row.tag_id)


@dataclass
class PastVersions(FieldCodec):
    """Archived contents kept in a JSON column with ISO-8601 timestamps."""

    column: str

    def __post_init__(self) -> None:
        self.columns = (self.column,)

    def encode(self, name: str, value: Any) -> dict[str, Any]:
        if not isinstance(value, list):
            raise InvalidDataError(f"The field '{name}' must be a list!")
        versions = []
        for item in value:
            if not isinstance(item, Mapping) or not isinstance(item.get("archived_at"), datetime):
                raise InvalidDataError(f"Each entry of '{name}' needs an archived_at timestamp!")
            versions.append({"archived_at": item["archived_at"].isoformat(), "content": item["content"]})
        return {self.column: versions}

    def decode(self, record: Any) -> Any:
        return [
            {"archived_at": datetime.fromisoformat(item["archived_at"]), "content": item["content"]}
            for item in getattr(record, self.column)
        ]


class BulbOperator(DatabaseOperator[BulbRecord, BulbFilter]):
    entity_name = "bulb"
    filter_cls = BulbFilter
    transcoder = Transcoder(
        BulbRecord,
        {
            "title": Plain("title", nullable=False),
            "category": Ref("category_id"),
            "content": Plain("content", nullable=False),
            "references": LinkRows("references", _reference_to_row, _reference_from_row),
            "tags": LinkRows("tags", _tag_to_row, _tag_from_row),
            "past_versions": PastVersions("past_versions"),
        },
    )

    @classmethod
    def conditions(cls, criteria: BulbFilter) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if criteria.title is not None:
            conditions.append(BulbRecord.title.icontains(criteria.title, autoescape=True))
        if criteria.content is not None:
            conditions.append(BulbRecord.content.icontains(criteria.content, autoescape=True))
        if criteria.categories is not None:
            conditions.append(BulbRecord.category_id.in_(criteria.categories))
        if criteria.references is not None:
            conditions.append(BulbRecord.references.any(BulbReferenceRecord.source_id.in_(criteria.references)))
        if criteria.tags is not None:
            conditions.append(BulbRecord.tags.any(BulbTagRecord.tag_id.in_(criteria.tags)))
        return conditions
