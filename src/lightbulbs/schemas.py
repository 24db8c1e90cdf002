"""Domain data shapes and search filters.

Entity data travels as plain dicts so it can be shallow-merged and compared
field for field; the TypedDicts below document the shapes. Cross-entity
references are always ``{"id": str}``, never embedded data.

Filters are pydantic models. ``find_all`` accepts either a model or a plain
dict; unknown keys are rejected.
"""

from __future__ import annotations

from datetime import datetime
from typing import TypedDict
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from lightbulbs.models.enums import ReferenceSourceType, ReferenceType


class EntityRef(TypedDict):
    id: str


class EntityData(TypedDict, total=False):
    """Storage-maintained fields common to every entity."""

    id: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


class ContextStatistics(TypedDict):
    total_bulbs: int


class HierarchyStatistics(TypedDict):
    total_bulbs: int
    total_children: int


class CategoryData(EntityData):
    name: str
    description: str | None
    statistics: ContextStatistics


class TagData(EntityData):
    label: str
    parent: EntityRef | None
    description: str | None
    statistics: HierarchyStatistics


class ReferenceSourceData(EntityData):
    name: str
    type: ReferenceSourceType
    locator: str | None
    image_url: str | None
    description: str | None
    statistics: ContextStatistics


class ReferenceData(EntityData):
    name: str
    type: ReferenceType
    locator: str | None
    image_url: str | None
    description: str | None
    statistics: ContextStatistics


class BulbReference(TypedDict):
    source: EntityRef
    detail: str | None


class PastVersion(TypedDict):
    archived_at: datetime
    content: str


class BulbData(EntityData):
    title: str
    category: EntityRef
    content: str
    references: list[BulbReference]
    tags: list[EntityRef]
    past_versions: list[PastVersion]


class _Filter(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class CategoryFilter(_Filter):
    """String fields match case-insensitive substrings."""

    name: str | None = None
    description: str | None = None


class TagFilter(_Filter):
    label: str | None = None
    parent: UUID | None = None
    description: str | None = None


class ReferenceSourceFilter(_Filter):
    name: str | None = None
    type: ReferenceSourceType | None = None
    locator: str | None = None
    description: str | None = None


class ReferenceFilter(_Filter):
    name: str | None = None
    type: ReferenceType | None = None
    locator: str | None = None
    description: str | None = None


class BulbFilter(_Filter):
    """Id lists match bulbs linked to any of the given records."""

    title: str | None = None
    content: str | None = None
    categories: list[UUID] | None = None
    references: list[UUID] | None = None
    tags: list[UUID] | None = None
