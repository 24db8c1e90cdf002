"""Tests for ``find_all`` filters and field projections."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import pytest

from lightbulbs.db import Database
from lightbulbs.errors import InvalidInputError
from lightbulbs.operators import BulbOperator, CategoryOperator, TagOperator
from lightbulbs.schemas import BulbFilter, CategoryFilter

if TYPE_CHECKING:
    from conftest import MakeBulb, MakeCategory, MakeTag


class TestStringFilters:
    async def test_case_insensitive_substring(self, db: Database, make_bulb: MakeBulb) -> None:
        await make_bulb(title="Mozart's Requiem", content="Unfinished mass")
        await make_bulb(title="Notes on MOZART", content="Operas")
        await make_bulb(title="Bach fugues", content="Counterpoint")

        bulbs = await BulbOperator.find_all(db, filter={"title": "mozart"})
        assert [bulb["title"] for bulb in bulbs] == ["Mozart's Requiem", "Notes on MOZART"]

    async def test_wildcards_are_literal(self, db: Database, make_category: MakeCategory) -> None:
        await make_category(name="100% pure")
        await make_category(name="1000 words")

        categories = await CategoryOperator.find_all(db, filter={"name": "0%"})
        assert [category["name"] for category in categories] == ["100% pure"]

    async def test_filters_combine_with_and(self, db: Database, make_bulb: MakeBulb) -> None:
        await make_bulb(title="Mozart's Requiem", content="Unfinished mass")
        await make_bulb(title="Mozart's letters", content="Correspondence")

        bulbs = await BulbOperator.find_all(db, filter={"title": "mozart", "content": "mass"})
        assert [bulb["title"] for bulb in bulbs] == ["Mozart's Requiem"]

    async def test_no_filter_matches_everything(self, db: Database, make_category: MakeCategory) -> None:
        await make_category(name="A")
        await make_category(name="B")

        assert len(await CategoryOperator.find_all(db)) == 2
        assert len(await CategoryOperator.find_all(db, filter={})) == 2

    async def test_filter_model(self, db: Database, make_category: MakeCategory) -> None:
        await make_category(name="Hobbies", description="Free time")
        await make_category(name="Work")

        categories = await CategoryOperator.find_all(db, filter=CategoryFilter(description="free"))
        assert [category["name"] for category in categories] == ["Hobbies"]


class TestRelationshipFilters:
    async def test_by_category(
        self, db: Database, make_bulb: MakeBulb, make_category: MakeCategory
    ) -> None:
        music = await make_category(name="Music")
        await make_bulb(title="Requiem", category=music)
        await make_bulb(title="Cave")

        bulbs = await BulbOperator.find_all(db, filter=BulbFilter(categories=[UUID(music.get_id())]))
        assert [bulb["title"] for bulb in bulbs] == ["Requiem"]

    async def test_by_any_tag(self, db: Database, make_bulb: MakeBulb, make_tag: MakeTag) -> None:
        ethics = await make_tag(label="ethics")
        logic = await make_tag(label="logic")
        unused = await make_tag(label="unused")

        first = await make_bulb(title="Cave")
        first.add_tag(ethics)
        await first.save()
        second = await make_bulb(title="Syllogism")
        second.add_tag(logic).add_tag(ethics)
        await second.save()
        await make_bulb(title="Untagged")

        bulbs = await BulbOperator.find_all(db, filter={"tags": [ethics.get_id(), logic.get_id()]})
        assert [bulb["title"] for bulb in bulbs] == ["Cave", "Syllogism"]

        assert await BulbOperator.find_all(db, filter={"tags": [unused.get_id()]}) == []

    async def test_tag_parent(self, db: Database, make_tag: MakeTag) -> None:
        parent = await make_tag(label="philosophy")
        child = await make_tag(label="ethics")
        child.link_to(parent)
        await child.save()

        assert [tag["label"] for tag in await TagOperator.find_all(db, filter={"parent": parent.get_id()})] == [
            "ethics"
        ]


class TestInvalidFilters:
    async def test_unknown_key(self, db: Database) -> None:
        with pytest.raises(InvalidInputError):
            await CategoryOperator.find_all(db, filter={"colour": "red"})

    async def test_malformed_id(self, db: Database) -> None:
        with pytest.raises(InvalidInputError):
            await BulbOperator.find_all(db, filter={"tags": ["not-an-id"]})

    async def test_unknown_field(self, db: Database) -> None:
        with pytest.raises(InvalidInputError):
            await CategoryOperator.find_all(db, fields=["colour"])


class TestProjection:
    async def test_title_only(self, db: Database, make_bulb: MakeBulb) -> None:
        bulb = await make_bulb(title="Cave")

        assert await BulbOperator.find_all(db, fields=["title"]) == [{"id": bulb.get_id(), "title": "Cave"}]

    async def test_nested_counters(self, db: Database, make_category: MakeCategory) -> None:
        category = await make_category(name="Hobbies")

        assert await CategoryOperator.find_all(db, fields=["id", "statistics"]) == [
            {"id": category.get_id(), "statistics": {"total_bulbs": 0}}
        ]

    async def test_relationship_field(self, db: Database, make_bulb: MakeBulb, make_tag: MakeTag) -> None:
        tag = await make_tag()
        bulb = await make_bulb()
        bulb.add_tag(tag)
        await bulb.save()

        result = await BulbOperator.find_all(db, fields=["category", "tags"])
        data = bulb.get_data()
        assert data is not None
        assert result == [{"id": bulb.get_id(), "category": data["category"], "tags": [{"id": tag.get_id()}]}]
