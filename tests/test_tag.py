"""Tests for tags and the tag hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from lightbulbs.db import Database
from lightbulbs.entities import ModelStatus, Tag
from lightbulbs.errors import IncompleteDataError, MissingRelationshipError, PreconditionError
from lightbulbs.operators import TagOperator

if TYPE_CHECKING:
    from conftest import MakeTag


class TestTagData:
    async def test_defaults(self, db: Database) -> None:
        tag = Tag(db, {"label": "ethics"})
        assert tag.get_data() == {
            "label": "ethics",
            "parent": None,
            "description": None,
            "statistics": {"total_bulbs": 0, "total_children": 0},
        }

    async def test_label_required(self, db: Database) -> None:
        with pytest.raises(IncompleteDataError):
            Tag(db, {"description": "unlabeled"})


class TestLinkTo:
    """Building the tag forest."""

    async def test_link_to_parent(self, db: Database, make_tag: MakeTag) -> None:
        parent = await make_tag(label="philosophy")
        child = await make_tag(label="ethics")

        child.link_to(parent)
        parent.increase_total_children()
        await child.save()
        await parent.save()

        child_data = child.get_data()
        assert child_data is not None
        assert child_data["parent"] == {"id": parent.get_id()}

        children = await TagOperator.find_all(db, filter={"parent": parent.get_id()})
        assert [tag["label"] for tag in children] == ["ethics"]

        stored_parent = Tag(db)
        await stored_parent.load(parent.get_id() or "")
        parent_data = stored_parent.get_data()
        assert parent_data is not None
        assert parent_data["statistics"]["total_children"] == 1

    async def test_unlink(self, make_tag: MakeTag) -> None:
        parent = await make_tag(label="philosophy")
        child = await make_tag(label="ethics")
        child.link_to(parent)
        await child.save()

        child.link_to(None)
        await child.save()
        await child.reload()

        data = child.get_data()
        assert data is not None
        assert data["parent"] is None

    async def test_link_to_itself(self, make_tag: MakeTag) -> None:
        tag = await make_tag()
        with pytest.raises(MissingRelationshipError, match="Cannot link a tag with itself!"):
            tag.link_to(tag)
        assert tag.get_status() is ModelStatus.PRISTINE

    async def test_link_to_another_model_of_itself(self, db: Database, make_tag: MakeTag) -> None:
        tag = await make_tag()
        same = Tag(db)
        await same.load(tag.get_id() or "")

        with pytest.raises(MissingRelationshipError, match="Cannot link a tag with itself!"):
            tag.link_to(same)

    async def test_link_to_unsaved_parent(self, db: Database, make_tag: MakeTag) -> None:
        tag = await make_tag()
        with pytest.raises(MissingRelationshipError):
            tag.link_to(Tag(db, {"label": "draft"}))

    async def test_link_on_empty_model(self, db: Database) -> None:
        with pytest.raises(PreconditionError):
            Tag(db).link_to(None)


class TestCounters:
    async def test_children_counter_floor(self, make_tag: MakeTag) -> None:
        tag = await make_tag()
        with pytest.raises(PreconditionError, match="total children has already reached 0"):
            tag.decrease_total_children()

    async def test_bulb_counter(self, make_tag: MakeTag) -> None:
        tag = await make_tag()
        tag.increase_total_bulbs()
        await tag.save()
        await tag.reload()

        data = tag.get_data()
        assert data is not None
        assert data["statistics"] == {"total_bulbs": 1, "total_children": 0}
