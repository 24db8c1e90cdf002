"""Tests for conversion between domain data and raw records."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from lightbulbs.errors import InvalidDataError, InvalidInputError
from lightbulbs.models import BulbRecord, BulbTagRecord, ReferenceSourceType
from lightbulbs.operators import BulbOperator, CategoryOperator, ReferenceSourceOperator, TagOperator
from lightbulbs.operators.transcoder import parse_id, parse_ref


class TestParsing:
    def test_parse_id(self) -> None:
        key = uuid4()
        assert parse_id(str(key)) == key
        assert parse_id(key) is key

    @pytest.mark.parametrize("value", ["nope", 42, None])
    def test_parse_id_malformed(self, value: object) -> None:
        with pytest.raises(ValueError):
            parse_id(value)

    def test_parse_ref(self) -> None:
        key = uuid4()
        assert parse_ref({"id": str(key)}, "category") == key

    @pytest.mark.parametrize("value", ["plain string", {"name": "x"}, {"id": "nope"}])
    def test_parse_ref_malformed(self, value: object) -> None:
        with pytest.raises(InvalidDataError):
            parse_ref(value, "category")


class TestEncode:
    def test_flattens_statistics(self) -> None:
        raw = CategoryOperator.transcoder.encode(
            {"name": "Hobbies", "description": None, "statistics": {"total_bulbs": 3}}
        )
        assert raw == {"name": "Hobbies", "description": None, "total_bulbs": 3}

    def test_partial_data(self) -> None:
        assert CategoryOperator.transcoder.encode({"description": "x"}) == {"description": "x"}

    def test_storage_managed_fields_are_ignored(self) -> None:
        raw = CategoryOperator.transcoder.encode(
            {"id": str(uuid4()), "created_at": datetime.now(timezone.utc), "name": "Hobbies"}
        )
        assert raw == {"name": "Hobbies"}

    def test_unknown_field(self) -> None:
        with pytest.raises(InvalidDataError, match="colour"):
            CategoryOperator.transcoder.encode({"name": "Hobbies", "colour": "red"})

    def test_unknown_counter(self) -> None:
        with pytest.raises(InvalidDataError):
            CategoryOperator.transcoder.encode({"statistics": {"total_children": 1}})

    def test_required_field_cannot_be_null(self) -> None:
        with pytest.raises(InvalidDataError):
            CategoryOperator.transcoder.encode({"name": None})

    def test_parent_reference(self) -> None:
        parent = uuid4()
        assert TagOperator.transcoder.encode({"parent": {"id": str(parent)}}) == {"parent_id": parent}
        assert TagOperator.transcoder.encode({"parent": None}) == {"parent_id": None}

    def test_choice(self) -> None:
        raw = ReferenceSourceOperator.transcoder.encode({"type": "Web Page"})
        assert raw == {"type": ReferenceSourceType.WEBPAGE}

    def test_invalid_choice(self) -> None:
        with pytest.raises(InvalidInputError):
            ReferenceSourceOperator.transcoder.encode({"type": "Cassette"})


class TestInject:
    def test_applies_partial_data(self) -> None:
        record = CategoryOperator.transcoder.to_raw({"name": "Hobbies", "statistics": {"total_bulbs": 0}})
        CategoryOperator.transcoder.inject({"description": "Weekends", "statistics": {"total_bulbs": 2}}, record)
        assert (record.name, record.description, record.total_bulbs) == ("Hobbies", "Weekends", 2)

    def test_bad_value_leaves_record_untouched(self) -> None:
        record = CategoryOperator.transcoder.to_raw({"name": "Hobbies"})
        with pytest.raises(InvalidDataError):
            CategoryOperator.transcoder.inject({"description": "Weekends", "name": None}, record)
        assert record.name == "Hobbies"
        assert record.description is None


class TestBulbRecord:
    def test_link_rows_keep_order(self) -> None:
        first, second = uuid4(), uuid4()
        record = BulbOperator.transcoder.to_raw(
            {
                "title": "Cave",
                "content": "Shadows",
                "category": {"id": str(uuid4())},
                "tags": [{"id": str(first)}, {"id": str(second)}],
                "references": [],
                "past_versions": [],
            }
        )
        assert isinstance(record, BulbRecord)
        assert all(isinstance(row, BulbTagRecord) for row in record.tags)
        assert [(row.position, row.tag_id) for row in record.tags] == [(0, first), (1, second)]

    def test_reference_needs_source(self) -> None:
        with pytest.raises(InvalidDataError):
            BulbOperator.transcoder.encode({"references": [{"detail": "orphan"}]})

    def test_past_versions_are_stored_as_text(self) -> None:
        archived_at = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        raw = BulbOperator.transcoder.encode(
            {"past_versions": [{"archived_at": archived_at, "content": "Old"}]}
        )
        assert raw == {"past_versions": [{"archived_at": "2024-05-01T12:30:00+00:00", "content": "Old"}]}

    def test_past_versions_need_timestamp(self) -> None:
        with pytest.raises(InvalidDataError):
            BulbOperator.transcoder.encode({"past_versions": [{"content": "Old"}]})


class TestProjection:
    def test_unknown_field(self) -> None:
        with pytest.raises(InvalidInputError):
            TagOperator.transcoder.projection(["colour"])

    def test_id_is_always_loaded(self) -> None:
        options = TagOperator.transcoder.projection(["id"])
        assert len(options) == 1

    def test_relationships_get_a_loader(self) -> None:
        # load_only plus one loader per relationship
        assert len(BulbOperator.transcoder.projection(["title"])) == 3

