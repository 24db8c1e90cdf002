"""Bulb entity."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from lightbulbs.entities.assertions import assert_bulb, check_fields
from lightbulbs.entities.lifecycle import EntityModel, Identifiable, ref_of, require_data
from lightbulbs.errors import DuplicateRelationshipError, MissingRelationshipError
from lightbulbs.models.base import utcnow
from lightbulbs.models.enums import ModelStatus
from lightbulbs.operators import BulbOperator
from lightbulbs.schemas import BulbData

if TYPE_CHECKING:
    from lightbulbs.db import Database

EDITABLE_FIELDS = ("title", "category", "content")


class Bulb(EntityModel[BulbData]):
    """A bulb (note) and its related functionalities.

    Related categories, reference sources and tags are passed in as models and
    stored as their identifiers; they must have been saved or loaded first.

    Usage:
        bulb = Bulb(db).set_data({"title": "...", "content": "...", "category": hobbies})
        bulb.add_reference(republic, detail="Book VII").add_tag(philosophy)
        await bulb.save()
    """

    operator_cls = BulbOperator

    def __init__(self, db: Database, data: Mapping[str, Any] | None = None) -> None:
        """Create a bulb, optionally from a full input.

        A full input may also carry ``references`` as
        ``[{"source": ReferenceSource, "detail": str | None}]`` and ``tags`` as
        a list of ``Tag`` models.
        """
        super().__init__(db)
        if data is None:
            return

        data = dict(data)
        references: Iterable[Mapping[str, Any]] = data.pop("references", [])
        tags: Iterable[Identifiable] = data.pop("tags", [])

        self.set_data(data)
        for reference in references:
            self.add_reference(reference["source"], reference.get("detail"))
        for tag in tags:
            self.add_tag(tag)

    def set_data(self, input: Mapping[str, Any]) -> Bulb:
        """Initialize the data, or merge ``input`` over it.

        ``category`` is given as a model. References, tags and past versions
        have their own methods.
        """
        check_fields(input, EDITABLE_FIELDS, "bulb")

        processed = dict(input)
        if processed.get("category") is not None:
            processed["category"] = ref_of(processed["category"], "category")

        def edit(data: Any, status: ModelStatus) -> Any:
            if data is None:
                assert_bulb(processed)
                return {"references": [], "tags": [], "past_versions": [], **processed}
            return {**data, **processed}

        return self._edit(edit)

    def add_reference(self, source: Identifiable, detail: str | None = None) -> Bulb:
        def edit(data: Any, status: ModelStatus) -> Any:
            data = require_data(data, status, "add a reference to")
            source_ref = ref_of(source, "reference source")

            if any(reference["source"]["id"] == source_ref["id"] for reference in data["references"]):
                raise DuplicateRelationshipError("The reference to add already belongs to the bulb!")

            data["references"].append({"source": source_ref, "detail": detail})
            return data

        return self._edit(edit)

    def remove_reference(self, source: Identifiable) -> Bulb:
        def edit(data: Any, status: ModelStatus) -> Any:
            data = require_data(data, status, "remove a reference from")
            source_ref = ref_of(source, "reference source")

            for index, reference in enumerate(data["references"]):
                if reference["source"]["id"] == source_ref["id"]:
                    del data["references"][index]
                    return data

            raise MissingRelationshipError("The reference to remove does not belong to the bulb!")

        return self._edit(edit)

    def add_tag(self, tag: Identifiable) -> Bulb:
        def edit(data: Any, status: ModelStatus) -> Any:
            data = require_data(data, status, "add a tag to")
            tag_ref = ref_of(tag, "tag")

            if tag_ref in data["tags"]:
                raise DuplicateRelationshipError("The tag to add already belongs to the bulb!")

            data["tags"].append(tag_ref)
            return data

        return self._edit(edit)

    def remove_tag(self, tag: Identifiable) -> Bulb:
        def edit(data: Any, status: ModelStatus) -> Any:
            data = require_data(data, status, "remove a tag from")
            tag_ref = ref_of(tag, "tag")

            if tag_ref not in data["tags"]:
                raise MissingRelationshipError("The tag to remove does not belong to the bulb!")

            data["tags"].remove(tag_ref)
            return data

        return self._edit(edit)

    def archive_current_version(self) -> Bulb:
        """Prepend the current content to the past versions.

        The content itself is left as is; change it with ``set_data``.
        """

        def edit(data: Any, status: ModelStatus) -> Any:
            data = require_data(data, status, "archive content of")
            data["past_versions"].insert(0, {"archived_at": utcnow(), "content": data["content"]})
            return data

        return self._edit(edit)
