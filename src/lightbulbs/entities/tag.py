"""Tag entity."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from lightbulbs.entities.assertions import assert_tag, check_fields
from lightbulbs.entities.lifecycle import EntityModel, Identifiable, ref_of, require_data
from lightbulbs.entities.statistics import decrement, increment
from lightbulbs.errors import MissingRelationshipError
from lightbulbs.models.enums import ModelStatus
from lightbulbs.operators import TagOperator
from lightbulbs.schemas import TagData

if TYPE_CHECKING:
    from lightbulbs.db import Database

EDITABLE_FIELDS = ("label", "description")


class Tag(EntityModel[TagData]):
    """A tag and its related functionalities.

    Tags form a forest: ``link_to`` attaches a tag under a parent. Only direct
    self-links are rejected; longer cycles are not detected.
    """

    operator_cls = TagOperator

    def __init__(self, db: Database, data: Mapping[str, Any] | None = None) -> None:
        super().__init__(db)
        if data is not None:
            self.set_data(data)

    def set_data(self, input: Mapping[str, Any]) -> Tag:
        """Initialize the data, or merge ``input`` over it. Use ``link_to`` for the parent."""
        check_fields(input, EDITABLE_FIELDS, "tag")

        def edit(data: Any, status: ModelStatus) -> Any:
            if data is None:
                assert_tag(input)
                return {
                    "parent": None,
                    "description": None,
                    **input,
                    "statistics": {"total_bulbs": 0, "total_children": 0},
                }
            return {**data, **input}

        return self._edit(edit)

    def link_to(self, parent: Identifiable | None) -> Tag:
        """Make this tag a child of ``parent``, or a root when ``parent`` is None."""

        def edit(data: Any, status: ModelStatus) -> Any:
            data = require_data(data, status, "link tag with")

            if parent is None:
                data["parent"] = None
                return data

            if parent is self:
                raise MissingRelationshipError("Cannot link a tag with itself!")
            parent_ref = ref_of(parent, "tag referenced as parent")
            if parent_ref["id"] == data.get("id"):
                raise MissingRelationshipError("Cannot link a tag with itself!")

            data["parent"] = parent_ref
            return data

        return self._edit(edit)

    def increase_total_bulbs(self) -> Tag:
        return self._edit(increment("total_bulbs"))

    def decrease_total_bulbs(self) -> Tag:
        return self._edit(decrement("total_bulbs"))

    def increase_total_children(self) -> Tag:
        return self._edit(increment("total_children"))

    def decrease_total_children(self) -> Tag:
        return self._edit(decrement("total_children"))
