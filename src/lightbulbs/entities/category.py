"""Category entity."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from lightbulbs.entities.assertions import assert_category, check_fields
from lightbulbs.entities.lifecycle import EntityModel
from lightbulbs.entities.statistics import decrement, increment
from lightbulbs.models.enums import ModelStatus
from lightbulbs.operators import CategoryOperator
from lightbulbs.schemas import CategoryData

if TYPE_CHECKING:
    from lightbulbs.db import Database

EDITABLE_FIELDS = ("name", "description")


class Category(EntityModel[CategoryData]):
    """A category and its related functionalities.

    Changes stay in memory until ``save()`` is awaited.
    """

    operator_cls = CategoryOperator

    def __init__(self, db: Database, data: Mapping[str, Any] | None = None) -> None:
        super().__init__(db)
        if data is not None:
            self.set_data(data)

    def set_data(self, input: Mapping[str, Any]) -> Category:
        """Initialize the data, or merge ``input`` over the existing data."""
        check_fields(input, EDITABLE_FIELDS, "category")

        def edit(data: Any, status: ModelStatus) -> Any:
            if data is None:
                assert_category(input)
                return {"description": None, **input, "statistics": {"total_bulbs": 0}}
            return {**data, **input}

        return self._edit(edit)

    def increase_total_bulbs(self) -> Category:
        return self._edit(increment("total_bulbs"))

    def decrease_total_bulbs(self) -> Category:
        return self._edit(decrement("total_bulbs"))
