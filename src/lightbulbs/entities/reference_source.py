"""Reference source and reference entities."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from lightbulbs.entities.assertions import assert_reference, assert_reference_source, check_fields
from lightbulbs.entities.lifecycle import EntityModel
from lightbulbs.entities.statistics import decrement, increment
from lightbulbs.models.enums import ModelStatus
from lightbulbs.operators import ReferenceOperator, ReferenceSourceOperator
from lightbulbs.schemas import ReferenceData, ReferenceSourceData

if TYPE_CHECKING:
    from lightbulbs.db import Database

EDITABLE_FIELDS = ("name", "type", "locator", "image_url", "description")

DEFAULT_ATTRIBUTES = {"locator": None, "image_url": None, "description": None}


class ReferenceSource(EntityModel[ReferenceSourceData]):
    """Where a bulb's idea came from."""

    operator_cls = ReferenceSourceOperator

    def __init__(self, db: Database, data: Mapping[str, Any] | None = None) -> None:
        super().__init__(db)
        if data is not None:
            self.set_data(data)

    def set_data(self, input: Mapping[str, Any]) -> ReferenceSource:
        """Initialize the data, or merge ``input`` over the existing data."""
        check_fields(input, EDITABLE_FIELDS, "reference source")

        def edit(data: Any, status: ModelStatus) -> Any:
            if data is None:
                assert_reference_source(input)
                return {**DEFAULT_ATTRIBUTES, **input, "statistics": {"total_bulbs": 0}}
            return {**data, **input}

        return self._edit(edit)

    def increase_total_bulbs(self) -> ReferenceSource:
        return self._edit(increment("total_bulbs"))

    def decrease_total_bulbs(self) -> ReferenceSource:
        return self._edit(decrement("total_bulbs"))


class Reference(EntityModel[ReferenceData]):
    """A reference. Same shape as a reference source, stored separately."""

    operator_cls = ReferenceOperator

    def __init__(self, db: Database, data: Mapping[str, Any] | None = None) -> None:
        super().__init__(db)
        if data is not None:
            self.set_data(data)

    def set_data(self, input: Mapping[str, Any]) -> Reference:
        check_fields(input, EDITABLE_FIELDS, "reference")

        def edit(data: Any, status: ModelStatus) -> Any:
            if data is None:
                assert_reference(input)
                return {**DEFAULT_ATTRIBUTES, **input, "statistics": {"total_bulbs": 0}}
            return {**data, **input}

        return self._edit(edit)

    def increase_total_bulbs(self) -> Reference:
        return self._edit(increment("total_bulbs"))

    def decrease_total_bulbs(self) -> Reference:
        return self._edit(decrement("total_bulbs"))
