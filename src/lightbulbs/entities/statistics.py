"""Edit functions for the denormalized ``statistics`` counters.

Counters are only maintained by explicit calls; saving the related entity and
the counter owner are separate writes.
"""

from __future__ import annotations

from typing import Any

from lightbulbs.entities.lifecycle import Edit, require_data
from lightbulbs.errors import PreconditionError
from lightbulbs.models.enums import ModelStatus


def _label(counter: str) -> str:
    return counter.replace("_", " ")


def increment(counter: str) -> Edit:
    def edit(data: Any, status: ModelStatus) -> Any:
        data = require_data(data, status, f"increase {_label(counter)} of")
        data["statistics"][counter] += 1
        return data

    return edit


def decrement(counter: str) -> Edit:
    def edit(data: Any, status: ModelStatus) -> Any:
        data = require_data(data, status, f"decrease {_label(counter)} of")
        if data["statistics"][counter] <= 0:
            raise PreconditionError(f"Invalid operation: {_label(counter)} has already reached 0")
        data["statistics"][counter] -= 1
        return data

    return edit
