"""Tri-state entity lifecycle.

``EntityLifecycle`` is the generic state machine shared by every entity. It
knows nothing about a concrete entity type: it is handed an operator factory
and a stream of edit functions. ``EntityModel`` is the small surface each
concrete entity exposes on top of it.

Transitions:
    EMPTY -> DIRTY            first edit
    DIRTY -> PRISTINE         successful save
    any   -> PRISTINE         successful load / reload
    any   -> EMPTY            clear
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Protocol, Self, TypeVar, runtime_checkable

from lightbulbs.errors import MissingRelationshipError, PreconditionError
from lightbulbs.models.enums import ModelStatus

if TYPE_CHECKING:
    from lightbulbs.db import Database
    from lightbulbs.operators.base import DatabaseOperator

DataT = TypeVar("DataT", bound=Mapping[str, Any])

Edit = Callable[[Any, ModelStatus], Any]

# Fields written by storage and copied back into the model after a save
SYNCED_FIELDS = ("id", "created_at", "updated_at", "deleted_at")


@runtime_checkable
class Identifiable(Protocol):
    """Anything that may have been persisted: exposes its identifier or None."""

    def get_id(self) -> str | None: ...


class BoundOperator(Protocol):
    def get_id(self) -> str: ...

    def get_data(self) -> dict[str, Any]: ...

    async def refresh(self) -> None: ...

    async def update(self, *, data: Mapping[str, Any]) -> None: ...


class OperatorSource(Protocol):
    async def create(self, data: Mapping[str, Any]) -> BoundOperator: ...

    async def retrieve_one(self, id: str) -> BoundOperator: ...


def require_data(data: Any, status: ModelStatus, action: str) -> Any:
    """Reject an edit on a model holding no data."""
    if data is None or status is ModelStatus.EMPTY:
        raise PreconditionError(f"Cannot {action} empty data!")
    return data


def ref_of(entity: Identifiable, role: str) -> dict[str, str]:
    """Narrow a related model to its reference.

    Raises:
        MissingRelationshipError: The related model was never persisted.
    """
    entity_id = entity.get_id()
    if entity_id is None:
        raise MissingRelationshipError(f"The {role} does not exist in database!")
    return {"id": entity_id}


class EntityLifecycle(Generic[DataT]):
    """State machine guarding edits and persistence of one entity."""

    def __init__(self, operators: OperatorSource) -> None:
        self._operators = operators
        self._data: DataT | None = None
        self._status = ModelStatus.EMPTY
        self._operator: BoundOperator | None = None

    def get_data(self) -> DataT | None:
        return self._data

    def get_status(self) -> ModelStatus:
        return self._status

    def get_id(self) -> str | None:
        """Identifier of the bound record; None until first saved or loaded."""
        return self._operator.get_id() if self._operator else None

    def clear(self) -> None:
        self._operator = None
        self._data = None
        self._status = ModelStatus.EMPTY

    def perform_edit(self, edit: Edit) -> None:
        """Replace the data with ``edit(data, status)`` and mark it DIRTY.

        The edit works on a copy, so an edit that raises leaves the model
        untouched. Preconditions are the edit's own business: some edits
        (initial ``set_data``) are legal on an EMPTY model.
        """
        self._data = edit(copy.deepcopy(self._data), self._status)
        self._status = ModelStatus.DIRTY

    async def save(self) -> None:
        """Insert or update the record, then mark the data PRISTINE.

        Storage errors propagate as is and leave status and binding unchanged.
        """
        if self._data is None or self._status is ModelStatus.EMPTY:
            raise PreconditionError("Cannot perform save with empty data!")

        if self._operator is None:
            operator = await self._operators.create(self._data)
            self._operator = operator
        else:
            operator = self._operator
            await operator.update(data=self._data)

        snapshot = operator.get_data()
        data = dict(self._data)
        for name in SYNCED_FIELDS:
            if name in snapshot:
                data[name] = snapshot[name]
        self._data = data  # type: ignore[assignment]
        self._status = ModelStatus.PRISTINE

    async def load(self, id: str) -> None:
        """Replace the data with the stored record ``id``.

        Re-loading the bound record refreshes the existing operator instead
        of building a new one.
        """
        if self._operator is not None and self._operator.get_id() == id:
            await self._operator.refresh()
        else:
            self._operator = await self._operators.retrieve_one(id)

        self._data = self._operator.get_data()  # type: ignore[assignment]
        self._status = ModelStatus.PRISTINE

    async def reload(self) -> None:
        if self._operator is None:
            raise PreconditionError("Cannot reload: data has never been loaded previously!")
        await self.load(self._operator.get_id())


class EntityModel(Generic[DataT]):
    """Common surface of every entity model.

    A concrete entity names its operator class; the lifecycle is built from
    that class bound to the given database context.
    """

    operator_cls: ClassVar[type[DatabaseOperator[Any, Any]]]

    def __init__(self, db: Database) -> None:
        self._lifecycle: EntityLifecycle[DataT] = EntityLifecycle(db.operators(self.operator_cls))

    def get_data(self) -> DataT | None:
        return self._lifecycle.get_data()

    def get_status(self) -> ModelStatus:
        return self._lifecycle.get_status()

    def get_id(self) -> str | None:
        return self._lifecycle.get_id()

    def clear(self) -> Self:
        self._lifecycle.clear()
        return self

    async def save(self) -> None:
        await self._lifecycle.save()

    async def load(self, id: str) -> None:
        await self._lifecycle.load(id)

    async def reload(self) -> None:
        await self._lifecycle.reload()

    def _edit(self, edit: Edit) -> Self:
        self._lifecycle.perform_edit(edit)
        return self

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.get_id()} status={self.get_status().value}>"
