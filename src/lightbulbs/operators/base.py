"""Database operator contract.

An operator is bound to exactly one persisted record and mediates every read
and write of it. Every I/O call opens its own session, so the record an
operator holds is never shared with another operator; between calls it is a
detached ORM instance.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Self, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from lightbulbs.errors import (
    ConcurrencyConflictError,
    InvalidDataError,
    InvalidInputError,
    LightbulbsError,
    NotFoundError,
    UniquenessConflictError,
    UnsupportedOperationError,
)
from lightbulbs.models import Base, utcnow
from lightbulbs.operators.transcoder import Transcoder, parse_id

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from lightbulbs.db import Database

RecordT = TypeVar("RecordT", bound=Base)
FilterT = TypeVar("FilterT", bound=BaseModel)
OperatorT = TypeVar("OperatorT", bound="DatabaseOperator[Any, Any]")

logger = logging.getLogger(__name__)

# SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION
    # SQLite reports no SQLSTATE
    return "UNIQUE constraint failed" in str(exc.orig)


def _integrity_error(exc: IntegrityError, entity_name: str, **metadata: Any) -> LightbulbsError:
    """Map a constraint failure to a uniqueness conflict or invalid data."""
    if _is_unique_violation(exc):
        return UniquenessConflictError(f"The {entity_name} conflicts with an existing record!", **metadata)
    return InvalidDataError(f"The {entity_name} violates a storage constraint: {exc.orig}", **metadata)


class DatabaseOperator(Generic[RecordT, FilterT]):
    """Operator for one record of one entity type.

    Subclasses declare the ``transcoder`` and ``filter_cls`` and translate a
    filter into SQL conditions in ``conditions``.
    """

    entity_name: ClassVar[str]
    transcoder: ClassVar[Transcoder[Any]]
    filter_cls: ClassVar[type[BaseModel]]

    def __init__(self, db: Database, record: RecordT) -> None:
        self._db = db
        self._record = record
        # Kept apart from the record so a failed flush cannot hide it
        self._id = str(record.id)  # type: ignore[attr-defined]

    def get_id(self) -> str:
        """Storage-assigned identifier of the bound record."""
        return self._id

    def get_data(self) -> dict[str, Any]:
        """Domain-shaped snapshot of the bound record."""
        return self.transcoder.extract(self._record)

    async def refresh(self) -> None:
        """Re-fetch the bound record, keeping this operator's identity."""
        self._record = await self._load_record(self._db, self._id)
        logger.debug("Refreshed %s %s", self.entity_name, self._id)

    async def update(self, *, data: Mapping[str, Any]) -> None:
        """Apply a partial update to the bound record and persist it.

        Raises:
            InvalidDataError: ``data`` holds a field outside the declared shape.
            UniquenessConflictError: A unique field collides with another record.
            InvalidDataError: The data violates another storage constraint.
            ConcurrencyConflictError: The record changed since it was last read.
        """
        raw = self.transcoder.encode(data)
        record_cls = self.transcoder.record_cls

        async with self._db.session() as session:
            record = await session.get(record_cls, parse_id(self._id))
            if record is None:
                raise NotFoundError(f"The {self.entity_name} {self._id!r} is not found!", id=self._id)
            # Compare-and-swap on the version token; the flush re-checks it
            if record.version != self._record.version:  # type: ignore[attr-defined]
                raise ConcurrencyConflictError(
                    f"The {self.entity_name} was modified by another writer!", id=self._id
                )

            for attribute, value in raw.items():
                setattr(record, attribute, value)
            record.updated_at = utcnow()  # type: ignore[attr-defined]

            try:
                await session.commit()
            except StaleDataError as exc:
                raise ConcurrencyConflictError(
                    f"The {self.entity_name} was modified by another writer!", id=self._id
                ) from exc
            except IntegrityError as exc:
                raise _integrity_error(exc, self.entity_name, id=self._id) from exc

        # The held record is only replaced once the write has succeeded
        self._record = record
        logger.debug("Updated %s %s", self.entity_name, self._id)

    async def delete(self) -> None:
        """Delete the bound record.

        Raises:
            UnsupportedOperationError: Always; soft vs. hard deletion is undecided.
        """
        raise UnsupportedOperationError(f"Deleting a {self.entity_name} is not implemented!")

    @classmethod
    async def create(cls, db: Database, *, data: Mapping[str, Any]) -> Self:
        """Insert a new record and return an operator bound to it.

        Raises:
            InvalidDataError: ``data`` holds a field outside the declared shape.
            UniquenessConflictError: A unique field collides with an existing record.
            InvalidDataError: The data violates another storage constraint.
        """
        record = cls.transcoder.to_raw(data)
        # Populate every column up front; the record is used detached afterwards
        now = utcnow()
        record.id = uuid4()  # type: ignore[attr-defined]
        record.created_at = now  # type: ignore[attr-defined]
        record.updated_at = now  # type: ignore[attr-defined]
        if "deleted_at" not in data:
            record.deleted_at = None  # type: ignore[attr-defined]

        async with db.session() as session:
            session.add(record)
            try:
                await session.commit()
            except IntegrityError as exc:
                raise _integrity_error(exc, cls.entity_name) from exc

        operator = cls(db, record)
        logger.debug("Created %s %s", cls.entity_name, operator.get_id())
        return operator

    @classmethod
    async def retrieve_one(cls, db: Database, *, id: str) -> Self:
        """Fetch a record by identifier and return an operator bound to it.

        Raises:
            NotFoundError: No record has this identifier.
        """
        return cls(db, await cls._load_record(db, id))

    @classmethod
    async def find_all(
        cls,
        db: Database,
        *,
        filter: BaseModel | Mapping[str, Any] | None = None,
        fields: Sequence[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Find all records matching ``filter``, reduced to ``fields``.

        Filter entries combine with AND; an absent filter matches everything.
        The identifier is always returned.

        Raises:
            InvalidInputError: Unknown filter key or field, or malformed filter value.
        """
        record_cls = cls.transcoder.record_cls
        stmt = select(record_cls).order_by(record_cls.created_at, record_cls.id)

        if filter is not None:
            stmt = stmt.where(*cls.conditions(cls._parse_filter(filter)))
        if fields is not None:
            stmt = stmt.options(*cls.transcoder.projection(fields))

        async with db.session() as session:
            records = (await session.scalars(stmt)).all()

        logger.debug("Found %d %s records", len(records), cls.entity_name)
        return [cls.transcoder.extract(record) for record in records]

    @classmethod
    def conditions(cls, criteria: Any) -> list[ColumnElement[bool]]:
        """Translate a parsed filter into SQL conditions."""
        raise NotImplementedError

    @classmethod
    def _parse_filter(cls, filter: BaseModel | Mapping[str, Any]) -> BaseModel:
        if isinstance(filter, cls.filter_cls):
            return filter
        if isinstance(filter, BaseModel):
            filter = filter.model_dump(exclude_unset=True)
        try:
            return cls.filter_cls.model_validate(filter)
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid {cls.entity_name} filter: {exc.errors()}") from exc

    @classmethod
    async def _load_record(cls, db: Database, id: str) -> Any:
        try:
            key = parse_id(id)
        except ValueError:
            raise NotFoundError(f"The {cls.entity_name} {id!r} is not found!", id=id) from None

        async with db.session() as session:
            record = await session.get(cls.transcoder.record_cls, key)

        if record is None:
            raise NotFoundError(f"The {cls.entity_name} {id!r} is not found!", id=id)
        return record


class OperatorFactory(Generic[OperatorT]):
    """An operator class bound to a database context.

    This is what entity models receive: it creates and retrieves operators
    without the model knowing which database it talks to.
    """

    def __init__(self, operator_cls: type[OperatorT], db: Database) -> None:
        self.operator_cls = operator_cls
        self.db = db

    async def create(self, data: Mapping[str, Any]) -> OperatorT:
        return await self.operator_cls.create(self.db, data=data)

    async def retrieve_one(self, id: str) -> OperatorT:
        return await self.operator_cls.retrieve_one(self.db, id=id)

    async def find_all(
        self,
        *,
        filter: BaseModel | Mapping[str, Any] | None = None,
        fields: Sequence[str] | None = None,
    ) -> list[dict[str, Any]]:
        return await self.operator_cls.find_all(self.db, filter=filter, fields=fields)
