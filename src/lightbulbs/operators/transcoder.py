"""Conversion between domain-shaped data and raw ORM records.

Domain data refers to related records as ``{"id": str}`` and nests counters
under ``statistics``; raw records hold ``Uuid`` foreign keys, ordered link
rows and flat counter columns. Each entity declares one ``FieldCodec`` per
domain field and a ``Transcoder`` drives them:

- ``encode`` turns a partial domain dict into raw attribute assignments
  without touching any record, so a bad value never leaves a half-applied
  update behind.
- ``extract`` reads a record back, skipping fields whose raw attributes were
  not loaded (narrowed projections).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import inspect
from sqlalchemy.orm import lazyload, load_only, selectinload

from lightbulbs.errors import InvalidDataError, InvalidInputError
from lightbulbs.models import Base

if TYPE_CHECKING:
    from sqlalchemy.orm.interfaces import LoaderOption

RecordT = TypeVar("RecordT", bound=Base)

# Written by storage only; ignored when injecting domain data
STORAGE_MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})


def parse_id(value: Any) -> UUID:
    """Parse a record identifier. Raises ``ValueError`` if malformed."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid record identifier: {value!r}")
    return UUID(value)


def parse_ref(value: Any, field_name: str) -> UUID:
    """Parse a ``{"id": str}`` reference into its key."""
    if not isinstance(value, Mapping) or "id" not in value:
        raise InvalidDataError(f"The field '{field_name}' must be a reference object with an id!")
    try:
        return parse_id(value["id"])
    except ValueError as exc:
        raise InvalidDataError(f"The field '{field_name}' refers to an invalid identifier!") from exc


def format_ref(key: UUID) -> dict[str, str]:
    return {"id": str(key)}


class FieldCodec:
    """Maps one domain field onto one or more raw attributes."""

    columns: tuple[str, ...] = ()
    relationships: tuple[str, ...] = ()

    @property
    def attributes(self) -> tuple[str, ...]:
        return self.columns + self.relationships

    def encode(self, name: str, value: Any) -> dict[str, Any]:
        raise NotImplementedError

    def decode(self, record: Any) -> Any:
        raise NotImplementedError


@dataclass
class Plain(FieldCodec):
    """A column holding the domain value as is."""

    column: str
    nullable: bool = True

    def __post_init__(self) -> None:
        self.columns = (self.column,)

    def encode(self, name: str, value: Any) -> dict[str, Any]:
        if value is None and not self.nullable:
            raise InvalidDataError(f"The field '{name}' cannot be null!")
        return {self.column: value}

    def decode(self, record: Any) -> Any:
        return getattr(record, self.column)


@dataclass
class Choice(FieldCodec):
    """A column restricted to the values of an enum."""

    column: str
    enum_cls: type[Enum]

    def __post_init__(self) -> None:
        self.columns = (self.column,)

    def encode(self, name: str, value: Any) -> dict[str, Any]:
        try:
            return {self.column: self.enum_cls(value)}
        except ValueError as exc:
            raise InvalidInputError(f"'{value}' is not a valid value for '{name}'!") from exc

    def decode(self, record: Any) -> Any:
        return getattr(record, self.column)


@dataclass
class Ref(FieldCodec):
    """A single reference stored as a foreign key column."""

    column: str
    nullable: bool = False

    def __post_init__(self) -> None:
        self.columns = (self.column,)

    def encode(self, name: str, value: Any) -> dict[str, Any]:
        if value is None:
            if not self.nullable:
                raise InvalidDataError(f"The field '{name}' cannot be null!")
            return {self.column: None}
        return {self.column: parse_ref(value, name)}

    def decode(self, record: Any) -> Any:
        key = getattr(record, self.column)
        return None if key is None else format_ref(key)


@dataclass
class Counters(FieldCodec):
    """Nested statistics stored as flat integer columns."""

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        self.columns = self.names

    def encode(self, name: str, value: Any) -> dict[str, Any]:
        if not isinstance(value, Mapping):
            raise InvalidDataError(f"The field '{name}' must be an object!")
        unknown = set(value) - set(self.names)
        if unknown:
            raise InvalidDataError(f"Unknown fields in '{name}': {', '.join(sorted(unknown))}")
        return {counter: value[counter] for counter in self.names if counter in value}

    def decode(self, record: Any) -> Any:
        return {counter: getattr(record, counter) for counter in self.names}


@dataclass
class LinkRows(FieldCodec):
    """An ordered list stored as child rows of a relationship.

    ``to_row`` builds a fresh child row from one domain item at a position,
    ``from_row`` reads one back.
    """

    relationship: str
    to_row: Callable[[str, int, Any], Any]
    from_row: Callable[[Any], Any]

    def __post_init__(self) -> None:
        self.relationships = (self.relationship,)

    def encode(self, name: str, value: Any) -> dict[str, Any]:
        if not isinstance(value, list):
            raise InvalidDataError(f"The field '{name}' must be a list!")
        return {self.relationship: [self.to_row(name, position, item) for position, item in enumerate(value)]}

    def decode(self, record: Any) -> Any:
        return [self.from_row(row) for row in getattr(record, self.relationship)]


@dataclass
class Transcoder(Generic[RecordT]):
    """Bidirectional conversion for one record type."""

    record_cls: type[RecordT]
    codecs: dict[str, FieldCodec]
    timestamps: dict[str, FieldCodec] = field(
        default_factory=lambda: {
            "created_at": Plain("created_at"),
            "updated_at": Plain("updated_at"),
            "deleted_at": Plain("deleted_at"),
        }
    )

    @property
    def fields(self) -> dict[str, FieldCodec]:
        return {**self.codecs, **self.timestamps}

    def encode(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Convert a partial domain dict into raw attribute values.

        Only keys present in ``data`` are converted.

        Raises:
            InvalidDataError: ``data`` holds a field outside the declared shape.
        """
        fields = self.fields
        unknown = set(data) - set(fields) - STORAGE_MANAGED_FIELDS
        if unknown:
            raise InvalidDataError(
                f"Unknown fields for {self.record_cls.__name__}: {', '.join(sorted(unknown))}"
            )

        raw: dict[str, Any] = {}
        for name, value in data.items():
            if name in STORAGE_MANAGED_FIELDS:
                continue
            raw.update(fields[name].encode(name, value))
        return raw

    def inject(self, data: Mapping[str, Any], record: RecordT) -> None:
        """Apply a partial domain dict onto an existing record."""
        for attribute, value in self.encode(data).items():
            setattr(record, attribute, value)

    def to_raw(self, data: Mapping[str, Any]) -> RecordT:
        """Build a new record from domain data."""
        return self.record_cls(**self.encode(data))

    def extract(self, record: RecordT) -> dict[str, Any]:
        """Read domain data out of a record, full or projected."""
        unloaded = inspect(record).unloaded

        data: dict[str, Any] = {"id": str(record.id)}  # type: ignore[attr-defined]
        for name, codec in self.fields.items():
            if any(attribute in unloaded for attribute in codec.attributes):
                continue
            data[name] = codec.decode(record)
        return data

    def projection(self, names: Iterable[str]) -> list[LoaderOption]:
        """Loader options restricting a query to the given domain fields.

        Raises:
            InvalidInputError: A name is not a field of this entity.
        """
        fields = self.fields
        names = [name for name in names if name != "id"]
        unknown = set(names) - set(fields)
        if unknown:
            raise InvalidInputError(f"Unknown fields requested: {', '.join(sorted(unknown))}")

        columns = {"id"}
        relationships: set[str] = set()
        for name in names:
            columns.update(fields[name].columns)
            relationships.update(fields[name].relationships)

        options: list[LoaderOption] = [
            load_only(*(getattr(self.record_cls, column) for column in sorted(columns)))
        ]
        for codec in fields.values():
            for relationship in codec.relationships:
                attribute = getattr(self.record_cls, relationship)
                options.append(selectinload(attribute) if relationship in relationships else lazyload(attribute))
        return options
