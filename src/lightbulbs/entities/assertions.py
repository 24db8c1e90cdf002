"""Completeness checks for initializing an empty entity."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from lightbulbs.errors import IncompleteDataError, InvalidInputError
from lightbulbs.models.enums import ReferenceSourceType, ReferenceType


def check_fields(input: Mapping[str, Any], allowed: Iterable[str], entity: str) -> None:
    """Reject keys that cannot be set through ``set_data``."""
    unknown = set(input) - set(allowed)
    if unknown:
        raise InvalidInputError(f"Cannot set {', '.join(sorted(unknown))} on a {entity}!")


def _check_choice(value: Any, enum_cls: type[Enum], entity: str) -> None:
    try:
        enum_cls(value)
    except ValueError as exc:
        raise InvalidInputError(f"'{value}' is not a valid {entity} type!") from exc


def assert_category(input: Mapping[str, Any]) -> None:
    if not input.get("name"):
        raise IncompleteDataError("The provided input is not a complete category type!")


def assert_tag(input: Mapping[str, Any]) -> None:
    if not input.get("label"):
        raise IncompleteDataError("The provided input is not a complete tag type!")


def assert_reference_source(input: Mapping[str, Any]) -> None:
    if not input.get("name") or not input.get("type"):
        raise IncompleteDataError("The provided input is not a complete reference source type!")
    _check_choice(input["type"], ReferenceSourceType, "reference source")


def assert_reference(input: Mapping[str, Any]) -> None:
    if not input.get("name") or not input.get("type"):
        raise IncompleteDataError("The provided input is not a complete reference type!")
    _check_choice(input["type"], ReferenceType, "reference")


def assert_bulb(input: Mapping[str, Any]) -> None:
    category = input.get("category")
    if (
        not input.get("title")
        or not input.get("content")
        or not isinstance(category, Mapping)
        or not category.get("id")
    ):
        raise IncompleteDataError("The provided input is not a complete bulb type!")
