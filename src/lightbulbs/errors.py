"""Error hierarchy shared by every layer of Lightbulbs.

Each error carries a coarse ``code`` so callers (the HTTP shim, the CLI) can
branch on the kind of failure without matching on messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """The category of an application error."""

    UNKNOWN = "UNKNOWN"
    INPUT = "INPUT"
    ACTION = "ACTION"
    DATA = "DATA"
    CONNECTION = "CONNECTION"
    CONFIG = "CONFIG"


class LightbulbsError(Exception):
    """Base exception for all Lightbulbs errors."""

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, **metadata: Any) -> None:
        super().__init__(message)
        self.message = message
        self.metadata = metadata


class PreconditionError(LightbulbsError):
    """Operation is not allowed in the model's current state."""

    code = ErrorCode.ACTION


class IncompleteDataError(LightbulbsError):
    """Initial data lacks a required field."""

    code = ErrorCode.INPUT


class InvalidInputError(LightbulbsError):
    """Input value is malformed (bad enum value, unknown filter, bad identifier)."""

    code = ErrorCode.INPUT


class DuplicateRelationshipError(LightbulbsError):
    """The related entity is already linked."""

    code = ErrorCode.DATA


class MissingRelationshipError(LightbulbsError):
    """The related entity is not linked, was never persisted, or is the entity itself."""

    code = ErrorCode.DATA


class InvalidDataError(LightbulbsError):
    """Data contains fields outside the declared shape."""

    code = ErrorCode.DATA


class NotFoundError(LightbulbsError):
    """No record exists for the identifier."""

    code = ErrorCode.DATA


class UniquenessConflictError(LightbulbsError):
    """A unique field (name, label) collides with an existing record."""

    code = ErrorCode.DATA


class ConcurrencyConflictError(LightbulbsError):
    """The record changed in storage since it was last read."""

    code = ErrorCode.DATA


class UnsupportedOperationError(LightbulbsError, NotImplementedError):
    """The operation exists in the contract but has no behavior yet."""

    code = ErrorCode.ACTION


class DatabaseOutageError(LightbulbsError):
    """The database context is not connected."""

    code = ErrorCode.CONNECTION


class MissingConfigError(LightbulbsError):
    """Config source does not exist."""

    code = ErrorCode.CONFIG


class InvalidConfigError(LightbulbsError):
    """Config source failed validation."""

    code = ErrorCode.CONFIG
