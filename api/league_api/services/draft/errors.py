"""Draft error taxonomy and the structured result returned at the service boundary.

Core code raises ``DraftError`` subclasses. Public service operations catch
them and hand back a ``DraftActionResult`` so callers can render inline
feedback without handling exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class DraftErrorKind(str, Enum):
    authorization = "authorization"
    not_found = "not_found"
    state = "state"
    conflict = "conflict"


class DraftError(Exception):
    """Base class for expected draft failures."""

    kind: DraftErrorKind = DraftErrorKind.state

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DraftAuthorizationError(DraftError):
    kind = DraftErrorKind.authorization


class DraftNotFoundError(DraftError):
    kind = DraftErrorKind.not_found


class DraftStateError(DraftError):
    """Operation is invalid for the draft's (or season's) current status."""

    kind = DraftErrorKind.state


class DraftConflictError(DraftError):
    """Someone else acted first. Callers should refresh state, not alarm the user."""

    kind = DraftErrorKind.conflict


class TurnOrderError(DraftConflictError):
    pass


class TurnMovedOnError(DraftConflictError):
    """current_pick changed between read and commit."""


class PlayerAlreadyDraftedError(DraftConflictError):
    pass


class DraftOrderAlreadyAssignedError(DraftConflictError):
    pass


class DuplicateDraftError(DraftConflictError):
    """A draft for the same season/cycle (or an open draft) already exists."""


@dataclass(frozen=True)
class DraftActionResult(Generic[T]):
    success: bool
    value: T | None = None
    error: str | None = None
    error_kind: DraftErrorKind | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "DraftActionResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def failed(cls, exc: DraftError) -> "DraftActionResult[T]":
        return cls(success=False, error=exc.message, error_kind=exc.kind)

    @property
    def is_conflict(self) -> bool:
        return self.error_kind is DraftErrorKind.conflict
