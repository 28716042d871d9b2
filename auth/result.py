"""Explicit success/failure values returned at component boundaries.

Callers branch on ``result.ok`` instead of catching exceptions, so the
failure branch cannot be forgotten.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")

NETWORK_ERROR_MESSAGE = (
    "Unable to reach the server. Please check your connection and try again."
)


class FailureKind(Enum):
    """Failure taxonomy surfaced to the view layer."""

    NETWORK = "network"
    REJECTED = "rejected"
    VALIDATION = "validation"
    BUSY = "busy"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Failure:
    """Why an operation failed, with a message fit for display."""

    kind: FailureKind
    message: str


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Err:
    error: Failure
    ok: bool = field(default=False, init=False)

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def kind(self) -> FailureKind:
        return self.error.kind


Result = Union[Ok[T], Err]


def err(kind: FailureKind, message: str) -> Err:
    """Shorthand for building an Err."""
    return Err(Failure(kind=kind, message=message))
