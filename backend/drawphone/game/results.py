"""Explicit outcomes for game rule functions.

Rule functions never raise on a validation failure. They return ``Ok`` with
the value the caller needs for broadcasting, or ``Err`` describing why the
event was rejected. Rejections leave the room untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INVALID_PHASE = "invalid_phase"
    PRECONDITION_FAILED = "precondition_failed"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T = None  # type: ignore[assignment]


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str


Result = Union[Ok[Any], Err]


def not_found(message: str) -> Err:
    return Err(ErrorKind.NOT_FOUND, message)


def forbidden(message: str) -> Err:
    return Err(ErrorKind.FORBIDDEN, message)


def invalid_phase(message: str) -> Err:
    return Err(ErrorKind.INVALID_PHASE, message)


def precondition_failed(message: str) -> Err:
    return Err(ErrorKind.PRECONDITION_FAILED, message)
