"""Tagged results returned by board and roster operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    BACKEND_ERROR = "BACKEND_ERROR"


@dataclass(frozen=True)
class Ok:
    value: Any = None
    ok: bool = True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str
    ok: bool = False

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}


def validation_error(message: str) -> Err:
    return Err(ErrorKind.VALIDATION, message)


def not_found(message: str) -> Err:
    return Err(ErrorKind.NOT_FOUND, message)


def backend_error(message: str) -> Err:
    return Err(ErrorKind.BACKEND_ERROR, message)
