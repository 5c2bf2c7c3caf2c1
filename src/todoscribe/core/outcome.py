# src/todoscribe/core/outcome.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Failure categories surfaced to the UI layer."""

    VALIDATION = "validation"  # local, no network call was made
    HTTP = "http"
    UNAUTHORIZED = "unauthorized"
    NETWORK = "network"
    RESPONSE_SHAPE = "response_shape"


@dataclass(slots=True)
class Outcome:
    """
    Result of one user-triggered operation.

    Operations never raise past their component boundary; the caller
    inspects `ok` and shows `message` as the single status line.
    """

    ok: bool
    message: str
    value: Any = None
    error: ErrorKind | None = None
    status_code: int | None = None

    @classmethod
    def success(cls, message: str, value: Any = None) -> Outcome:
        return cls(ok=True, message=message, value=value)

    @classmethod
    def failure(
        cls,
        message: str,
        error: ErrorKind,
        *,
        status_code: int | None = None,
    ) -> Outcome:
        return cls(ok=False, message=message, error=error, status_code=status_code)
