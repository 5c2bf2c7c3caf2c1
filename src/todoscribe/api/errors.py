# src/todoscribe/api/errors.py

from __future__ import annotations

from typing import Any


class ApiClientError(Exception):
    """Base class for everything ApiClient raises."""


class ApiError(ApiClientError):
    """The server answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        detail: str | None = None,
        *,
        reason: str = "",
        payload: Any = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.reason = reason
        self.payload = payload
        super().__init__(f"HTTP {status_code}: {detail or reason or 'error'}")


class UnauthorizedError(ApiError):
    """HTTP 401: missing, expired or invalid bearer token."""


class NetworkError(ApiClientError):
    """No response was received (DNS, refused connection, timeout...)."""


class ResponseShapeError(ApiClientError):
    """A response was received but its body is not what we can parse."""

    def __init__(self, message: str, *, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(message)
