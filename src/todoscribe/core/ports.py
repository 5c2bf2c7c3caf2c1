# src/todoscribe/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

Services depend on Protocols instead of concrete implementations.
This keeps storage/generators swappable and makes testing with fakes easy.
"""

from typing import Awaitable, Protocol

from .outcome import Outcome


class KeyValueStorage(Protocol):
    """Small persistent string store (the browser's localStorage, on disk)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class TokenSource(Protocol):
    """Anything that can hand out the current bearer token (or None)."""

    @property
    def token(self) -> str | None: ...


class TextGenerator(Protocol):
    """One prompt in, one generated text out (wrapped in an Outcome)."""

    status: str

    def generate(self, prompt_text: str) -> Awaitable[Outcome]: ...
