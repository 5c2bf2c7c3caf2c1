# src/todoscribe/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..api.client import ApiClient
from ..auth.manager import AuthManager
from ..auth.session import Session
from ..todos.controller import TodoController
from .ports import TextGenerator


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    session: Session
    api: ApiClient
    auth: AuthManager
    todos: TodoController
    generator: TextGenerator

    # Set while a command is awaiting the network; the UI refuses new commands meanwhile.
    busy: bool = False

    async def aclose(self) -> None:
        await self.api.aclose()
        close = getattr(self.generator, "aclose", None)
        if close is not None:
            await close()
