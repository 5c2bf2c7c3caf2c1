# src/todoscribe/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/session/API/auth/todos/generator).
"""

from __future__ import annotations

import logging

import httpx

from ..api.client import ApiClient
from ..auth.manager import AuthManager
from ..auth.session import Session
from ..auth.storage import JsonFileStorage
from ..config import get_settings
from ..core.ports import KeyValueStorage, TextGenerator
from ..core.state import AppState
from ..llm.client import GeminiTextGenerator
from ..llm.offline import OfflineTextGenerator
from ..todos.controller import TodoController

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStorage | None = None,
    api_transport: httpx.AsyncBaseTransport | None = None,
    generator: TextGenerator | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Everything is injectable so tests can swap the token storage, the HTTP
    transport and the text generator. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = JsonFileStorage(settings.session_path)

    session = Session(storage)
    api = ApiClient(
        settings.api_base_url,
        session,
        timeout=settings.http_timeout_seconds,
        transport=api_transport,
    )
    auth = AuthManager(api, session)

    on_unauthorized = auth.logout if settings.logout_on_unauthorized else None
    todos = TodoController(api, on_unauthorized=on_unauthorized)

    if generator is None:
        try:
            generator = GeminiTextGenerator.from_settings(settings)
        except RuntimeError as e:
            # Fallback for demos / local runs without a Gemini key.
            logger.info("%s Using the offline generator.", e)
            generator = OfflineTextGenerator()

    state = AppState(
        settings=settings,
        session=session,
        api=api,
        auth=auth,
        todos=todos,
        generator=generator,
    )
    logger.debug("Initial auth state: %s", auth.state)
    return state
