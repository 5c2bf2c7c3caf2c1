# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todoscribe.api.client import ApiClient
from todoscribe.auth.manager import AuthManager
from todoscribe.auth.session import Session
from todoscribe.auth.storage import MemoryStorage
from todoscribe.cli.bootstrap import create_initial_state
from todoscribe.core.state import AppState
from todoscribe.llm.offline import OfflineTextGenerator
from todoscribe.todos.controller import TodoController

from .fakes import FakeTodoServer

BASE_URL = "http://todo.test"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the services.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment / .env.
    """
    return SimpleNamespace(
        app_name="todoscribe-test",
        log_level="DEBUG",
        api_base_url=BASE_URL,
        http_timeout_seconds=5.0,
        logout_on_unauthorized=False,
        gemini_api_key=None,
        gemini_base_url="http://gemini.test/v1beta",
        gemini_model="gemini-1.5-flash",
        gen_temperature=0.7,
        gen_max_output_tokens=500,
        data_dir=tmp_path,
        session_path=tmp_path / "session.json",
    )


@pytest.fixture()
def server() -> FakeTodoServer:
    srv = FakeTodoServer()
    srv.add_user("alice", "secret")
    return srv


@pytest.fixture()
def session() -> Session:
    return Session(MemoryStorage())


@pytest.fixture()
def api(server: FakeTodoServer, session: Session) -> ApiClient:
    return ApiClient(BASE_URL, session, transport=server.transport())


@pytest.fixture()
def auth(api: ApiClient, session: Session) -> AuthManager:
    return AuthManager(api, session)


@pytest.fixture()
def logged_in(server: FakeTodoServer, session: Session) -> str:
    """Session already holding a valid token for alice."""
    token = server.issue_token("alice")
    session.save(token)
    return token


@pytest.fixture()
def todos(api: ApiClient) -> TodoController:
    return TodoController(api)


@pytest.fixture()
def state(settings: SimpleNamespace, server: FakeTodoServer) -> AppState:
    """AppState wired through the real composition root, with fakes at the edges."""
    return create_initial_state(
        settings=settings,
        storage=MemoryStorage(),
        api_transport=server.transport(),
        generator=OfflineTextGenerator(),
    )
