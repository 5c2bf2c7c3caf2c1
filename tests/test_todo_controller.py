# tests/test_todo_controller.py

from __future__ import annotations

import json

import httpx
import pytest

from todoscribe.api.client import ApiClient
from todoscribe.auth.session import Session
from todoscribe.auth.storage import MemoryStorage
from todoscribe.core.outcome import ErrorKind
from todoscribe.todos.controller import UNAUTHORIZED_MESSAGE, TodoController
from todoscribe.todos.models import Task


@pytest.mark.asyncio
async def test_list_replaces_cache_in_server_order(server, todos, logged_in) -> None:
    server.seed_todo("alice", "b")
    server.seed_todo("alice", "a", "first letter")
    server.seed_todo("mallory", "not mine")
    todos.tasks = [Task(id=99, title="stale")]

    outcome = await todos.list_tasks()

    assert outcome.ok
    assert todos.status == "Tasks loaded."
    assert [t.title for t in todos.tasks] == ["b", "a"]
    assert todos.tasks[1].description == "first letter"


@pytest.mark.asyncio
async def test_create_appends_at_end(server, todos, logged_in) -> None:
    server.seed_todo("alice", "existing")
    await todos.list_tasks()

    outcome = await todos.create("Write report", "by friday")

    assert outcome.ok
    assert outcome.message == "Task added successfully."
    created = outcome.value
    assert [t.title for t in todos.tasks] == ["existing", "Write report"]
    assert todos.tasks[-1] == created
    assert created.completed is False
    assert sum(1 for t in todos.tasks if t.id == created.id) == 1


@pytest.mark.asyncio
async def test_create_sends_blank_description_as_null(server, todos, logged_in) -> None:
    await todos.create("Buy milk", "")
    await todos.create("Buy eggs", "   ")
    await todos.create("Buy bread")

    bodies = [json.loads(r.content) for r in server.calls("POST", "/todos/")]
    assert bodies[0] == {"title": "Buy milk", "description": None, "completed": False}
    assert all(b["description"] is None for b in bodies)


@pytest.mark.asyncio
@pytest.mark.parametrize("title", ["", " ", "\t\n"])
async def test_create_blank_title_is_local_validation(server, todos, logged_in, title) -> None:
    outcome = await todos.create(title, "desc")

    assert outcome.error is ErrorKind.VALIDATION
    assert todos.status == "Task title cannot be empty."
    assert server.requests == []
    assert todos.tasks == []


@pytest.mark.asyncio
@pytest.mark.parametrize("initial", [False, True])
async def test_toggle_flips_only_completed(server, todos, logged_in, initial) -> None:
    other = server.seed_todo("alice", "other")
    rec = server.seed_todo("alice", "Call mom", "sunday", completed=initial)
    await todos.list_tasks()

    outcome = await todos.toggle_complete(rec["id"])

    assert outcome.ok
    assert todos.status == "Task status updated."
    updated = todos.get(rec["id"])
    assert updated is not None
    assert updated.completed is (not initial)
    assert (updated.title, updated.description) == ("Call mom", "sunday")
    assert [t.id for t in todos.tasks] == [other["id"], rec["id"]]
    assert todos.get(other["id"]).completed is False

    put = server.calls("PUT", f"/todos/{rec['id']}")[0]
    assert json.loads(put.content) == {"title": "Call mom", "description": "sunday", "completed": not initial}


@pytest.mark.asyncio
async def test_toggle_reads_current_server_record(server, todos, logged_in) -> None:
    rec = server.seed_todo("alice", "Old title")
    await todos.list_tasks()

    # Someone else edits the task after our list.
    server.todos[rec["id"]]["title"] = "New title"

    outcome = await todos.toggle_complete(str(rec["id"]))

    assert outcome.ok
    assert todos.tasks[0].title == "New title"
    assert todos.tasks[0].completed is True


@pytest.mark.asyncio
async def test_toggle_inverts_cached_flag_not_server_flag(server, todos, logged_in) -> None:
    rec = server.seed_todo("alice", "t")
    await todos.list_tasks()

    # Completed elsewhere after our list; the user still sees it open.
    server.todos[rec["id"]]["completed"] = True

    outcome = await todos.toggle_complete(rec["id"])

    assert outcome.ok
    put = server.calls("PUT", f"/todos/{rec['id']}")[0]
    assert json.loads(put.content) == {"title": "t", "description": None, "completed": True}
    assert todos.get(rec["id"]).completed is True


@pytest.mark.asyncio
async def test_toggle_uncached_task_uses_server_flag(server, todos, logged_in) -> None:
    rec = server.seed_todo("alice", "t", completed=True)

    outcome = await todos.toggle_complete(rec["id"])

    assert outcome.ok
    assert json.loads(server.calls("PUT")[0].content)["completed"] is False
    assert todos.tasks == []


@pytest.mark.asyncio
async def test_toggle_missing_task_reports_and_keeps_cache(server, todos, logged_in) -> None:
    server.seed_todo("alice", "keep me")
    await todos.list_tasks()
    before = list(todos.tasks)

    outcome = await todos.toggle_complete(404)

    assert outcome.error is ErrorKind.HTTP
    assert outcome.message == "Error updating task: Todo not found"
    assert todos.tasks == before
    assert server.calls("PUT") == []


@pytest.mark.asyncio
async def test_remove_drops_task(server, todos, logged_in) -> None:
    a = server.seed_todo("alice", "a")
    b = server.seed_todo("alice", "b")
    await todos.list_tasks()

    outcome = await todos.remove(a["id"])

    assert outcome.ok
    assert todos.status == "Task deleted successfully."
    assert [t.id for t in todos.tasks] == [b["id"]]
    assert todos.get(a["id"]) is None


@pytest.mark.asyncio
async def test_remove_unknown_id_reports_failure(server, todos, logged_in) -> None:
    server.seed_todo("alice", "a")
    await todos.list_tasks()
    before = list(todos.tasks)

    outcome = await todos.remove(12345)

    assert not outcome.ok
    assert outcome.status_code == 404
    assert todos.tasks == before


@pytest.mark.asyncio
async def test_401_on_list_keeps_cache(server, todos, logged_in) -> None:
    server.seed_todo("alice", "cached")
    await todos.list_tasks()
    before = list(todos.tasks)

    server.fail_with[("GET", "/todos/")] = (401, {"detail": "Token expired"})
    outcome = await todos.list_tasks()

    assert outcome.error is ErrorKind.UNAUTHORIZED
    assert todos.status == UNAUTHORIZED_MESSAGE
    assert todos.tasks == before


@pytest.mark.asyncio
async def test_401_without_token(server, todos) -> None:
    outcome = await todos.list_tasks()

    assert outcome.error is ErrorKind.UNAUTHORIZED
    assert "Authorization" not in server.requests[0].headers


@pytest.mark.asyncio
async def test_unauthorized_hook_is_called(server, api, session, logged_in) -> None:
    todos = TodoController(api, on_unauthorized=session.clear)
    server.fail_with[("POST", "/todos/")] = (401, {"detail": "Token expired"})

    outcome = await todos.create("x")

    assert outcome.error is ErrorKind.UNAUTHORIZED
    assert session.token is None


@pytest.mark.asyncio
async def test_status_cleared_then_set_per_operation(server, todos, logged_in) -> None:
    await todos.create("")
    assert todos.status == "Task title cannot be empty."

    await todos.create("ok")
    assert todos.status == "Task added successfully."


@pytest.mark.asyncio
async def test_network_failure_becomes_status() -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    session = Session(MemoryStorage({"accessToken": "T1"}))
    todos = TodoController(ApiClient("http://todo.test", session, transport=httpx.MockTransport(boom)))
    todos.tasks = [Task(id=1, title="kept")]

    outcome = await todos.remove(1)

    assert outcome.error is ErrorKind.NETWORK
    assert outcome.message == "Network error: connection refused"
    assert [t.id for t in todos.tasks] == [1]


@pytest.mark.asyncio
async def test_malformed_list_payload() -> None:
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"items": []}))
    todos = TodoController(ApiClient("http://todo.test", transport=transport))

    outcome = await todos.list_tasks()

    assert outcome.error is ErrorKind.RESPONSE_SHAPE
    assert todos.tasks == []
