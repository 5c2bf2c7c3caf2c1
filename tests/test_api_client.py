# tests/test_api_client.py

from __future__ import annotations

import httpx
import pytest

from todoscribe.api.client import FORM_CONTENT_TYPE, ApiClient, extract_error_detail
from todoscribe.api.errors import ApiError, NetworkError, ResponseShapeError, UnauthorizedError
from todoscribe.auth.session import Session
from todoscribe.auth.storage import MemoryStorage


def _client(handler, token: str | None = None) -> tuple[ApiClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def recorder(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    session = Session(MemoryStorage({"accessToken": token} if token else {}))
    return ApiClient("http://api.test", session, transport=httpx.MockTransport(recorder)), seen


@pytest.mark.asyncio
async def test_default_headers_without_token() -> None:
    client, seen = _client(lambda r: httpx.Response(200, json={"ok": True}))

    assert await client.get("/todos/") == {"ok": True}

    req = seen[0]
    assert str(req.url) == "http://api.test/todos/"
    assert req.headers["Content-Type"] == "application/json"
    assert "Authorization" not in req.headers


@pytest.mark.asyncio
async def test_bearer_header_reflects_current_token() -> None:
    storage = MemoryStorage()
    session = Session(storage)
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    client = ApiClient("http://api.test", session, transport=httpx.MockTransport(handler))

    session.save("abc")
    await client.get("/todos/")
    session.clear()
    await client.get("/todos/")

    assert seen[0].headers["Authorization"] == "Bearer abc"
    assert "Authorization" not in seen[1].headers


@pytest.mark.asyncio
async def test_content_type_override_sends_form_body() -> None:
    client, seen = _client(lambda r: httpx.Response(200, json={"access_token": "x"}))

    await client.post(
        "/token",
        data={"username": "alice", "password": "s p"},
        headers={"Content-Type": FORM_CONTENT_TYPE},
    )

    req = seen[0]
    assert req.headers["Content-Type"] == FORM_CONTENT_TYPE
    assert req.content == b"username=alice&password=s+p"


@pytest.mark.asyncio
async def test_empty_success_body_returns_none() -> None:
    client, _ = _client(lambda r: httpx.Response(204))
    assert await client.delete("/todos/1") is None


@pytest.mark.asyncio
async def test_non_json_success_body_is_a_shape_error() -> None:
    client, _ = _client(lambda r: httpx.Response(200, text="<html>hi</html>"))
    with pytest.raises(ResponseShapeError):
        await client.get("/todos/")


@pytest.mark.asyncio
async def test_http_error_carries_status_and_detail() -> None:
    client, _ = _client(lambda r: httpx.Response(404, json={"detail": "Todo not found"}))

    with pytest.raises(ApiError) as info:
        await client.get("/todos/9")

    assert info.value.status_code == 404
    assert info.value.detail == "Todo not found"
    assert not isinstance(info.value, UnauthorizedError)


@pytest.mark.asyncio
async def test_401_raises_unauthorized() -> None:
    client, _ = _client(lambda r: httpx.Response(401, json={"detail": "Not authenticated"}))

    with pytest.raises(UnauthorizedError) as info:
        await client.get("/todos/")
    assert info.value.status_code == 401


@pytest.mark.asyncio
async def test_error_without_body_has_no_detail() -> None:
    client, _ = _client(lambda r: httpx.Response(500))

    with pytest.raises(ApiError) as info:
        await client.get("/todos/")
    assert info.value.detail is None
    assert info.value.reason == "Internal Server Error"


@pytest.mark.asyncio
async def test_transport_failure_is_network_error() -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = _client(boom)
    with pytest.raises(NetworkError):
        await client.get("/todos/")


def test_extract_error_detail_shapes() -> None:
    assert extract_error_detail({"detail": "nope"}) == "nope"
    assert (
        extract_error_detail({"detail": [{"msg": "field required"}, {"msg": "too short"}]})
        == "field required; too short"
    )
    assert extract_error_detail({"error": {"code": 400, "message": "API key not valid"}}) == "API key not valid"
    assert extract_error_detail({"detail": ""}) is None
    assert extract_error_detail("plain text") is None
    assert extract_error_detail(None) is None
