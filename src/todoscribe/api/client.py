# src/todoscribe/api/client.py

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from ..core.ports import TokenSource
from .errors import ApiError, NetworkError, ResponseShapeError, UnauthorizedError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _make_timeout_obj(total_s: float) -> httpx.Timeout:
    return httpx.Timeout(total_s, connect=min(total_s, 10.0))


def extract_error_detail(payload: Any) -> str | None:
    """
    Pull a human-readable message out of an error body.

    Understands:
    - FastAPI: {"detail": "..."} or {"detail": [{"msg": "..."}, ...]} (422)
    - Google APIs: {"error": {"message": "..."}}
    """
    if not isinstance(payload, dict):
        return None

    detail = payload.get("detail")
    if isinstance(detail, str) and detail.strip():
        return detail
    if isinstance(detail, list):
        msgs = [str(d.get("msg")) for d in detail if isinstance(d, dict) and d.get("msg")]
        if msgs:
            return "; ".join(msgs)

    err = payload.get("error")
    if isinstance(err, dict):
        msg = err.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg

    return None


class ApiClient:
    """
    Thin async HTTP wrapper bound to one base address.

    - Adds `Content-Type: application/json` unless the caller overrides it.
    - Adds `Authorization: Bearer <token>` when the token source has a token.
      The token is read per request, so login/logout apply immediately.
    - Returns the parsed JSON body for 2xx, raises ApiError / NetworkError otherwise.
    - Never retries.
    """

    def __init__(
        self,
        base_url: str,
        session: TokenSource | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=_make_timeout_obj(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _build_headers(self, overrides: Mapping[str, str] | None) -> dict[str, str]:
        headers = {"Content-Type": JSON_CONTENT_TYPE}
        token = self._session.token if self._session is not None else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if overrides:
            headers.update(overrides)
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        data: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        method = method.upper()
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                data=data,
                params=params,
                headers=self._build_headers(headers),
            )
        except httpx.TransportError as e:
            logger.warning("%s %s: no response (%s)", method, path, e.__class__.__name__)
            raise NetworkError(str(e) or e.__class__.__name__) from e

        logger.debug("%s %s -> %s", method, path, response.status_code)

        if not response.is_success:
            payload = _safe_json(response)
            detail = extract_error_detail(payload)
            exc_cls = UnauthorizedError if response.status_code == 401 else ApiError
            raise exc_cls(
                response.status_code,
                detail,
                reason=response.reason_phrase,
                payload=payload,
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ResponseShapeError(
                f"{method} {path}: response is not JSON", payload=response.text
            ) from e

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)


def _safe_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
