# src/todoscribe/auth/session.py

from __future__ import annotations

import logging

from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

TOKEN_KEY = "accessToken"


class Session:
    """
    Access-token holder backed by an injected key-value store.

    A non-empty stored token means "authenticated"; nothing is validated
    against the server here.
    """

    def __init__(self, storage: KeyValueStorage, key: str = TOKEN_KEY) -> None:
        self._storage = storage
        self._key = key

    @property
    def token(self) -> str | None:
        raw = self._storage.get_item(self._key)
        return raw if raw else None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def save(self, token: str) -> None:
        if not token:
            raise ValueError("Refusing to store an empty access token.")
        self._storage.set_item(self._key, token)
        logger.debug("Session token stored (key=%s).", self._key)

    def clear(self) -> None:
        self._storage.remove_item(self._key)
        logger.debug("Session token cleared (key=%s).", self._key)
