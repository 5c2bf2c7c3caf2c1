# src/todoscribe/auth/manager.py

from __future__ import annotations

import logging
from enum import StrEnum

from ..api.client import FORM_CONTENT_TYPE, ApiClient
from ..api.errors import ApiError, NetworkError, ResponseShapeError
from ..core.outcome import ErrorKind, Outcome
from .session import Session

logger = logging.getLogger(__name__)

GENERIC_DETAIL = "Something went wrong"
CONNECT_FAILED = "Error: Could not connect to the server. Check your connection."


class AuthState(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class AuthManager:
    """
    Register / log in / log out against the task API.

    State is derived from the session on every access: a persisted token at
    start-up means AUTHENTICATED (optimistic, the token is not re-validated).
    """

    def __init__(self, api: ApiClient, session: Session) -> None:
        self.api = api
        self.session = session
        self.status = ""

    @property
    def state(self) -> AuthState:
        return AuthState.AUTHENTICATED if self.session.is_authenticated else AuthState.UNAUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    def _finish(self, outcome: Outcome) -> Outcome:
        self.status = outcome.message
        return outcome

    @staticmethod
    def _validate(username: str, password: str) -> str | None:
        if not (username or "").strip():
            return "Username cannot be empty."
        if not (password or "").strip():
            return "Password cannot be empty."
        return None

    def _failure(self, action: str, exc: Exception) -> Outcome:
        logger.error("Authentication error during %s: %s", action, exc)
        if isinstance(exc, ApiError):
            kind = ErrorKind.UNAUTHORIZED if exc.status_code == 401 else ErrorKind.HTTP
            return Outcome.failure(
                f"Error: {exc.detail or GENERIC_DETAIL}", kind, status_code=exc.status_code
            )
        if isinstance(exc, NetworkError):
            return Outcome.failure(CONNECT_FAILED, ErrorKind.NETWORK)
        logger.error("Unexpected payload during %s: %r", action, getattr(exc, "payload", None))
        return Outcome.failure(f"Error: {exc}", ErrorKind.RESPONSE_SHAPE)

    async def register(self, username: str, password: str) -> Outcome:
        """Create an account. Does not log in: call login() afterwards."""
        self.status = ""
        problem = self._validate(username, password)
        if problem:
            return self._finish(Outcome.failure(problem, ErrorKind.VALIDATION))

        try:
            data = await self.api.post("/register", json={"username": username, "password": password})
        except (ApiError, NetworkError, ResponseShapeError) as e:
            return self._finish(self._failure("register", e))

        logger.info("Registered user=%s", username)
        return self._finish(Outcome.success("Registration successful. You can now log in.", data))

    async def login(self, username: str, password: str) -> Outcome:
        """Exchange credentials (form-encoded, OAuth2 password flow) for an access token."""
        self.status = ""
        problem = self._validate(username, password)
        if problem:
            return self._finish(Outcome.failure(problem, ErrorKind.VALIDATION))

        try:
            data = await self.api.post(
                "/token",
                data={"username": username, "password": password},
                headers={"Content-Type": FORM_CONTENT_TYPE},
            )
        except (ApiError, NetworkError, ResponseShapeError) as e:
            return self._finish(self._failure("login", e))

        token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            logger.error("Unexpected /token response (no access_token): %r", data)
            return self._finish(
                Outcome.failure("Error: Unexpected response from the server.", ErrorKind.RESPONSE_SHAPE)
            )

        self.session.save(token)
        logger.info("Logged in user=%s", username)
        return self._finish(Outcome.success("Login successful."))

    def logout(self) -> Outcome:
        """Local only: forget the token."""
        self.status = ""
        self.session.clear()
        logger.info("Logged out.")
        return self._finish(Outcome.success("Logged out."))
