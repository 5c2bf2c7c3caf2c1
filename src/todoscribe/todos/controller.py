# src/todoscribe/todos/controller.py

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..api.client import ApiClient
from ..api.errors import ApiClientError, ApiError, NetworkError, UnauthorizedError
from ..core.outcome import ErrorKind, Outcome
from .models import Task, TaskId, same_id

logger = logging.getLogger(__name__)

GENERIC_DETAIL = "Something went wrong"
UNAUTHORIZED_MESSAGE = "Session expired or unauthorized. Please log in again."
UNEXPECTED_RESPONSE = "Unexpected response from the server."


class TodoController:
    """
    Client-side mirror of the user's task list.

    `tasks` is an ordered cache of the last successful list/create/update/delete.
    The remote API is authoritative and the cache may go stale between calls.

    Every operation:
    - clears `status` on entry and sets it on exit,
    - returns an Outcome and never raises,
    - leaves `tasks` untouched when it fails.

    Authorization is the API's job: the bearer header is injected by ApiClient,
    nothing is checked locally.
    """

    def __init__(
        self,
        api: ApiClient,
        *,
        on_unauthorized: Callable[[], Any] | None = None,
    ) -> None:
        self.api = api
        self.on_unauthorized = on_unauthorized
        self.tasks: list[Task] = []
        self.status = ""

    def get(self, task_id: TaskId) -> Task | None:
        for t in self.tasks:
            if same_id(t.id, task_id):
                return t
        return None

    def _finish(self, outcome: Outcome) -> Outcome:
        self.status = outcome.message
        return outcome

    def _failure(self, action: str, exc: ApiClientError) -> Outcome:
        logger.error("Error %s: %s", action, exc)

        if isinstance(exc, UnauthorizedError):
            if self.on_unauthorized is not None:
                try:
                    self.on_unauthorized()
                except Exception:
                    logger.exception("on_unauthorized hook failed.")
            return Outcome.failure(UNAUTHORIZED_MESSAGE, ErrorKind.UNAUTHORIZED, status_code=401)

        if isinstance(exc, ApiError):
            return Outcome.failure(
                f"Error {action}: {exc.detail or GENERIC_DETAIL}",
                ErrorKind.HTTP,
                status_code=exc.status_code,
            )

        if isinstance(exc, NetworkError):
            return Outcome.failure(f"Network error: {exc}", ErrorKind.NETWORK)

        logger.error("Unexpected payload while %s: %r", action, getattr(exc, "payload", None))
        return Outcome.failure(f"Error {action}: {UNEXPECTED_RESPONSE}", ErrorKind.RESPONSE_SHAPE)

    def _shape_failure(self, action: str, payload: Any) -> Outcome:
        logger.error("Unexpected payload while %s: %r", action, payload)
        return Outcome.failure(f"Error {action}: {UNEXPECTED_RESPONSE}", ErrorKind.RESPONSE_SHAPE)

    async def list_tasks(self) -> Outcome:
        """GET /todos/ and replace the cache wholesale, keeping server order."""
        self.status = ""
        action = "loading tasks"
        try:
            data = await self.api.get("/todos/")
        except ApiClientError as e:
            return self._finish(self._failure(action, e))

        if not isinstance(data, list):
            return self._finish(self._shape_failure(action, data))
        try:
            tasks = [Task.from_api(item) for item in data]
        except ValueError:
            return self._finish(self._shape_failure(action, data))

        self.tasks = tasks
        logger.info("Loaded %d tasks.", len(tasks))
        return self._finish(Outcome.success("Tasks loaded.", list(tasks)))

    async def create(self, title: str, description: str | None = None) -> Outcome:
        """
        POST a new task (completed=False) and append the server record to the cache.

        An empty/whitespace description is sent as null.
        """
        self.status = ""
        if not (title or "").strip():
            return self._finish(Outcome.failure("Task title cannot be empty.", ErrorKind.VALIDATION))

        action = "adding task"
        payload = {
            "title": title,
            "description": None if description is None or description.strip() == "" else description,
            "completed": False,
        }
        try:
            data = await self.api.post("/todos/", json=payload)
        except ApiClientError as e:
            return self._finish(self._failure(action, e))

        try:
            task = Task.from_api(data)
        except ValueError:
            return self._finish(self._shape_failure(action, data))

        self.tasks = [*self.tasks, task]
        logger.info("Created task id=%s", task.id)
        return self._finish(Outcome.success("Task added successfully.", task))

    async def toggle_complete(self, task_id: TaskId) -> Outcome:
        """
        Flip `completed` on one task.

        The new value is the inverse of what the local cache shows (what the
        user sees); the server's value is used only for ids not in the cache.
        The API only accepts full records on PUT, so the task is read first to
        get its current title/description. The two calls are not atomic: an
        edit made by someone else in between is overwritten (last writer wins).
        """
        self.status = ""
        action = "updating task"
        cached = self.get(task_id)
        try:
            current_raw = await self.api.get(f"/todos/{task_id}")
            current = Task.from_api(current_raw)
            shown_completed = cached.completed if cached is not None else current.completed
            body = Task(
                id=current.id,
                title=current.title,
                description=current.description,
                completed=not shown_completed,
            ).to_payload()
            updated_raw = await self.api.put(f"/todos/{task_id}", json=body)
            updated = Task.from_api(updated_raw)
        except ApiClientError as e:
            return self._finish(self._failure(action, e))
        except ValueError as e:
            return self._finish(self._shape_failure(action, str(e)))

        self.tasks = [updated if same_id(t.id, task_id) else t for t in self.tasks]
        logger.info("Task id=%s completed=%s", task_id, updated.completed)
        return self._finish(Outcome.success("Task status updated.", updated))

    async def remove(self, task_id: TaskId) -> Outcome:
        """DELETE one task and drop it from the cache."""
        self.status = ""
        action = "deleting task"
        try:
            await self.api.delete(f"/todos/{task_id}")
        except ApiClientError as e:
            return self._finish(self._failure(action, e))

        self.tasks = [t for t in self.tasks if not same_id(t.id, task_id)]
        logger.info("Deleted task id=%s", task_id)
        return self._finish(Outcome.success("Task deleted successfully."))
