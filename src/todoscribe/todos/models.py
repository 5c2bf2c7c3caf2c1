# src/todoscribe/todos/models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

TaskId = int | str


@dataclass(slots=True)
class Task:
    id: TaskId
    title: str
    description: str | None = None
    completed: bool = False

    @classmethod
    def from_api(cls, raw: Any) -> Task:
        """Build a Task from a server record; unknown keys (e.g. owner_id) are ignored."""
        if not isinstance(raw, dict) or "id" not in raw or "title" not in raw:
            raise ValueError(f"Not a task record: {raw!r}")
        description = raw.get("description")
        return cls(
            id=raw["id"],
            title=str(raw["title"]),
            description=None if description is None else str(description),
            completed=bool(raw.get("completed", False)),
        )

    def to_payload(self) -> dict[str, Any]:
        """Full record body expected by POST/PUT /todos (no id)."""
        return {
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
        }


def same_id(a: TaskId, b: TaskId) -> bool:
    """Ids typed on the console arrive as strings; compare loosely."""
    return str(a) == str(b)
