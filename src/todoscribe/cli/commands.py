# src/todoscribe/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.outcome import Outcome
from ..core.state import AppState
from ..todos.models import Task

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

BUSY_MESSAGE = "Another request is still running. Please wait."

logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    Slash-command registry used by the console connector (/help, /login, /todos, ...).

    Handlers may be sync or async. While an async handler is awaited,
    `state.busy` is set and any other command is refused: at most one network
    operation is outstanding at a time.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if state.busy:
            return BUSY_MESSAGE

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if not inspect.isawaitable(result):
            return result

        state.busy = True
        try:
            return await result
        finally:
            state.busy = False

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] #{task.id} {task.title}"
    if task.description:
        line += f" - {task.description}"
    return line


def format_tasks(tasks: list[Task]) -> str:
    if not tasks:
        return "You have no tasks yet. Add one with /add <title>."
    return "\n".join(format_task(t) for t in tasks)


def _with_tasks(outcome: Outcome, state: AppState) -> str:
    if not outcome.ok:
        return outcome.message
    return f"{outcome.message}\n{format_tasks(state.todos.tasks)}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    generator = type(state.generator).__name__
    return (
        "Status:\n"
        f"  Session: {state.auth.state}\n"
        f"  Task API: {getattr(settings, 'api_base_url', '?')}\n"
        f"  Cached tasks: {len(state.todos.tasks)}\n"
        f"  Generator: {generator}"
    )


async def cmd_register(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /register <username> <password>"
    outcome = await state.auth.register(args[0], args[1])
    return outcome.message


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /login <username> <password>

    On success the task list is fetched right away.
    """
    if len(args) != 2:
        return "Usage: /login <username> <password>"
    outcome = await state.auth.login(args[0], args[1])
    if not outcome.ok:
        return outcome.message

    if emit:
        emit(outcome.message)
    listed = await state.todos.list_tasks()
    return _with_tasks(listed, state)


def cmd_logout(state: AppState, args: list[str]) -> str:
    outcome = state.auth.logout()
    state.todos.tasks = []
    return outcome.message


async def cmd_todos(state: AppState, args: list[str]) -> str:
    outcome = await state.todos.list_tasks()
    return _with_tasks(outcome, state)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title>                 -> task without description
    /add <title> | <description> -> task with description
    """
    raw = " ".join(args)
    title, _, description = raw.partition("|")
    outcome = await state.todos.create(title.strip(), description.strip() or None)
    return _with_tasks(outcome, state)


async def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <task id>"
    outcome = await state.todos.toggle_complete(args[0])
    return _with_tasks(outcome, state)


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <task id>"
    outcome = await state.todos.remove(args[0])
    return _with_tasks(outcome, state)


async def cmd_gen(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit and args:
        emit("Generating...")
    outcome = await state.generator.generate(" ".join(args))
    if not outcome.ok:
        return outcome.message
    return f"{outcome.message}\nGenerated content:\n{outcome.value}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show session state and configuration.")
registry.register("register", cmd_register, help_text="Create an account: /register <user> <password>.")
registry.register("login", cmd_login, help_text="Log in: /login <user> <password>.")
registry.register("logout", cmd_logout, help_text="Forget the stored access token.")
registry.register("todos", cmd_todos, help_text="Reload your task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| description].")
registry.register("done", cmd_done, help_text="Toggle a task's completed flag: /done <id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["del"])
registry.register(
    "gen", cmd_gen, help_text="Generate an image description: /gen <concept>.", aliases=["generate"]
)
