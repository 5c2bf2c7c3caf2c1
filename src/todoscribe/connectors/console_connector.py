# src/todoscribe/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL.

    Each line is awaited to completion before the next prompt is shown.
    A line that is not a /command is sent to the text generator as a prompt.
    """
    logger.info("Console connector started (auth=%s).", state.auth.state)
    _print_ts("[CONSOLE] Use /help for commands, /exit to quit. Plain text generates a description.\n")

    if state.auth.is_authenticated:
        # Stored token from a previous run: show the list like a fresh login would.
        _print_ts(await command_registry.handle(state, "/todos") or "")

    while True:
        try:
            user_input = (await asyncio.to_thread(input, ">>> You: ")).strip()
            _rewrite_prev_line(f"[{_ts_local()}] >>> You: {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        line = user_input if user_input.startswith("/") else f"/gen {user_input}"

        try:
            response = await command_registry.handle(state, line, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            _print_ts(response)
            print()

    logger.info("Console connector finished.")
