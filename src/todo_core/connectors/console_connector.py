# src/todo_core/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
import threading
from datetime import datetime

from ..cli.commands import format_task, registry as command_registry
from ..core.state import AppState
from ..errors import TaskError

logger = logging.getLogger(__name__)

_EOF = object()


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[object]) -> threading.Thread:
    """
    Read stdin lines in a daemon thread and hand them to the loop.

    A daemon thread (rather than asyncio.to_thread) so a blocked input()
    never holds up interpreter shutdown.
    """

    def _reader() -> None:
        while True:
            try:
                line = sys.stdin.readline()
            except (OSError, ValueError):
                logger.debug("stdin read failed", exc_info=True)
                line = ""
            if not line:
                loop.call_soon_threadsafe(queue.put_nowait, _EOF)
                return
            loop.call_soon_threadsafe(queue.put_nowait, line)

    t = threading.Thread(target=_reader, name="console-stdin", daemon=True)
    t.start()
    return t


async def watch_highlight(state: AppState) -> None:
    """Print an "Updated!" notice each time the highlight names a task."""
    async with state.coordinator.observe_highlight() as sub:
        async for task_id in sub:
            if task_id is None:
                continue
            task = next((t for t in state.coordinator.snapshot() if t.id == task_id), None)
            if task is not None:
                _print_ts(f"Updated! {format_task(task)}")


def handle_line(state: AppState, user_input: str) -> str | None:
    """
    Route one console line.

    Plain text adds a task; slash commands go through the registry.
    """
    line = user_input.strip()
    if not line:
        return None
    if not line.startswith("/"):
        line = f"/add {line}"

    try:
        return command_registry.handle(state, line)
    except TaskError as e:
        return str(e)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (db=%s).", state.task_store.db_path)
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.")

    loop = asyncio.get_running_loop()
    lines: asyncio.Queue[object] = asyncio.Queue()
    _start_stdin_reader(loop, lines)
    watcher = asyncio.create_task(watch_highlight(state), name="console-highlight")

    try:
        while True:
            item = await lines.get()
            if item is _EOF:
                logger.info("Console EOF received, exiting.")
                break

            user_input = str(item).strip()
            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            reply = handle_line(state, user_input)
            if reply is not None:
                _print_ts(reply)
            # Let the command just scheduled start before reading more input.
            await asyncio.sleep(0)
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher
        logger.info("Console connector finished.")
