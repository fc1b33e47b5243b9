# src/todo_core/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console connector on an
asyncio loop until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, reset_task_store
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Let in-flight commands commit, then close coordinator and store."""
    try:
        await state.coordinator.aclose()
    except Exception:
        logger.exception("Coordinator shutdown failed.")
    reset_task_store()


async def run(state: AppState) -> None:
    try:
        if getattr(state.settings, "console_enabled", True):
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Nothing to run; press Ctrl+C to stop.")
            await asyncio.Event().wait()
    finally:
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/todo")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "todo"))

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run(state))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
