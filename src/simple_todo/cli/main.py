# src/simple_todo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (hydrating the stored list), then runs the
console REPL in the main thread. Pending writes are flushed on the way out.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def console_level_for(settings) -> int:
    """Console log level from settings.log_level; unknown names mean WARNING."""
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    level = getattr(logging, level_name, logging.WARNING)
    return level if isinstance(level, int) else logging.WARNING


def main() -> None:
    settings = get_settings()

    console_level = console_level_for(settings)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (storage=%s)...", settings.app_name, settings.storage_backend)

    state = create_initial_state(settings=settings)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled; nothing to run.")
    finally:
        shutdown_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
