# src/todo_app/cli/main.py

"""
CLI entrypoint.

Initializes logging, parses the command line, opens the task store and runs
exactly one command. Exit status: 0 on success, 1 on store errors, 2 on
usage errors (raised by argparse before the store is opened).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from ..cli.bootstrap import create_initial_state
from ..cli.commands import parse_command_line, registry
from ..config import get_settings
from ..logging_setup import setup_logging
from ..tasks.task_errors import TaskStoreError

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()

    level = getattr(logging, str(settings.log_level).upper(), logging.WARNING)
    console_level = level if isinstance(level, int) else logging.WARNING
    setup_logging(
        log_dir=settings.data_dir,
        console_level=console_level,
        log_to_file=settings.log_to_file,
    )

    args = parse_command_line(argv, prog=settings.app_name)
    logger.debug("Starting %s command=%s", settings.app_name, args.command)

    state = None
    try:
        state = create_initial_state(settings=settings)
        registry.handle(state, args)
    except TaskStoreError as exc:
        logger.debug("Command %s failed.", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if state is not None:
            state.task_store.close()

    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
