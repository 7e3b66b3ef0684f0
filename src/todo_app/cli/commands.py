# src/todo_app/cli/commands.py

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Sequence
from typing import Any

from .. import __version__
from ..core.ports import TaskRepo
from ..core.state import AppState
from ..tasks.task_models import Task, now_local

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, argparse.Namespace, CommandEmitter], None]
ArgumentsConfigurer = Callable[[argparse.ArgumentParser], None]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Sub-command registry: builds the argparse front end and routes parsed args."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._configure: dict[str, ArgumentsConfigurer | None] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        configure: ArgumentsConfigurer | None = None,
    ) -> None:
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        self._configure[key] = configure

    def build_parser(self, prog: str = "todo") -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog=prog, description="Keep a to-do list in a local SQLite file.")
        parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

        sub = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)
        for name, help_text in self._help.items():
            cmd_parser = sub.add_parser(name, help=help_text, description=help_text)
            configure = self._configure.get(name)
            if configure is not None:
                configure(cmd_parser)
        return parser

    def handle(
        self,
        state: AppState,
        args: argparse.Namespace,
        emit: CommandEmitter = print,
    ) -> None:
        name = str(getattr(args, "command", "") or "").lower()
        handler = self._handlers.get(name)
        if handler is None:
            raise ValueError(f"Unknown command: {name!r}")

        logger.debug("Dispatching command=%s", name)
        handler(state, args, emit)


registry = CommandRegistry()


# ---- argument types ----

# Ids are unsigned 32-bit values.
MAX_TASK_ID = 2**32 - 1


def task_id_arg(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid task id: {raw!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"task id must not be negative: {raw!r}")
    if value > MAX_TASK_ID:
        raise argparse.ArgumentTypeError(f"task id must not exceed {MAX_TASK_ID}: {raw!r}")
    return value


class _JoinWords(argparse.Action):
    """Join `add buy some milk` into a single description."""

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> None:
        words = [values] if isinstance(values, str) else list(values or [])
        text = " ".join(w.strip() for w in words if w.strip())
        if not text:
            raise argparse.ArgumentError(self, "task text must not be empty")
        setattr(namespace, self.dest, text)


def _configure_add(p: argparse.ArgumentParser) -> None:
    p.add_argument("task", nargs="+", action=_JoinWords, metavar="TASK", help="The to-do item to add")


def _configure_task_id(help_text: str) -> ArgumentsConfigurer:
    def configure(p: argparse.ArgumentParser) -> None:
        p.add_argument("id", type=task_id_arg, help=help_text)

    return configure


def _configure_clear(p: argparse.ArgumentParser) -> None:
    scopes = p.add_subparsers(dest="scope", metavar="SCOPE", required=True)
    scopes.add_parser("all", help="Clear all to-do items")
    scopes.add_parser("old", help="Clear all to-do items created before now")


# ---- helpers ----


def emit_task_list(store: TaskRepo, emit: CommandEmitter) -> None:
    tasks = store.list_tasks()
    if not tasks:
        emit("No tasks found")
        return
    for task in tasks:
        emit(task.format_line())


def _set_completed(state: AppState, task_id: int, completed: bool, emit: CommandEmitter) -> None:
    # Raises TaskNotFoundError for unknown ids.
    task = state.task_store.get_task(task_id)
    if task.completed == completed:
        emit("Task already completed" if completed else "Task already not completed")
        return

    state.task_store.set_completed(task_id, completed)
    logger.info("Task id=%s completed=%s", task_id, completed)
    emit_task_list(state.task_store, emit)


# ---- handlers ----


def cmd_add(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> None:
    task = Task.new(args.task)
    task_id = state.task_store.add_task(task.description, created_at=task.created_at)
    logger.info("Task added id=%s", task_id)


def cmd_check(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> None:
    _set_completed(state, args.id, True, emit)


def cmd_uncheck(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> None:
    _set_completed(state, args.id, False, emit)


def cmd_remove(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> None:
    state.task_store.delete_task(args.id)
    emit(f"Removed task with id: {args.id}")


def cmd_clear(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> None:
    """
    clear all  -> delete every task
    clear old  -> delete tasks created before the current instant
                  (in practice every existing task)
    """
    if args.scope == "all":
        removed = state.task_store.delete_all()
        logger.info("Cleared all tasks removed=%s", removed)
        emit("Cleared all todos")
        return

    if args.scope == "old":
        removed = state.task_store.delete_created_before(now_local())
        logger.info("Cleared old tasks removed=%s", removed)
        emit("Cleared all overdue todos")
        return

    raise ValueError(f"Unknown clear scope: {args.scope!r}")


def cmd_list(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> None:
    emit_task_list(state.task_store, emit)


def parse_command_line(argv: Sequence[str] | None = None, *, prog: str = "todo") -> argparse.Namespace:
    """Parse argv; usage errors print help to stderr and exit with status 2."""
    return registry.build_parser(prog=prog).parse_args(argv)


registry.register("add", cmd_add, help_text="Add a to-do item", configure=_configure_add)
registry.register(
    "check",
    cmd_check,
    help_text="Complete a to-do item",
    configure=_configure_task_id("The task to complete"),
)
registry.register(
    "uncheck",
    cmd_uncheck,
    help_text="Uncheck a to-do item",
    configure=_configure_task_id("The task to uncomplete"),
)
registry.register(
    "remove",
    cmd_remove,
    help_text="Remove a to-do item",
    configure=_configure_task_id("The task to remove"),
)
registry.register("clear", cmd_clear, help_text="Clear to-do items: clear all | clear old", configure=_configure_clear)
registry.register("list", cmd_list, help_text="List all tasks")
