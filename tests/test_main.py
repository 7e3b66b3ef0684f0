# tests/test_main.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from todo_app.cli import main as main_mod
from todo_app.core.state import AppState
from todo_app.logging_setup import setup_logging

from .fakes import BrokenTaskRepo


@pytest.fixture()
def db_path(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "store" / "todo.db"
    monkeypatch.setenv("TODO_DB_PATH", str(path))
    monkeypatch.setenv("TODO_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("TODO_LOG_FILE", "false")
    # Leave pytest's own logging handlers alone.
    monkeypatch.setattr(main_mod, "setup_logging", lambda **kwargs: None)
    return path


def test_add_list_exit_zero(db_path: Path, capsys) -> None:
    assert main_mod.main(["add", "buy", "milk"]) == 0
    assert capsys.readouterr().out == ""

    assert main_mod.main(["list"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 1
    assert out[0].startswith("[ ] ID: 1, Description: buy milk, Created At: ")
    assert db_path.exists()


def test_list_on_fresh_database(db_path: Path, capsys) -> None:
    assert main_mod.main(["list"]) == 0
    assert capsys.readouterr().out == "No tasks found\n"


def test_check_twice(db_path: Path, capsys) -> None:
    main_mod.main(["add", "a"])
    assert main_mod.main(["check", "1"]) == 0
    assert capsys.readouterr().out.startswith("[X] ID: 1,")

    assert main_mod.main(["check", "1"]) == 0
    assert capsys.readouterr().out == "Task already completed\n"


def test_not_found_exits_non_zero(db_path: Path, capsys) -> None:
    assert main_mod.main(["check", "7"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error: Task with id 7 not found" in captured.err


def test_usage_error_never_opens_store(db_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_mod.main(["remove"])
    assert excinfo.value.code == 2
    assert not db_path.exists()


def test_store_error_exits_non_zero(db_path: Path, monkeypatch, capsys) -> None:
    def broken_state(*, settings=None):
        return AppState(settings=settings, task_store=BrokenTaskRepo())

    monkeypatch.setattr(main_mod, "create_initial_state", broken_state)

    assert main_mod.main(["list"]) == 1
    assert "Error: disk I/O error" in capsys.readouterr().err


def test_unusable_db_directory_exits_non_zero(tmp_path: Path, db_path: Path, monkeypatch, capsys) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", "utf-8")
    monkeypatch.setenv("TODO_DB_PATH", str(blocker / "todo.db"))

    assert main_mod.main(["list"]) == 1
    assert "Error: Cannot create directory" in capsys.readouterr().err


def test_clear_all_then_list(db_path: Path, capsys) -> None:
    main_mod.main(["add", "a"])
    main_mod.main(["add", "b"])

    assert main_mod.main(["clear", "all"]) == 0
    assert capsys.readouterr().out == "Cleared all todos\n"

    main_mod.main(["list"])
    assert capsys.readouterr().out == "No tasks found\n"


@pytest.mark.parametrize("command", ["check", "remove"])
def test_id_out_of_range_is_a_usage_error(db_path: Path, command) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_mod.main([command, "99999999999999999999"])
    assert excinfo.value.code == 2
    assert not db_path.exists()


def test_unusable_log_directory_still_runs_command(tmp_path: Path, db_path: Path, monkeypatch, capsys) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", "utf-8")
    monkeypatch.setenv("TODO_DATA_DIR", str(blocker / "logs"))
    monkeypatch.setenv("TODO_LOG_FILE", "true")
    monkeypatch.setattr(main_mod, "setup_logging", setup_logging)

    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        assert main_mod.main(["list"]) == 0
        assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)

    captured = capsys.readouterr()
    assert captured.out == "No tasks found\n"
    assert "File logging disabled" in captured.err
