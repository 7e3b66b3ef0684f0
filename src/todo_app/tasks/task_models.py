# src/todo_app/tasks/task_models.py

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from .task_errors import TaskStoreError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# id, description, completed, created_at
_ROW_WIDTH = 4


def now_local() -> datetime:
    return datetime.now().astimezone()


@dataclass(slots=True)
class Task:
    id: int
    description: str
    completed: bool
    created_at: datetime

    @classmethod
    def new(cls, description: str, *, now: datetime | None = None) -> Task:
        """Unsaved task; the store assigns the real id on insert."""
        return cls(
            id=0,
            description=description,
            completed=False,
            created_at=now if now is not None else now_local(),
        )

    def format_line(self) -> str:
        marker = "X" if self.completed else " "
        created = self.created_at.strftime(TIMESTAMP_FORMAT)
        return f"[{marker}] ID: {self.id}, Description: {self.description}, Created At: {created}"

    def __str__(self) -> str:
        return self.format_line()


def timestamp_to_db(ts: datetime) -> str:
    """
    Serialize a timestamp for the created_at column.

    Naive values are taken as local time. The offset is kept so the zone
    captured at creation survives a round trip; SQLite's julianday() accepts
    this form when comparing instants.
    """
    if ts.tzinfo is None:
        ts = ts.astimezone()

    # julianday() only parses whole-minute offsets (some historical zones carry seconds).
    offset = ts.utcoffset() or timedelta(0)
    if offset % timedelta(minutes=1):
        minutes = int(offset.total_seconds() / 60)
        ts = ts.astimezone(timezone(timedelta(minutes=minutes)))
    return ts.isoformat(sep=" ")


def timestamp_from_db(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw.strip():
        try:
            value = datetime.fromisoformat(raw.strip())
        except ValueError as exc:
            raise TaskStoreError(f"Malformed created_at value: {raw!r}") from exc
    else:
        raise TaskStoreError(f"Malformed created_at value: {raw!r}")

    # CURRENT_TIMESTAMP (the column default) is written in UTC without an offset.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def task_from_row(row: Sequence[Any]) -> Task:
    """Map a (id, description, completed, created_at) row onto a Task."""
    if len(row) != _ROW_WIDTH:
        raise TaskStoreError(f"Expected {_ROW_WIDTH} columns in task row, got {len(row)}")

    raw_id, raw_description, raw_completed, raw_created_at = tuple(row)

    if isinstance(raw_id, bool) or not isinstance(raw_id, int):
        raise TaskStoreError(f"Malformed task id: {raw_id!r}")
    if not isinstance(raw_description, str) or not raw_description:
        raise TaskStoreError(f"Malformed description for task {raw_id}")
    if raw_completed not in (0, 1):
        raise TaskStoreError(f"Malformed completed flag for task {raw_id}: {raw_completed!r}")

    return Task(
        id=raw_id,
        description=raw_description,
        completed=bool(raw_completed),
        created_at=timestamp_from_db(raw_created_at),
    )
