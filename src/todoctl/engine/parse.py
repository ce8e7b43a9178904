# src/todoctl/engine/parse.py

"""
Store document parser.

Parses the JSON store document into in-memory Task models.

Document structure:
- root: JSON array
- each element: object with id, text, status, priority, created,
  completed, due, tags

This module performs *structural* parsing only. Whole-document problems
raise ParseError; callers at the storage boundary decide what to do with
it. Individual unusable records are skipped with a warning.
Model-level invariants are enforced via Task.validate().
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from dateutil import parser as dtparser

from .model import Priority, Status, Task, merge_tags

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParseError(Exception):
    """
    Raised when store contents are syntactically or structurally invalid.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


# ---------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------

def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """
    Parse a date or date-time string into an aware UTC datetime.

    Naive values are taken as UTC, so "2026-03-01" is midnight UTC.
    Returns None when the value is empty or not recognisable.
    """
    if not isinstance(raw, str) or not raw.strip():
        return None

    # Offsets near year 1 / 9999 overflow on conversion to UTC.
    try:
        dt = dtparser.parse(raw.strip())
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def format_timestamp(dt: datetime) -> str:
    """Render a datetime as `YYYY-MM-DDTHH:MM:SS.mmmZ`."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_due(raw: Optional[str]) -> Optional[str]:
    """
    Normalise user input for a due date.

    Recognisable dates become an ISO UTC timestamp; anything else is kept
    as typed (trimmed). Empty input clears the due date.
    """
    s = (raw or "").strip()
    if not s:
        return None

    dt = parse_timestamp(s)
    if dt is None:
        logger.debug("Unrecognised due date kept as given: %r", s)
        return s
    return format_timestamp(dt)


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse_store(text: str, path: str = "<store>") -> list[Task]:
    """
    Parse a store document into Task models (document order preserved).

    Raises ParseError when the text is not JSON or the root is not an
    array.
    """
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise ParseError(path, f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise ParseError(path, "JSON root must be an array")

    tasks: list[Task] = []
    for i, item in enumerate(data):
        try:
            tasks.append(parse_task_record(item, where=f"{path}[{i}]"))
        except ParseError as e:
            logger.warning("Skipping unreadable task record: %s", e)

    return tasks


def parse_task_record(data: Any, *, where: str = "<record>") -> Task:
    """
    Parse one JSON object into a Task.

    id and text are required; every other field degrades to its default.
    """
    if not isinstance(data, dict):
        raise ParseError(where, "Task record must be an object")

    task_id = _require_str_field(where, data, "id")
    text = _require_str_field(where, data, "text")

    task = Task(
        id=task_id,
        text=text,
        status=_parse_status(where, data),
        priority=_parse_priority(where, data),
        created=parse_timestamp(data.get("created")),
        completed=parse_timestamp(data.get("completed")),
        due=_optional_str_field(data, "due"),
        tags=_parse_tags(data),
    )

    try:
        task.validate()
    except ValueError as e:
        raise ParseError(where, str(e)) from e

    return task


# ---------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------

def _require_str_field(where: str, data: dict[str, Any], key: str) -> str:
    if key not in data:
        raise ParseError(where, f"Missing required key: {key}")

    value = data[key]
    if not isinstance(value, str):
        raise ParseError(where, f"Key '{key}' must be a string")

    if not value.strip():
        raise ParseError(where, f"Key '{key}' must be a non-empty string")

    return value


def _optional_str_field(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _parse_status(where: str, data: dict[str, Any]) -> Status:
    raw = data.get("status")
    try:
        return Status(str(raw).strip().lower())
    except ValueError:
        logger.debug("%s: unknown status %r, using todo", where, raw)
        return Status.TODO


def _parse_priority(where: str, data: dict[str, Any]) -> Priority:
    raw = data.get("priority")
    priority = Priority.parse(raw if isinstance(raw, str) else None)
    if priority is None:
        logger.debug("%s: unknown priority %r, using medium", where, raw)
        return Priority.MEDIUM
    return priority


def _parse_tags(data: dict[str, Any]) -> list[str]:
    raw = data.get("tags")
    if not isinstance(raw, list):
        return []
    return merge_tags([], [t for t in raw if isinstance(t, str)])
