# src/todoctl/engine/ops.py

"""
Task creation and storage rendering.

This module contains:
- task id generation,
- creation of new task records (with input normalisation),
- serialisation of Task objects back to the JSON document shape.

No parsing or file IO is performed here.
"""

from __future__ import annotations

import json
import logging
import random
import string
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Final, Iterable, Optional

from .model import Priority, Status, Task, merge_tags
from .parse import format_timestamp, parse_due
from .validate import Rejected

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Ids
# ---------------------------------------------------------------------

_ID_ALPHABET: Final[str] = string.digits + string.ascii_lowercase
_ID_SUFFIX_LEN: Final[int] = 4


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out: list[str] = []
    while n:
        n, r = divmod(n, 36)
        out.append(_ID_ALPHABET[r])
    return "".join(reversed(out))


def new_task_id(existing: Iterable[str] = ()) -> str:
    """
    Generate a short opaque id: base-36 millisecond clock + random suffix.

    Retries until the id is not in `existing`.
    """
    taken = set(existing)
    while True:
        stamp = _base36(int(time.time() * 1000))
        suffix = "".join(random.choices(_ID_ALPHABET, k=_ID_SUFFIX_LEN))
        task_id = stamp + suffix
        if task_id not in taken:
            return task_id


def utc_now() -> datetime:
    """Return the current UTC time at millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


# ---------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------

def create_task(
    existing: Sequence[Task],
    text: str,
    *,
    priority: Optional[str] = None,
    tags: Iterable[str] = (),
    due: Optional[str] = None,
) -> Task:
    """
    Build a new Task without persisting it.

    - Empty text is rejected.
    - Unknown priority is coerced to medium with a warning.
    - due is normalised leniently (see parse_due).
    """
    body = (text or "").strip()
    if not body:
        raise Rejected("Task text is required")

    level = Priority.MEDIUM
    if priority is not None and priority.strip():
        parsed = Priority.parse(priority)
        if parsed is None:
            logger.warning("Invalid priority: %s. Using medium.", priority)
        else:
            level = parsed

    return Task(
        id=new_task_id(t.id for t in existing),
        text=body,
        status=Status.TODO,
        priority=level,
        created=utc_now(),
        completed=None,
        due=parse_due(due),
        tags=merge_tags([], list(tags)),
    )


# ---------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------

def task_to_dict(task: Task) -> dict[str, Any]:
    """
    Return the JSON-ready mapping for one task (stable key order).
    """
    return {
        "id": task.id,
        "text": task.text,
        "status": task.status.value,
        "priority": task.priority.value,
        "created": format_timestamp(task.created) if task.created else None,
        "completed": format_timestamp(task.completed) if task.completed else None,
        "due": task.due,
        "tags": list(task.tags),
    }


def render_store(tasks: Iterable[Task]) -> str:
    """
    Render the full store document.
    """
    data = [task_to_dict(t) for t in tasks]
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
