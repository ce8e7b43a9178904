# src/todoctl/engine/resolve.py

"""
Task reference resolution.

Maps a user-typed id or id prefix to a single task in a collection.
"""

from typing import Sequence

from .model import Task
from .validate import NotFound


def resolve_index(tasks: Sequence[Task], ref: str) -> int:
    """
    Return the position of the task referenced by `ref`.

    Rules:
    - An exact id match wins, wherever it sits in the collection.
    - Otherwise the first task (collection order) whose id starts with `ref`.
    - Ambiguous prefixes are not reported; first match wins.
    """
    key = (ref or "").strip()
    if not key:
        raise NotFound(ref or "")

    for i, task in enumerate(tasks):
        if task.id == key:
            return i

    for i, task in enumerate(tasks):
        if task.id.startswith(key):
            return i

    raise NotFound(key)


def resolve_task(tasks: Sequence[Task], ref: str) -> Task:
    """Return the task referenced by `ref` (see resolve_index)."""
    return tasks[resolve_index(tasks, ref)]
