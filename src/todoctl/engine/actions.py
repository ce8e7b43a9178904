# src/todoctl/engine/actions.py

"""
Task commands.

This module contains *all* operations the CLI can run against a store:
creation, queries, status transitions, field updates and removal.

Design principles:
- Every function takes the Store handle explicitly.
- Mutations load, resolve, change, then save the whole collection.
- Validation errors are raised before anything is written.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from .model import Priority, Status, Task, merge_tags
from .ops import create_task, utc_now
from .parse import parse_due
from .query import count_by_status, filter_tasks, search_tasks
from .resolve import resolve_index, resolve_task
from .store import Store
from .validate import Rejected

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------

def _update(store: Store, ref: str, change) -> Task:
    """
    Load, resolve `ref`, apply `change(task)`, save.

    NotFound leaves the store untouched.
    """
    tasks = store.load()
    task = resolve_task(tasks, ref)
    change(task)
    store.save(tasks)
    return task


def _set_status(task: Task, status: Status) -> None:
    task.status = status
    if status is Status.DONE:
        task.completed = utc_now()


# ---------------------------------------------------------------------
# Creation / queries
# ---------------------------------------------------------------------

def add_task(
    store: Store,
    text: str,
    *,
    priority: Optional[str] = None,
    tags: Iterable[str] = (),
    due: Optional[str] = None,
) -> Task:
    """
    Create a task and append it to the store.
    """
    tasks = store.load()
    task = create_task(tasks, text, priority=priority, tags=tags, due=due)
    tasks.append(task)
    store.save(tasks)
    logger.info("Added %s", task.id)
    return task


def list_tasks(
    store: Store,
    criterion: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> list[Task]:
    return filter_tasks(store.load(), criterion, now=now)


def find_tasks(store: Store, query: str) -> list[Task]:
    return search_tasks(store.load(), query)


def get_task(store: Store, ref: str) -> Task:
    return resolve_task(store.load(), ref)


def task_stats(store: Store) -> dict[Status, int]:
    return count_by_status(store.load())


# ---------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------

def complete_task(store: Store, ref: str) -> Task:
    """
    Mark a task done and stamp `completed`.
    """
    return _update(store, ref, lambda t: _set_status(t, Status.DONE))


def start_task(store: Store, ref: str) -> Task:
    return _update(store, ref, lambda t: _set_status(t, Status.DOING))


def block_task(store: Store, ref: str) -> Task:
    return _update(store, ref, lambda t: _set_status(t, Status.BLOCKED))


# ---------------------------------------------------------------------
# Field updates
# ---------------------------------------------------------------------

def set_priority(store: Store, ref: str, level: str) -> Task:
    """
    Change priority.

    Unlike add_task, an unknown level is rejected rather than coerced.
    """
    priority = Priority.parse(level)
    if priority is None:
        raise Rejected("Priority must be: high, medium, or low")

    def change(task: Task) -> None:
        task.priority = priority

    return _update(store, ref, change)


def set_due(store: Store, ref: str, raw: str) -> Task:
    due = parse_due(raw)

    def change(task: Task) -> None:
        task.due = due

    return _update(store, ref, change)


def add_tags(store: Store, ref: str, tags: Iterable[str]) -> Task:
    """
    Union tags into the task's tag list (first-seen order, no duplicates).
    """
    extra = list(tags)

    def change(task: Task) -> None:
        task.tags = merge_tags(task.tags, extra)

    return _update(store, ref, change)


def rename_task(store: Store, ref: str, text: str) -> Task:
    body = (text or "").strip()
    if not body:
        raise Rejected("Task text is required")

    def change(task: Task) -> None:
        task.text = body

    return _update(store, ref, change)


# ---------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------

def remove_task(store: Store, ref: str) -> Task:
    tasks = store.load()
    removed = tasks.pop(resolve_index(tasks, ref))
    store.save(tasks)
    logger.info("Removed %s", removed.id)
    return removed


def clear_completed(store: Store) -> int:
    """
    Drop every done task. Returns the number removed.

    The store is only rewritten when something was removed.
    """
    tasks = store.load()
    keep = [t for t in tasks if not t.is_done]
    removed = len(tasks) - len(keep)
    if removed:
        store.save(keep)
    logger.info("Cleared %d completed task(s)", removed)
    return removed
