# src/todoctl/engine/query.py

"""
Filtering, search and ordering of task collections.

All functions return new lists; the input sequence (and therefore the
store's own ordering) is never modified.
"""

from datetime import datetime, timezone
from typing import Final, Iterable, Optional

from .model import Priority, Status, Task


# ---------------------------------------------------------------------
# Criteria
# ---------------------------------------------------------------------

ALL: Final[str] = "all"
ACTIVE: Final[str] = "active"
DONE: Final[str] = "done"
OVERDUE: Final[str] = "overdue"

KEYWORDS: Final[tuple[str, ...]] = (ALL, ACTIVE, DONE, OVERDUE) + tuple(p.value for p in Priority)


def _now() -> datetime:
    """Return the current UTC time (isolated for testability)."""
    return datetime.now(timezone.utc)


def is_overdue(task: Task, now: datetime) -> bool:
    """Active, with a recognisable due date strictly before `now`."""
    if task.is_done:
        return False
    due = task.due_at
    return due is not None and due < now


def filter_tasks(
    tasks: Iterable[Task],
    criterion: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> list[Task]:
    """
    Select tasks matching `criterion` and return them in list order.

    Criteria:
    - None / "" / "active": status is not done (default)
    - "all": every task
    - "done": status is done
    - "overdue": active with a due date in the past
    - "high" / "medium" / "low": active tasks of that priority
    - anything else: tasks carrying that literal tag
    """
    crit = (criterion or ACTIVE).strip() or ACTIVE
    items = list(tasks)

    if crit == ALL:
        selected = items
    elif crit == ACTIVE:
        selected = [t for t in items if not t.is_done]
    elif crit == DONE:
        selected = [t for t in items if t.is_done]
    elif crit == OVERDUE:
        ref = now or _now()
        selected = [t for t in items if is_overdue(t, ref)]
    elif crit in {p.value for p in Priority}:
        level = Priority(crit)
        selected = [t for t in items if t.priority is level and not t.is_done]
    else:
        selected = [t for t in items if crit in t.tags]

    return sort_tasks(selected)


def search_tasks(tasks: Iterable[Task], text: str) -> list[Task]:
    """
    Case-insensitive substring search over task text and tags.

    Status is ignored. Results are ordered by priority only.
    """
    needle = (text or "").lower()
    hits = [
        t
        for t in tasks
        if needle in t.text.lower() or any(needle in tag.lower() for tag in t.tags)
    ]
    return sorted(hits, key=lambda t: t.priority_rank)


# ---------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------

_NO_DUE: Final[datetime] = datetime.max.replace(tzinfo=timezone.utc)


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    """
    Default ordering for listings:

    1. Priority (high > medium > low)
    2. Tasks with a due date before tasks without, earlier due first
    3. Original order (stable sort)
    """

    def key(t: Task) -> tuple[int, int, datetime]:
        due = t.due_at
        if due is None:
            return (t.priority_rank, 1, _NO_DUE)
        return (t.priority_rank, 0, due)

    return sorted(tasks, key=key)


# ---------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------

def count_by_status(tasks: Iterable[Task]) -> dict[Status, int]:
    """Count tasks per status; every status is present in the result."""
    counts = {s: 0 for s in Status}
    for t in tasks:
        counts[t.status] += 1
    return counts
