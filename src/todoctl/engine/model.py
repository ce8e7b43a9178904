# src/todoctl/engine/model.py

"""
Core domain models.

This module defines the in-memory representation of a task record,
its status / priority enums, and the rank helpers used for ordering.

No filesystem access should happen here.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------

class Status(str, Enum):
    """
    Task lifecycle status.

    todo -> doing -> done, with blocked as a side state.
    """

    TODO = "todo"
    DOING = "doing"
    DONE = "done"
    BLOCKED = "blocked"


# ---------------------------------------------------------------------
# Priority
# ---------------------------------------------------------------------

class Priority(str, Enum):
    """
    Task priority.

    high > medium > low
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def sort_key(cls, priority: "Priority") -> int:
        """
        Return numeric rank for list ordering.

        Lower value = listed first.
        """
        order = {
            cls.HIGH: 0,
            cls.MEDIUM: 1,
            cls.LOW: 2,
        }
        return order[priority]

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["Priority"]:
        """Return the matching Priority, or None for unknown input."""
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return None


# ---------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------

@dataclass(slots=True)
class Task:
    """
    In-memory representation of a single task record.

    Notes:
    - id is generated once at creation and never changes.
    - created / completed are timezone-aware UTC datetimes.
    - due keeps the stored string; use `due_at` for comparisons.
    - completed is set when the task is marked done and is left in place
      if the status changes again afterwards.
    """

    # Identity / core metadata
    id: str
    text: str
    status: Status = Status.TODO
    priority: Priority = Priority.MEDIUM

    # Temporal fields
    created: Optional[datetime] = None
    completed: Optional[datetime] = None
    due: Optional[str] = None

    tags: list[str] = field(default_factory=list)

    # -----------------------------------------------------------------
    # Validation
    # -----------------------------------------------------------------

    def validate(self) -> None:
        """
        Validate core invariants independent of storage.
        """
        if not self.id or not self.id.strip():
            raise ValueError("id must be a non-empty string")

        if not self.text or not self.text.strip():
            raise ValueError("text must be a non-empty string")

        if len(set(self.tags)) != len(self.tags):
            raise ValueError("tags must not contain duplicates")

    # -----------------------------------------------------------------
    # Convenience properties
    # -----------------------------------------------------------------

    @property
    def is_done(self) -> bool:
        return self.status is Status.DONE

    @property
    def priority_rank(self) -> int:
        return Priority.sort_key(self.priority)

    @property
    def due_at(self) -> Optional[datetime]:
        """Parsed due date, or None when unset or not a recognisable date."""
        from .parse import parse_timestamp

        if not self.due:
            return None
        return parse_timestamp(self.due)


# ---------------------------------------------------------------------
# Tag helpers
# ---------------------------------------------------------------------

def merge_tags(existing: list[str], extra: list[str] | tuple[str, ...]) -> list[str]:
    """
    Union `extra` into `existing`, keeping first-seen order.

    Blank tags are dropped.
    """
    out: list[str] = []
    for tag in [*existing, *extra]:
        t = (tag or "").strip()
        if t and t not in out:
            out.append(t)
    return out
