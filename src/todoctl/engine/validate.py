# src/todoctl/engine/validate.py

"""
Error types and store validation rules.

This module defines the exceptions used for command flow control and
validates a loaded task collection against document-wide rules.

It does NOT perform parsing or file IO.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from .model import Status, Task


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class ValidationError(Exception):
    """
    Fatal validation error used for command flow control.

    Raised when an operation must abort without touching the store.
    """


class NotFound(ValidationError):
    """
    No task matches the given id or id prefix.
    """

    def __init__(self, ref: str) -> None:
        super().__init__(f"Task not found: {ref}")
        self.ref = ref


class Rejected(ValidationError):
    """
    Input failed validation; nothing was changed.
    """


# ---------------------------------------------------------------------
# Result objects
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """
    A single validation problem.

    `code` is a stable identifier suitable for tests and future filtering.
    """

    code: str
    message: str
    task_id: str = ""


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Aggregated validation result for a store document.
    """

    path: str
    issues: Sequence[ValidationIssue]

    @property
    def ok(self) -> bool:
        return not self.issues


# ---------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------

def validate_tasks(tasks: Iterable[Task], *, path: str = "") -> ValidationResult:
    """
    Validate a task collection against document-wide rules.

    Notes:
    - Unreadable records are already dropped by the parser; tasks built
      in memory still go through `Task.validate`.
    - A done task without `completed` is reported but harmless.
    - A due string that is not a date stays listed but never counts as
      overdue.
    """
    issues: list[ValidationIssue] = []
    seen: set[str] = set()

    for task in tasks:
        if task.id in seen:
            issues.append(
                ValidationIssue(
                    code="duplicate_id",
                    message=f"Duplicate id '{task.id}'",
                    task_id=task.id,
                )
            )
        seen.add(task.id)

        try:
            task.validate()
        except ValueError as e:
            issues.append(
                ValidationIssue(
                    code="model_invariant",
                    message=str(e),
                    task_id=task.id,
                )
            )

        if task.status is Status.DONE and task.completed is None:
            issues.append(
                ValidationIssue(
                    code="completed_missing",
                    message="Done task has no completed timestamp",
                    task_id=task.id,
                )
            )

        if task.due and task.due_at is None:
            issues.append(
                ValidationIssue(
                    code="due_unparsed",
                    message=f"Due date is not a recognisable date: '{task.due}'",
                    task_id=task.id,
                )
            )

    return ValidationResult(path=path, issues=tuple(issues))
