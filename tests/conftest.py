# tests/conftest.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import pytest

from todoctl.engine.model import Priority, Status, Task
from todoctl.engine.store import Store, save_tasks

T0 = datetime(2026, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """
    Keep every test away from the real home directory and user settings.
    """
    for name in ("TODOCTL_FILE", "TODOCTL_FILE_NAME", "TODOCTL_GLOBAL_FILE", "TODOCTL_LOG_FILE", "TODOCTL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TODOCTL_CONFIG", str(tmp_path / "no-such-config.yml"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    yield

    # The CLI installs stderr handlers bound to capsys streams.
    root = logging.getLogger()
    for h in list(root.handlers):
        if getattr(h, "_todoctl", False):
            root.removeHandler(h)
            h.close()


@pytest.fixture()
def store(tmp_path: Path) -> Store:
    return Store(path=tmp_path / "TODO.json")


@pytest.fixture()
def make_task() -> Callable[..., Task]:
    """
    Factory for Task records with deterministic ids and timestamps.
    """

    def _make(
        task_id: str,
        text: str = "",
        *,
        status: Status = Status.TODO,
        priority: Priority = Priority.MEDIUM,
        due: str | None = None,
        tags: list[str] | None = None,
        completed: datetime | None = None,
    ) -> Task:
        return Task(
            id=task_id,
            text=text or f"task {task_id}",
            status=status,
            priority=priority,
            created=T0,
            completed=completed,
            due=due,
            tags=list(tags or []),
        )

    return _make


@pytest.fixture()
def seeded(store: Store, make_task) -> Store:
    """
    Store with five tasks, two of them done.
    """
    save_tasks(
        store.path,
        [
            make_task("a1", "Write spec", tags=["work"]),
            make_task("b2", "Buy milk", status=Status.DONE, completed=T0, tags=["home"]),
            make_task("c3", "Fix bug", priority=Priority.HIGH, due="2026-01-10T00:00:00.000Z"),
            make_task("d4", "Call mom", status=Status.DONE, completed=T0),
            make_task("e5", "Read book", priority=Priority.LOW, status=Status.BLOCKED),
        ],
    )
    return store
