# tests/test_ops.py

from __future__ import annotations

import json
import logging

import pytest

from todoctl.engine.model import Priority, Status
from todoctl.engine.ops import create_task, new_task_id, render_store, task_to_dict
from todoctl.engine.validate import Rejected


def test_create_task_defaults() -> None:
    task = create_task([], "Write spec")

    assert task.text == "Write spec"
    assert task.status is Status.TODO
    assert task.priority is Priority.MEDIUM
    assert task.tags == []
    assert task.completed is None
    assert task.due is None
    assert task.created is not None
    assert task.created.microsecond % 1000 == 0


def test_create_task_rejects_empty_text() -> None:
    with pytest.raises(Rejected):
        create_task([], "   ")


def test_create_task_coerces_unknown_priority(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="todoctl.engine.ops"):
        task = create_task([], "Something", priority="urgent")

    assert task.priority is Priority.MEDIUM
    assert "Invalid priority: urgent. Using medium." in caplog.text


def test_create_task_accepts_known_priority_without_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        task = create_task([], "Something", priority="High")

    assert task.priority is Priority.HIGH
    assert caplog.records == []


def test_create_task_tags_and_due() -> None:
    task = create_task([], "t", tags=["work", "home", "work"], due="2026-03-01")
    assert task.tags == ["work", "home"]
    assert task.due == "2026-03-01T00:00:00.000Z"

    loose = create_task([], "t", due="someday")
    assert loose.due == "someday"


def test_new_ids_are_unique_among_existing() -> None:
    existing = []
    for _ in range(200):
        task = create_task(existing, "t")
        assert task.id not in {t.id for t in existing}
        existing.append(task)


def test_new_task_id_skips_taken(monkeypatch: pytest.MonkeyPatch) -> None:
    picks = iter(["aaaa", "aaaa", "bbbb"])
    monkeypatch.setattr("todoctl.engine.ops.random.choices", lambda alphabet, k: list(next(picks)))
    monkeypatch.setattr("todoctl.engine.ops.time.time", lambda: 0)

    assert new_task_id(["0aaaa"]) == "0bbbb"


def test_task_to_dict_field_names(make_task) -> None:
    data = task_to_dict(make_task("a1", "Write spec", tags=["x"]))
    assert list(data) == ["id", "text", "status", "priority", "created", "completed", "due", "tags"]
    assert data["created"] == "2026-01-01T09:00:00.000Z"
    assert data["completed"] is None
    assert data["status"] == "todo"


def test_render_store_is_json_array(make_task) -> None:
    text = render_store([make_task("a1"), make_task("b2")])
    assert text.endswith("\n")
    assert [d["id"] for d in json.loads(text)] == ["a1", "b2"]
