# tests/test_query.py

from __future__ import annotations

import random
from datetime import datetime, timezone

from todoctl.engine.model import Priority, Status
from todoctl.engine.query import count_by_status, filter_tasks, search_tasks, sort_tasks

NOW = datetime(2026, 2, 1, tzinfo=timezone.utc)


def _collection(make_task):
    return [
        make_task("a1", "Write spec", tags=["work"]),
        make_task("b2", "Buy milk", status=Status.DONE, tags=["home"]),
        make_task("c3", "Fix bug", priority=Priority.HIGH, due="2026-01-10T00:00:00.000Z"),
        make_task("d4", "Plan trip", priority=Priority.HIGH, due="2026-03-01T00:00:00.000Z", tags=["Home"]),
        make_task("e5", "Read book", priority=Priority.LOW, status=Status.BLOCKED),
        make_task("f6", "Old chore", status=Status.DONE, due="2025-12-01T00:00:00.000Z"),
        make_task("g7", "Vague", due="someday"),
    ]


def test_default_is_active(make_task) -> None:
    tasks = _collection(make_task)
    assert filter_tasks(tasks) == filter_tasks(tasks, "active")
    assert all(not t.is_done for t in filter_tasks(tasks))


def test_active_and_done_partition(make_task) -> None:
    tasks = _collection(make_task)
    active = {t.id for t in filter_tasks(tasks, "active")}
    done = {t.id for t in filter_tasks(tasks, "done")}
    assert active.isdisjoint(done)
    assert active | done == {t.id for t in tasks}
    assert len(filter_tasks(tasks, "all")) == len(tasks)


def test_overdue_subset_of_active(make_task) -> None:
    tasks = _collection(make_task)
    overdue = filter_tasks(tasks, "overdue", now=NOW)
    active_ids = {t.id for t in filter_tasks(tasks, "active")}

    assert [t.id for t in overdue] == ["c3"]
    for t in overdue:
        assert t.id in active_ids
        assert t.due_at < NOW


def test_priority_criterion_excludes_done(make_task) -> None:
    tasks = _collection(make_task) + [make_task("h8", priority=Priority.HIGH, status=Status.DONE)]
    assert [t.id for t in filter_tasks(tasks, "high")] == ["c3", "d4"]
    assert [t.id for t in filter_tasks(tasks, "low")] == ["e5"]


def test_tag_criterion_is_exact(make_task) -> None:
    tasks = _collection(make_task)
    assert [t.id for t in filter_tasks(tasks, "home")] == ["b2"]
    assert [t.id for t in filter_tasks(tasks, "Home")] == ["d4"]
    assert filter_tasks(tasks, "nothing") == []


def test_sort_order_priority_then_due_then_stable(make_task) -> None:
    tasks = _collection(make_task)
    assert [t.id for t in filter_tasks(tasks, "all")] == ["c3", "d4", "f6", "a1", "b2", "g7", "e5"]


def test_sort_property_holds_for_shuffled_input(make_task) -> None:
    rng = random.Random(7)
    dues = [None, "2026-01-01", "2026-01-05", "2026-02-10"]
    tasks = []
    for i in range(60):
        d = rng.choice(dues)
        tasks.append(
            make_task(
                f"t{i}",
                priority=rng.choice(list(Priority)),
                due=f"{d}T00:00:00.000Z" if d else None,
            )
        )

    out = sort_tasks(tasks)
    for a, b in zip(out, out[1:]):
        if a.priority_rank != b.priority_rank:
            assert a.priority_rank < b.priority_rank
            continue
        if a.due_at is not None and b.due_at is not None:
            assert a.due_at <= b.due_at
        else:
            assert not (a.due_at is None and b.due_at is not None)


def test_filter_does_not_reorder_input(make_task) -> None:
    tasks = _collection(make_task)
    before = [t.id for t in tasks]
    filter_tasks(tasks, "all")
    assert [t.id for t in tasks] == before


def test_search_matches_text_or_tags_ignoring_case_and_status(make_task) -> None:
    tasks = _collection(make_task)
    assert [t.id for t in search_tasks(tasks, "HOME")] == ["d4", "b2"]
    assert [t.id for t in search_tasks(tasks, "bu")] == ["c3", "b2"]
    assert search_tasks(tasks, "zzz") == []


def test_search_sorts_by_priority_only(make_task) -> None:
    tasks = [
        make_task("x1", "alpha", due="2026-01-01T00:00:00.000Z"),
        make_task("x2", "alpha"),
        make_task("x3", "alpha", due="2025-01-01T00:00:00.000Z"),
        make_task("x4", "alpha", priority=Priority.HIGH),
    ]
    assert [t.id for t in search_tasks(tasks, "alpha")] == ["x4", "x1", "x2", "x3"]


def test_count_by_status(make_task) -> None:
    counts = count_by_status(_collection(make_task))
    assert counts == {Status.TODO: 4, Status.DOING: 0, Status.DONE: 2, Status.BLOCKED: 1}
    assert count_by_status([]) == {s: 0 for s in Status}
