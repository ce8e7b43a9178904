# tests/test_parse.py

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from todoctl.engine.model import Priority, Status
from todoctl.engine.parse import (
    ParseError,
    format_timestamp,
    parse_due,
    parse_store,
    parse_timestamp,
)


def test_parse_store_rejects_invalid_json() -> None:
    with pytest.raises(ParseError) as exc:
        parse_store("{not json", path="TODO.json")
    assert str(exc.value).startswith("TODO.json: Invalid JSON")


def test_parse_store_rejects_non_array_root() -> None:
    with pytest.raises(ParseError):
        parse_store('{"id": "a"}')


def test_parse_store_skips_unusable_records() -> None:
    text = json.dumps(
        [
            {"id": "a1", "text": "ok"},
            "not a record",
            {"id": "b2"},
            {"id": "", "text": "no id"},
            {"id": "c3", "text": "also ok"},
        ]
    )
    assert [t.id for t in parse_store(text)] == ["a1", "c3"]


def test_parse_store_coerces_unknown_enums() -> None:
    text = json.dumps(
        [
            {
                "id": "a1",
                "text": "t",
                "status": "archived",
                "priority": "urgent",
                "tags": ["x", "x", 3, "y"],
                "due": None,
            }
        ]
    )
    (task,) = parse_store(text)
    assert task.status is Status.TODO
    assert task.priority is Priority.MEDIUM
    assert task.tags == ["x", "y"]
    assert task.due is None
    assert task.created is None


def test_parse_store_reads_full_record() -> None:
    text = json.dumps(
        [
            {
                "id": "a1",
                "text": "t",
                "status": "done",
                "priority": "high",
                "created": "2026-01-01T09:00:00.000Z",
                "completed": "2026-01-02T10:30:00.250Z",
                "due": "2026-01-05T00:00:00.000Z",
                "tags": ["work"],
            }
        ]
    )
    (task,) = parse_store(text)
    assert task.status is Status.DONE
    assert task.priority is Priority.HIGH
    assert task.created == datetime(2026, 1, 1, 9, tzinfo=timezone.utc)
    assert task.completed == datetime(2026, 1, 2, 10, 30, 0, 250000, tzinfo=timezone.utc)
    assert task.due == "2026-01-05T00:00:00.000Z"


def test_timestamps() -> None:
    dt = parse_timestamp("2026-03-01")
    assert dt == datetime(2026, 3, 1, tzinfo=timezone.utc)
    assert format_timestamp(dt) == "2026-03-01T00:00:00.000Z"

    assert parse_timestamp("") is None
    assert parse_timestamp("someday") is None
    assert parse_timestamp(None) is None


def test_parse_due_normalises_or_keeps_raw() -> None:
    assert parse_due("2026-03-01") == "2026-03-01T00:00:00.000Z"
    assert parse_due("2026-03-01T12:00:00+02:00") == "2026-03-01T10:00:00.000Z"
    assert parse_due("  someday ") == "someday"
    assert parse_due("") is None
    assert parse_due(None) is None


def test_timestamps_outside_calendar_after_utc_shift() -> None:
    assert parse_timestamp("9999-12-31T23:59:59-01:00") is None
    assert parse_timestamp("0001-01-01T00:00:00+01:00") is None
    assert parse_due("9999-12-31T23:59:59-01:00") == "9999-12-31T23:59:59-01:00"


def test_parse_store_rejects_deeply_nested_json() -> None:
    with pytest.raises(ParseError) as exc:
        parse_store("[" * 200000, path="TODO.json")
    assert str(exc.value).startswith("TODO.json: Invalid JSON")
