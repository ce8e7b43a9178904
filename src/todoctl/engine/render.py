# src/todoctl/engine/render.py

"""
Rendering helpers for CLI output.

This module is responsible for:
- task listings (list / find),
- structured task detail view (show),
- status counts (stats),
- Markdown export and JSON output.

It is presentation-only: it returns or prints text and never touches
the store.
"""

from __future__ import annotations

import json
import re
import shutil
import sys
import textwrap
from datetime import datetime
from typing import Iterable, Optional, Sequence

from .model import Priority, Status, Task
from .ops import task_to_dict
from .parse import parse_timestamp


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

_RESET = "\033[0m"
_DIM = "\033[90m"

_COLOR = {
    Status.TODO: "",
    Status.DOING: "\033[33m",    # yellow
    Status.DONE: "\033[90m",     # grey
    Status.BLOCKED: "\033[31m",  # red
}

_PRIORITY_COLOR = {
    Priority.HIGH: "\033[31m",
    Priority.MEDIUM: "\033[33m",
    Priority.LOW: "\033[32m",
}

_STATUS_ICON = {
    Status.TODO: "○",
    Status.DOING: "◐",
    Status.DONE: "●",
    Status.BLOCKED: "✖",
}

_PRIORITY_ICON = {
    Priority.HIGH: "🔴",
    Priority.MEDIUM: "🟡",
    Priority.LOW: "🟢",
}

NO_TASKS = "No tasks found."


def _supports_color() -> bool:
    """Return True if stdout is a TTY."""
    return sys.stdout.isatty()


def _visible_len(s: str) -> int:
    """Return string length without ANSI colour escapes."""
    return len(_ANSI_RE.sub("", s))


def _paint(s: str, code: str, color: bool) -> str:
    if not code or not (color and _supports_color()):
        return s
    return f"{code}{s}{_RESET}"


def status_icon(status: Status) -> str:
    return _STATUS_ICON.get(status, "○")


def priority_icon(priority: Priority) -> str:
    return _PRIORITY_ICON.get(priority, "⚪")


def short_date(value: Optional[str | datetime]) -> str:
    """
    Render a stored date as e.g. 'Mar 1'.

    Strings that are not dates are returned unchanged.
    """
    if value is None or value == "":
        return ""
    dt = value if isinstance(value, datetime) else parse_timestamp(value)
    if dt is None:
        return str(value)
    return f"{dt.strftime('%b')} {dt.day}"


def format_tags(tags: Iterable[str]) -> str:
    tags = list(tags)
    return " ".join(f"#{t}" for t in tags)


# ---------------------------------------------------------------------
# One-line summaries (used after mutations)
# ---------------------------------------------------------------------

def added_line(task: Task) -> str:
    """
    Format: `Added: <text> (<extras>) [<id>]`; extras omit defaults.
    """
    extras: list[str] = []
    if task.priority is not Priority.MEDIUM:
        extras.append(f"{priority_icon(task.priority)} {task.priority.value}")
    if task.tags:
        extras.append(format_tags(task.tags))
    if task.due:
        extras.append(f"📅 {short_date(task.due)}")
    extra = f" ({', '.join(extras)})" if extras else ""
    return f"✓ Added: {task.text}{extra} [{task.id}]"


# ---------------------------------------------------------------------
# Task listings
# ---------------------------------------------------------------------

def render_list(tasks: Sequence[Task], *, title: str = "TASKS", color: bool = True) -> None:
    """
    Print a task listing, or NO_TASKS when empty.

    Format per task:
      <status icon> <priority icon> <text> 📅 <due> #tags
        └─ [<id>] <status>
    """
    if not tasks:
        print(NO_TASKS)
        return

    print()
    print(f"  {title}")
    print("  " + "─" * 50)

    for task in tasks:
        line = f"  {status_icon(task.status)} {priority_icon(task.priority)} {task.text}"
        if task.due:
            line += f" 📅 {short_date(task.due)}"
        if task.tags:
            line += " " + format_tags(task.tags)
        print(line)

        status = _paint(task.status.value, _COLOR.get(task.status, ""), color)
        print(f"    └─ {_paint(f'[{task.id}]', _DIM, color)} {status}")

    print()


def render_json(data: Task | Sequence[Task]) -> str:
    """
    Return JSON text for one task or a list, shaped like the store.
    """
    if isinstance(data, Task):
        payload: object = task_to_dict(data)
    else:
        payload = [task_to_dict(t) for t in data]
    return json.dumps(payload, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------
# Task detail view (show)
# ---------------------------------------------------------------------

def render_task_detail(task: Task, *, color: bool = True) -> None:
    """
    Render a structured task detail view.

    Width is capped at 80 characters.
    """
    width = min(80, shutil.get_terminal_size(fallback=(80, 24)).columns)
    inner_w = max(20, width - 4)  # borders + padding

    def wrap_lines(s: str, *, indent: str = "") -> list[str]:
        out: list[str] = []
        for ln in s.rstrip().splitlines() or [""]:
            wrapped = textwrap.wrap(
                ln,
                width=inner_w - len(indent),
                break_long_words=False,
                break_on_hyphens=False,
            ) or [""]
            out.extend([indent + x for x in wrapped])
        return out

    def box_rule(ch: str = "-") -> None:
        print(f"+{ch * (width - 2)}+")

    def box_line(content: str = "") -> None:
        raw = content[:inner_w] if _visible_len(content) == len(content) else content
        pad = inner_w - _visible_len(raw)
        if pad > 0:
            raw = raw + (" " * pad)
        print(f"| {raw} |")

    status_text = _paint(task.status.value, _COLOR.get(task.status, ""), color)
    priority_text = _paint(task.priority.value, _PRIORITY_COLOR.get(task.priority, ""), color)

    print()
    box_rule("=")
    for ln in wrap_lines(task.text):
        box_line(ln)
    box_rule("=")

    box_line(f"id: {task.id}")
    box_line(f"status: {status_text}")
    box_line(f"priority: {priority_text}")
    if task.created:
        box_line(f"created: {task.created.isoformat(timespec='seconds')}")
    if task.completed:
        box_line(f"completed: {task.completed.isoformat(timespec='seconds')}")
    if task.due:
        due_at = task.due_at
        shown = due_at.date().isoformat() if due_at else task.due
        box_line(f"due: {shown}")

    if task.tags:
        box_rule()
        box_line("Tags:")
        for ln in wrap_lines(format_tags(task.tags), indent="  "):
            box_line(ln)

    box_rule("=")
    print()


# ---------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------

def render_stats(counts: dict[Status, int]) -> None:
    labels = [
        (Status.TODO, "Todo:"),
        (Status.DOING, "Doing:"),
        (Status.DONE, "Done:"),
        (Status.BLOCKED, "Blocked:"),
    ]

    print()
    print("  STATS")
    print("  " + "─" * 30)
    for status, label in labels:
        print(f"  {status_icon(status)} {label:<9} {counts.get(status, 0)}")
    print("  " + "─" * 17)
    print(f"  {'Total:':<11} {sum(counts.values())}")
    print()


# ---------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------

def render_markdown(tasks: Iterable[Task]) -> str:
    """
    Export the list as Markdown checklists.

    Active tasks come first, ordered by priority only; completed tasks
    follow in store order. Empty sections are omitted.
    """
    items = list(tasks)
    active = sorted([t for t in items if not t.is_done], key=lambda t: t.priority_rank)
    done = [t for t in items if t.is_done]

    out = ["# TODO List", ""]

    if active:
        out.append("## Active")
        for t in active:
            line = f"- [ ] {priority_icon(t.priority)} {t.text}"
            if t.tags:
                line += " " + format_tags(t.tags)
            if t.due:
                line += f" (Due: {short_date(t.due)})"
            line += f" <!-- id: {t.id} -->"
            out.append(line)
        out.append("")

    if done:
        out.append("## Completed")
        for t in done:
            out.append(f"- [x] {t.text} <!-- id: {t.id} -->")
        out.append("")

    return "\n".join(out)
