# src/todoctl/cli.py

"""
Command-line interface for todoctl.

This module:
- defines argument parsing and subcommands,
- resolves the store location once per invocation,
- delegates all task logic to engine modules,
- prints results.

KISS rule: keep commands small and predictable.
"""

import argparse
import logging
from pathlib import Path

from todoctl.config import ConfigError, Settings, get_settings
from todoctl.engine import actions
from todoctl.engine.query import KEYWORDS
from todoctl.engine.render import (
    added_line,
    format_tags,
    priority_icon,
    render_json,
    render_list,
    render_markdown,
    render_stats,
    render_task_detail,
    short_date,
)
from todoctl.engine.scan import resolve_store_path
from todoctl.engine.store import Store
from todoctl.engine.validate import ValidationError, validate_tasks
from todoctl.logging_setup import setup_logging

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todoctl",
        description="Task list manager backed by a JSON file.",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=str,
        default=None,
        help="Use this store file (overrides TODOCTL_FILE and discovery)",
    )
    parser.add_argument(
        "-g",
        "--global",
        dest="use_global",
        action="store_true",
        help="Use the global task list",
    )
    parser.add_argument(
        "-C",
        "--cd",
        type=str,
        default=".",
        help="Work as if current directory is this path (default: .)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging on stderr",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    parser.set_defaults(func=cmd_list, criterion=None, json=False)

    sub = parser.add_subparsers(dest="command")

    # ------------------------------------------------------------------
    # Read-only commands
    # ------------------------------------------------------------------

    p_list = sub.add_parser(
        "list",
        help="List tasks (default: active)",
    )
    p_list.add_argument(
        "criterion",
        nargs="?",
        default=None,
        help=f"One of {', '.join(KEYWORDS)}, or a tag",
    )
    p_list.add_argument("--json", action="store_true", help="Output JSON")
    p_list.set_defaults(func=cmd_list)

    p_find = sub.add_parser(
        "find",
        help="Search task text and tags",
    )
    p_find.add_argument("query", nargs="+", help="Text to search for (case-insensitive)")
    p_find.add_argument("--json", action="store_true", help="Output JSON")
    p_find.set_defaults(func=cmd_find)

    p_show = sub.add_parser(
        "show",
        help="Show a single task",
    )
    p_show.add_argument("task_id", help="Task id or unique prefix")
    p_show.add_argument("--json", action="store_true", help="Output JSON")
    p_show.set_defaults(func=cmd_show)

    p_stats = sub.add_parser("stats", help="Show task counts by status")
    p_stats.set_defaults(func=cmd_stats)

    p_export = sub.add_parser("export", help="Print the list as Markdown")
    p_export.set_defaults(func=cmd_export)

    p_validate = sub.add_parser("validate", help="Check the store file for problems")
    p_validate.set_defaults(func=cmd_validate)

    p_where = sub.add_parser("where", help="Print the store file path")
    p_where.set_defaults(func=cmd_where)

    # ------------------------------------------------------------------
    # Create command
    # ------------------------------------------------------------------

    p_add = sub.add_parser(
        "add",
        help="Add a new task",
    )
    p_add.add_argument("text", nargs="+", help="Task text")
    p_add.add_argument(
        "-p",
        "--priority",
        type=str,
        default=None,
        help="high, medium or low (default: medium)",
    )
    p_add.add_argument(
        "-t",
        "--tag",
        action="append",
        default=[],
        help="Tag (repeatable)",
    )
    p_add.add_argument("-d", "--due", type=str, default=None, help="Due date, e.g. 2026-03-01")
    p_add.add_argument("--json", action="store_true", help="Output the created task as JSON")
    p_add.set_defaults(func=cmd_add)

    # ------------------------------------------------------------------
    # Write commands
    # ------------------------------------------------------------------

    for name, help_text in (
        ("done", "Mark task as done"),
        ("doing", "Mark task as in progress"),
        ("block", "Mark task as blocked"),
        ("rm", "Remove a task"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("task_id", help="Task id or unique prefix")
        p.set_defaults(func=_ID_COMMANDS[name])

    p_priority = sub.add_parser("priority", help="Set task priority")
    p_priority.add_argument("task_id", help="Task id or unique prefix")
    p_priority.add_argument("level", help="high, medium or low")
    p_priority.set_defaults(func=cmd_priority)

    p_due = sub.add_parser("due", help="Set task due date")
    p_due.add_argument("task_id", help="Task id or unique prefix")
    p_due.add_argument("date", help="Due date, e.g. 2026-03-01")
    p_due.set_defaults(func=cmd_due)

    p_tag = sub.add_parser("tag", help="Add tags to a task")
    p_tag.add_argument("task_id", help="Task id or unique prefix")
    p_tag.add_argument("tags", nargs="+", help="Tags to add")
    p_tag.set_defaults(func=cmd_tag)

    p_edit = sub.add_parser("edit", help="Replace task text")
    p_edit.add_argument("task_id", help="Task id or unique prefix")
    p_edit.add_argument("text", nargs="+", help="New task text")
    p_edit.set_defaults(func=cmd_edit)

    p_clear = sub.add_parser("clear", help="Remove all completed tasks")
    p_clear.set_defaults(func=cmd_clear)

    return parser


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def cmd_list(args: argparse.Namespace) -> int:
    tasks = actions.list_tasks(args.store, args.criterion)
    if args.json:
        print(render_json(tasks))
        return 0
    render_list(tasks, color=not args.no_color)
    return 0


def cmd_find(args: argparse.Namespace) -> int:
    query = " ".join(args.query).strip()
    tasks = actions.find_tasks(args.store, query)
    if args.json:
        print(render_json(tasks))
        return 0
    render_list(tasks, title=f"SEARCH: {query}", color=not args.no_color)
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    task = actions.get_task(args.store, args.task_id)
    if args.json:
        print(render_json(task))
        return 0
    render_task_detail(task, color=not args.no_color)
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    render_stats(actions.task_stats(args.store))
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    print(render_markdown(args.store.load()))
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    store: Store = args.store
    res = validate_tasks(store.load(), path=str(store.path))
    if res.ok:
        return 0

    print(f"{res.path}")
    for issue in res.issues:
        where = f" [{issue.task_id}]" if issue.task_id else ""
        print(f"  - {issue.code}{where}: {issue.message}")
    return 1


def cmd_where(args: argparse.Namespace) -> int:
    print(args.store.path)
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    task = actions.add_task(
        args.store,
        " ".join(args.text),
        priority=args.priority,
        tags=args.tag,
        due=args.due,
    )
    if args.json:
        print(render_json(task))
    else:
        print(added_line(task))
    return 0


def cmd_done(args: argparse.Namespace) -> int:
    task = actions.complete_task(args.store, args.task_id)
    print(f"✓ Completed: {task.text}")
    return 0


def cmd_doing(args: argparse.Namespace) -> int:
    task = actions.start_task(args.store, args.task_id)
    print(f"◐ In progress: {task.text}")
    return 0


def cmd_block(args: argparse.Namespace) -> int:
    task = actions.block_task(args.store, args.task_id)
    print(f"✖ Blocked: {task.text}")
    return 0


def cmd_rm(args: argparse.Namespace) -> int:
    task = actions.remove_task(args.store, args.task_id)
    print(f"🗑️  Removed: {task.text}")
    return 0


def cmd_priority(args: argparse.Namespace) -> int:
    task = actions.set_priority(args.store, args.task_id, args.level)
    print(f"{priority_icon(task.priority)} Priority set: {task.text}")
    return 0


def cmd_due(args: argparse.Namespace) -> int:
    task = actions.set_due(args.store, args.task_id, args.date)
    print(f"📅 Due date set: {task.text} → {short_date(task.due)}")
    return 0


def cmd_tag(args: argparse.Namespace) -> int:
    task = actions.add_tags(args.store, args.task_id, args.tags)
    print(f"🏷️  Tagged: {task.text} {format_tags(args.tags)}")
    return 0


def cmd_edit(args: argparse.Namespace) -> int:
    task = actions.rename_task(args.store, args.task_id, " ".join(args.text))
    print(f"✎ Updated: {task.text}")
    return 0


def cmd_clear(args: argparse.Namespace) -> int:
    removed = actions.clear_completed(args.store)
    print(f"🧹 Cleared {removed} completed task(s)")
    return 0


_ID_COMMANDS = {
    "done": cmd_done,
    "doing": cmd_doing,
    "block": cmd_block,
    "rm": cmd_rm,
}


# ---------------------------------------------------------------------
# Store selection
# ---------------------------------------------------------------------

def _open_store(args: argparse.Namespace, settings: Settings) -> Store:
    cwd = (Path.cwd() / (args.cd or ".")).resolve()
    path = resolve_store_path(
        cwd,
        file_name=settings.file_name,
        global_file=settings.global_file,
        override=args.file or (None if args.use_global else settings.file_override),
        use_global=bool(args.use_global),
    )
    logger.debug("Using store %s", path)
    return Store(path=path)


def _console_level(settings: Settings, verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    level = getattr(logging, settings.log_level, None)
    return level if isinstance(level, int) else logging.WARNING


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    setup_logging(
        console_level=_console_level(settings, args.verbose),
        log_file=settings.log_file,
    )

    args.store = _open_store(args, settings)

    try:
        return args.func(args)
    except ValidationError as e:
        print(e)
        return 1
    except OSError as e:
        logger.debug("Store write failed", exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
