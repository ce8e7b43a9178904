# src/todoctl/engine/store.py

"""
File-backed task store.

The whole collection lives in one JSON document and is rewritten in full
on every save. Loading is forgiving: a missing or unreadable document is
an empty list.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .model import Task
from .ops import render_store
from .parse import ParseError, parse_store

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------

def load_tasks(path: str | Path) -> list[Task]:
    """
    Load the task collection stored at `path`.

    Never raises: a missing file, an unreadable file, and an unparseable
    document all give an empty list.
    """
    p = Path(path)
    try:
        if not p.is_file():
            logger.debug("No store at %s", p)
            return []
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", p, e)
        return []

    try:
        return parse_store(text, path=str(p))
    except ParseError as e:
        logger.warning("Ignoring unreadable store: %s", e)
        return []


def save_tasks(path: str | Path, tasks: Iterable[Task]) -> None:
    """
    Persist the full task collection to `path`.

    The document is written to a temporary file in the same directory and
    moved into place, so the target is either the old or the new document.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    text = render_store(tasks)

    fd, tmp = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=str(p.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, p)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        raise

    logger.debug("Saved %s", p)


# ---------------------------------------------------------------------
# Store handle
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Store:
    """
    Handle for one resolved store location.

    Built once per invocation and passed to every action.
    """

    path: Path

    def load(self) -> list[Task]:
        return load_tasks(self.path)

    def save(self, tasks: Iterable[Task]) -> None:
        save_tasks(self.path, tasks)
