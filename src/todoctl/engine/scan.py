# src/todoctl/engine/scan.py

"""
Store location discovery.

This module decides which file a command reads and writes:
- an explicit path always wins,
- then the global list (when asked for),
- then the nearest ancestor directory already holding a store file,
- then a new store in the working directory.

It performs *no parsing*.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Optional


def iter_ancestors(start: str | Path) -> Iterator[Path]:
    """
    Yield `start` and each parent directory up to the filesystem root.
    """
    d = Path(start).resolve()
    yield d
    yield from d.parents


def find_store_upwards(start: str | Path, file_name: str) -> Optional[Path]:
    """
    Return the nearest `<dir>/<file_name>` that exists, searching from
    `start` towards the root. None when there is none.
    """
    for d in iter_ancestors(start):
        candidate = d / file_name
        try:
            if candidate.is_file():
                return candidate
        except PermissionError:
            # Non-fatal: keep walking.
            continue
    return None


def resolve_store_path(
    cwd: str | Path,
    *,
    file_name: str,
    global_file: str | Path,
    override: Optional[str | Path] = None,
    use_global: bool = False,
) -> Path:
    """
    Pick the store path for one invocation.

    Priority: override > global flag > nearest ancestor > cwd default.
    Relative overrides are taken relative to `cwd`.
    """
    base = Path(cwd)

    if override:
        p = Path(override).expanduser()
        return p if p.is_absolute() else (base / p).resolve()

    if use_global:
        return Path(global_file).expanduser()

    found = find_store_upwards(base, file_name)
    if found is not None:
        return found

    return base.resolve() / file_name
