"""Location of the root of the monorepo."""

from __future__ import annotations

from pathlib import Path

__all__ = ["find_root", "get_root_path"]

BEACON_FILENAME = "forja-root-beacon.txt"


def find_root(directory) -> Path:
    """Return the nearest directory, ``directory`` or an ancestor, holding the beacon file."""
    start = Path(directory).absolute()
    for candidate in (start, *start.parents):
        if (candidate / BEACON_FILENAME).is_file():
            return candidate
    raise FileNotFoundError("Failed to find the root of the monorepo")


def get_root_path() -> Path:
    """Find the root of the monorepo from the current working directory."""
    return find_root(Path.cwd())