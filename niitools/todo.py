"""Listing of TODO files and inline TODO entries of a repository."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, Optional

import requests

from niitools.resource import GitHubIssue, UrlResource
from niitools.todo_entry import CommentBlock, InlineTodoEntry

__all__ = [
    "IssueState",
    "SearchResult",
    "comment_blocks",
    "collect_entries",
    "fetch_issue_state",
    "format_entry",
    "print_tasks",
]

logger = logging.getLogger(__name__)

_DOUBLE_SLASH_EXTENSIONS = ("rs", "json5")
_POUND_SIGN_EXTENSIONS = ("nix", "toml", "yaml")

_GITHUB_HEADERS = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
    "User-Agent": "niitools task listing",
}

_BOLD = "1"
_UNDERLINE = "4"
_RED = "31"
_BLUE = "34"
_MAGENTA = "35"
_BRIGHT_BLACK = "90"
_BRIGHT_GREEN = "92"
_BRIGHT_MAGENTA = "95"
_BRIGHT_CYAN = "96"

_TAG_COLOURS = {"Fix": _MAGENTA, "Improve": _BLUE, "Roadblock": _RED}


class IssueState(Enum):
    """State of a GitHub issue."""

    OPEN = "open"
    CLOSED = "closed"


def _style(text: object, *codes: str) -> str:
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def _strip_repeated(text: str, prefix: str) -> str:
    while prefix and text.startswith(prefix):
        text = text[len(prefix):]
    return text


def _raise(error: OSError) -> None:
    raise error


def _walk_files(root: Path) -> Iterator[Path]:
    for directory, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(directory) / name
            if path.is_file() and not path.is_symlink():
                yield path


@dataclass
class SearchResult:
    """Files of a tree that may hold tasks, grouped by how they are read."""

    todo_paths: list = field(default_factory=list)
    double_slash_paths: list = field(default_factory=list)
    pound_sign_paths: list = field(default_factory=list)

    @classmethod
    def search(cls, root_path) -> SearchResult:
        """Walk ``root_path`` and sort its files by kind."""
        result = cls()
        for path in _walk_files(Path(root_path)):
            if path.name == "TODO.md":
                result.todo_paths.append(path)
                continue
            extension = path.suffix[1:]
            if extension in _DOUBLE_SLASH_EXTENSIONS:
                result.double_slash_paths.append(path)
            elif extension in _POUND_SIGN_EXTENSIONS:
                result.pound_sign_paths.append(path)
        return result


def comment_blocks(text: str, path, prefix: str) -> list:
    """Split ``text`` into blocks of consecutive lines commented with ``prefix``.

    A block is closed by the first line that is not a comment; line numbers start at zero.
    """
    blocks: list[CommentBlock] = []
    current: Optional[CommentBlock] = None
    for line_number, line in enumerate(text.split("\n")):
        line = line.lstrip()
        if not line.startswith(prefix):
            if current is not None:
                blocks.append(current)
            current = None
            continue
        comment = _strip_repeated(line, prefix)
        if current is None:
            current = CommentBlock(Path(path), line_number, [comment])
        else:
            current.comment.append(comment)
    return blocks


def collect_entries(search_result: SearchResult) -> list:
    """Read every searched file and return its inline TODO entries."""
    blocks: list[CommentBlock] = []
    for path in search_result.pound_sign_paths:
        blocks.extend(comment_blocks(Path(path).read_bytes().decode("utf-8"), path, "#"))
    for path in search_result.double_slash_paths:
        blocks.extend(comment_blocks(Path(path).read_bytes().decode("utf-8"), path, "//"))
    return [entry for block in blocks if (entry := InlineTodoEntry.from_block(block)) is not None]


def fetch_issue_state(owner: str, repository: str, issue_id: int) -> IssueState:
    """Ask the GitHub API whether an issue is open or closed."""
    response = requests.get(
        f"https://api.github.com/repos/{owner}/{repository}/issues/{issue_id}",
        headers=_GITHUB_HEADERS,
        timeout=30,
    )
    response.raise_for_status()
    return IssueState(response.json()["state"])


def _format_tag(tag) -> str:
    if not tag.known:
        return _style(f"Unknown: {tag.name}", _BRIGHT_BLACK)
    return _style(tag.name, _TAG_COLOURS[tag.name], _BOLD)


def _display_path(path: Path, root_path: Path) -> str:
    try:
        return "/" + Path(path).relative_to(root_path).as_posix()
    except ValueError:
        return str(path)


def format_entry(
    entry: InlineTodoEntry,
    root_path,
    issue_state_lookup: Optional[Callable[[str, str, int], IssueState]] = None,
) -> list:
    """Render an entry as output lines; GitHub issue states come from ``issue_state_lookup``."""
    lookup = issue_state_lookup or fetch_issue_state
    lines = [f"  - Title: {_style(entry.title, _BOLD, _UNDERLINE)}", "    Content:"]
    lines.extend(f"      {line}" for line in entry.content)

    if entry.tags:
        lines.append("    Tags:")
    lines.extend(f"      - {_format_tag(tag)}" for tag in entry.tags)

    if entry.resources:
        lines.append("    Resources:")
    for resource in entry.resources:
        if isinstance(resource, GitHubIssue):
            state = lookup(resource.owner, resource.repository, resource.id)
            if state is IssueState.OPEN:
                shown = _style("Open", _BRIGHT_GREEN, _BOLD)
            else:
                shown = _style("Closed", _BRIGHT_MAGENTA, _BOLD)
            lines.append("      - GitHub Issue:")
            lines.append(f"        - State: {shown}")
            lines.append(f"        - Url: {_style(resource.url, _BRIGHT_CYAN, _UNDERLINE)}")
        elif isinstance(resource, UrlResource):
            lines.append(f"      - Url: {_style(resource.url, _BRIGHT_CYAN, _UNDERLINE)}")

    lines.append(f"    File: {_style(_display_path(entry.path, Path(root_path)), _BRIGHT_BLACK)}")
    lines.append(f"    Line: {_style(entry.line_number, _BRIGHT_BLACK)}")
    lines.append("")
    return lines


def print_tasks(root_path) -> None:
    """Show every TODO.md file with ``glow`` and log every inline TODO entry."""
    root_path = Path(root_path)
    search_result = SearchResult.search(root_path)

    logger.info("Printing TODO.md files")
    for path in search_result.todo_paths:
        logger.info("Printing TODO file from %s", path)
        subprocess.run(["glow", str(path)], check=True)

    entries = collect_entries(search_result)

    logger.info("Inline TODO entries:")
    for entry in entries:
        for line in format_entry(entry, root_path):
            logger.info("%s", line)