"""Resources (links) found inside the body of inline TODO entries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlsplit

__all__ = ["GitHubIssue", "UrlResource", "find_resource"]


@dataclass(frozen=True)
class GitHubIssue:
    """A link to an issue of a GitHub repository."""

    owner: str
    repository: str
    id: int

    @property
    def url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repository}/issues/{self.id}"


@dataclass(frozen=True)
class UrlResource:
    """Any other absolute URL with a host."""

    url: str


Resource = Union[GitHubIssue, UrlResource]


def _parse_u32(text: str) -> Optional[int]:
    digits = text[1:] if text.startswith("+") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    value = int(digits)
    return value if value <= 0xFFFFFFFF else None


def _parse_github_issue(host: str, path: str) -> Optional[GitHubIssue]:
    if host != "github.com":
        return None
    parts = path.lstrip("/").split("/")
    if len(parts) != 4 or parts[2] != "issues":
        return None
    issue_id = _parse_u32(parts[3])
    if issue_id is None:
        return None
    return GitHubIssue(parts[0], parts[1], issue_id)


def find_resource(text: str) -> Optional[Resource]:
    """Interpret ``text`` as a resource, or return None if it is not an absolute URL with a host."""
    try:
        parts = urlsplit(text)
        host = parts.hostname
        parts.port  # an invalid port makes the URL invalid
    except ValueError:
        return None
    if not parts.scheme or not host:
        return None
    issue = _parse_github_issue(host, parts.path)
    if issue is not None:
        return issue
    return UrlResource(text)