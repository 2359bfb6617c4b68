"""Comment blocks and the inline TODO entries parsed from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from niitools.resource import Resource, find_resource

__all__ = ["CommentBlock", "Tag", "InlineTodoEntry"]

_KNOWN_TAGS = {"IMPROVE": "Improve", "ROADBLOCK": "Roadblock", "FIX": "Fix"}


def _strip_repeated(text: str, prefix: str) -> str:
    while prefix and text.startswith(prefix):
        text = text[len(prefix):]
    return text


@dataclass
class CommentBlock:
    """Consecutive comment lines of a file, with the comment marker removed."""

    path: Path
    line_number: int
    comment: list = field(default_factory=list)


@dataclass(frozen=True)
class Tag:
    """A tag of a TODO entry; unknown labels are kept as they were written."""

    name: str
    known: bool = True

    @classmethod
    def from_label(cls, label: str) -> Tag:
        known_name = _KNOWN_TAGS.get(label)
        if known_name is None:
            return cls(label, known=False)
        return cls(known_name)


@dataclass
class InlineTodoEntry:
    """A TODO written as a comment in a source file."""

    path: Path
    line_number: int
    title: str
    content: list
    resources: list
    tags: list

    @classmethod
    def from_block(cls, block: CommentBlock) -> Optional[InlineTodoEntry]:
        """Parse a comment block, returning None if it is not a TODO entry."""
        if not block.comment:
            return None
        first_line = block.comment[0].strip()

        if first_line.startswith("TODO: "):
            title = _strip_repeated(first_line, "TODO: ")
            tags: list = []
        elif first_line.startswith("TODO("):
            components = _strip_repeated(first_line, "TODO(").split("): ")
            if len(components) < 2:
                return None
            tags = [Tag.from_label(label.strip()) for label in components[0].split(",")]
            title = components[1]
        else:
            return None

        content = list(block.comment[1:])
        resources: list[Resource] = [
            resource
            for line in content
            for word in line.split()
            if (resource := find_resource(word)) is not None
        ]
        return cls(
            path=block.path,
            line_number=block.line_number,
            title=title,
            content=content,
            resources=resources,
            tags=tags,
        )