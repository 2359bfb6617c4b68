from pathlib import Path

import pytest

from niitools.resource import GitHubIssue, UrlResource
from niitools.todo_entry import CommentBlock, InlineTodoEntry, Tag


def block(*lines, line_number=0):
    return CommentBlock(Path("src/a.rs"), line_number, list(lines))


def test_known_tags():
    assert Tag.from_label("FIX") == Tag("Fix")
    assert Tag.from_label("IMPROVE") == Tag("Improve")
    assert Tag.from_label("ROADBLOCK") == Tag("Roadblock")


def test_unknown_tag_keeps_label():
    tag = Tag.from_label("DISCOVER")
    assert tag.name == "DISCOVER"
    assert tag.known is False


def test_plain_todo():
    entry = InlineTodoEntry.from_block(block(" TODO: Write docs", " more text", line_number=7))
    assert entry.title == "Write docs"
    assert entry.tags == []
    assert entry.content == [" more text"]
    assert entry.line_number == 7
    assert entry.path == Path("src/a.rs")


def test_tagged_todo():
    entry = InlineTodoEntry.from_block(block(" TODO(FIX, DISCOVER): Broken parser"))
    assert entry.title == "Broken parser"
    assert entry.tags == [Tag.from_label("FIX"), Tag.from_label("DISCOVER")]


def test_resources_are_collected_in_order():
    entry = InlineTodoEntry.from_block(
        block(
            " TODO(IMPROVE): Speed",
            "   Check: https://github.com/octo/project/issues/5",
            "   and https://example.com/notes plus words",
        )
    )
    assert entry.resources == [
        GitHubIssue("octo", "project", 5),
        UrlResource("https://example.com/notes"),
    ]


@pytest.mark.parametrize(
    "lines",
    [
        (),
        (" Just a comment",),
        (" TODO(FIX) missing separator",),
        (" TODO:no space",),
    ],
)
def test_non_entries(lines):
    assert InlineTodoEntry.from_block(block(*lines)) is None