from pathlib import Path

import pytest

from link_checker.errors import ExtractionError
from link_checker.extraction.matcher import (
    DEFAULT_MATCHERS,
    MARKDOWN,
    SOURCE_COMMENTS,
    FileMatcher,
    match_category,
)


def test_is_match_by_name_or_path():
    assert MARKDOWN.is_match("README.md")
    assert MARKDOWN.is_match(Path("docs/deep/guide.md"))
    assert not MARKDOWN.is_match("notes.txt")
    assert SOURCE_COMMENTS.is_match("src/lib.rs")


def test_first_matching_category_wins():
    first = FileMatcher("first", ("*.md",), r"<(.+?)>")
    second = FileMatcher("second", ("*.md", "*.txt"), r"\((.+?)\)")
    assert match_category([first, second], "a.md") is first
    assert match_category([first, second], "a.txt") is second
    assert match_category([first, second], "a.py") is None


def test_unmatched_files_are_skipped():
    assert match_category(DEFAULT_MATCHERS, "setup.py") is None
    assert match_category(DEFAULT_MATCHERS, "Cargo.toml") is None


def test_markdown_links_in_line_order(write):
    path = write(
        "doc.md",
        "# Title\n"
        "See [one](one.md) and [two](https://example.com/two).\n"
        "no links here\n"
        "[three](#three)\n",
    )
    links = list(MARKDOWN.iter_links(path))
    assert [(l.line, l.raw) for l in links] == [
        (2, "one.md"),
        (2, "https://example.com/two"),
        (4, "#three"),
    ]


def test_links_from_one_file_share_location(write):
    path = write("doc.md", "[a](a.md)\n[b](b.md)\n")
    first, second = MARKDOWN.iter_links(path)
    assert first.location is second.location


def test_source_comment_links_use_second_group(write):
    path = write(
        "lib.rs",
        "/// See [the guide](docs/guide.md).\n"
        "//! Crate docs, [home](https://example.com).\n"
        "// plain comment [skip](skip.md)\n"
        "let x = \"[nope](nope.md)\";\n",
    )
    links = list(SOURCE_COMMENTS.iter_links(path))
    assert [(l.line, l.raw) for l in links] == [
        (1, "docs/guide.md"),
        (2, "https://example.com"),
    ]


def test_unreadable_file_raises_extraction_error(tmp_path):
    missing = tmp_path / "gone.md"
    with pytest.raises(ExtractionError) as exc_info:
        list(MARKDOWN.iter_links(missing))
    assert exc_info.value.path == missing


def test_undecodable_file_raises_extraction_error(tmp_path):
    path = tmp_path / "binary.md"
    path.write_bytes(b"[a](a.md)\n\xff\xfe\xfa")
    with pytest.raises(ExtractionError):
        list(MARKDOWN.iter_links(path))


@pytest.mark.parametrize(
    "globs, pattern, group",
    [
        ((), r"\((.+)\)", 1),
        (("*.md",), r"(unclosed", 1),
        (("*.md",), r"\((.+)\)", 2),
    ],
)
def test_invalid_category_is_rejected(globs, pattern, group):
    with pytest.raises(ValueError):
        FileMatcher("bad", globs, pattern, group)
