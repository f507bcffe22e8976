"""Unit tests for splitting and parsing document front-matter.

These tests cover the delimiter handling in ``split_front_matter`` and the
field validation ``parse_document`` applies before a :class:`Document` is
built: required keys, the layout enum, the ``published`` flag, and how a bare
YAML integer ``order`` is distinguished from a quoted one.

Usage
-----
Run ``pytest tests/test_front_matter.py -v``. Only ``tmp_path`` is needed.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from totw_pages.content import (
    FrontMatterError,
    Layout,
    load_document,
    parse_document,
    split_front_matter,
)

TIP_TEXT = """---
title: "Tip of the Week #234: Pass by value"
layout: tips
sidenav: side-nav-tips.html
published: true
permalink: tips/234
type: markdown
order: "234"
---

Originally posted as TotW #234 on August 20, 2012
"""


def test_split_returns_body_and_offset() -> None:
    """The body starts on the line after the closing delimiter."""
    raw, body, offset = split_front_matter("---\ntitle: x\n---\nfirst\nsecond\n")
    assert raw == "title: x\n"
    assert body == "first\nsecond\n"
    assert offset == 4


def test_split_accepts_yaml_document_end_marker() -> None:
    """``...`` closes the block just like ``---``."""
    raw, body, _offset = split_front_matter("---\ntitle: x\n...\nbody\n")
    assert raw == "title: x\n"
    assert body == "body\n"


def test_split_ignores_byte_order_mark() -> None:
    """A leading BOM does not hide the opening delimiter."""
    raw, _body, _offset = split_front_matter("\ufeff---\ntitle: x\n---\n")
    assert raw == "title: x\n"


@pytest.mark.parametrize(
    "text",
    ["title: x\n---\nbody\n", "", "---\ntitle: x\nbody without end\n"],
    ids=["no-opening", "empty", "unterminated"],
)
def test_split_rejects_missing_delimiters(text: str) -> None:
    """Files without a complete block raise ``FrontMatterError``."""
    with pytest.raises(FrontMatterError):
        split_front_matter(text, path=Path("bad.md"))


def test_parse_document_reads_schema_fields() -> None:
    """Every schema field lands on the document with derived numbers."""
    doc = parse_document(TIP_TEXT, Path("tips/234.md"))
    assert doc.title == "Tip of the Week #234: Pass by value"
    assert doc.layout is Layout.TIPS
    assert doc.sidenav == "side-nav-tips.html"
    assert doc.published is True
    assert doc.type == "markdown"
    assert doc.order == "234"
    assert doc.order_quoted is True
    assert doc.tip_number == 234
    assert doc.order_number == 234
    assert doc.body_line_offset == 10
    assert doc.body.lstrip().startswith("Originally posted")


def test_parse_document_defaults_published_and_keeps_extra_keys() -> None:
    """``published`` defaults to true and unknown keys go to ``extra``."""
    text = "---\ntitle: Macros\nlayout: docs\npermalink: docs/macros\nauthor: Jane\n---\n"
    doc = parse_document(text, Path("macros.md"))
    assert doc.published is True
    assert doc.extra == {"author": "Jane"}
    assert doc.tip_number is None
    assert doc.order is None


def test_bare_integer_order_loses_padding_and_is_marked() -> None:
    """An unquoted ``order`` is kept as text but flagged as unquoted."""
    text = "---\ntitle: T\nlayout: tips\npermalink: tips/7\norder: 007\n---\n"
    doc = parse_document(text, Path("007.md"))
    assert doc.order == "7"
    assert doc.order_quoted is False


@pytest.mark.parametrize(
    ("front_matter", "message"),
    [
        ("layout: tips\npermalink: tips/1", "title"),
        ("title: T\nlayout: tips", "permalink"),
        ("title: T\npermalink: tips/1", "layout"),
        ("title: T\nlayout: blog\npermalink: tips/1", "Unknown layout"),
        ("title: T\nlayout: tips\npermalink: tips/1\npublished: 'yes'", "published"),
        ("title: T\nlayout: tips\npermalink: tips/1\norder: true", "order"),
        ("- just\n- a list", "mapping"),
    ],
    ids=[
        "missing-title",
        "missing-permalink",
        "missing-layout",
        "unknown-layout",
        "published-not-bool",
        "order-bool",
        "not-a-mapping",
    ],
)
def test_parse_document_rejects_invalid_fields(front_matter: str, message: str) -> None:
    """Schema violations raise ``FrontMatterError`` naming the problem."""
    with pytest.raises(FrontMatterError, match=message) as excinfo:
        parse_document(f"---\n{front_matter}\n---\n", Path("bad.md"))
    assert excinfo.value.path == Path("bad.md")


def test_yaml_syntax_error_reports_file_line() -> None:
    """Syntax errors carry the line within the source file."""
    text = "---\ntitle: T\nlayout: [tips\npermalink: tips/1\n---\n"
    with pytest.raises(FrontMatterError, match="Invalid front-matter YAML") as excinfo:
        parse_document(text, Path("broken.md"))
    assert excinfo.value.line is not None
    assert excinfo.value.line >= 2
    assert str(excinfo.value).startswith(f"broken.md:{excinfo.value.line}: ")


def test_load_document_reads_utf8(tmp_path: Path) -> None:
    """``load_document`` reads the file and records its path."""
    path = tmp_path / "234.md"
    path.write_text(TIP_TEXT.replace("Pass by value", "Pass by válue"), encoding="utf-8")
    doc = load_document(path)
    assert doc.path == path
    assert "válue" in doc.title
