"""Shared fixtures for building throwaway content corpora.

Tests describe each page as front-matter fields plus a Markdown body and let
``write_page`` serialise it under ``tmp_path / "content"``. Keeping the YAML
hand-written (rather than dumped) lets tests control quoting, which matters
for the ``order`` rules.
"""

from __future__ import annotations

import typing as typ

import pytest

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    WritePage = cabc.Callable[..., Path]


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Return an empty content directory under ``tmp_path``."""
    path = tmp_path / "content"
    path.mkdir()
    return path


def render_page(front_matter: str, body: str = "") -> str:
    """Join a front-matter block and body into file contents."""
    return f"---\n{front_matter.strip()}\n---\n{body}"


def tip_front_matter(
    number: int,
    *,
    order: str | None = None,
    published: bool | None = None,
    title: str | None = None,
) -> str:
    """Return front-matter for tip ``number`` with a quoted, padded order."""
    lines = [
        f'title: "{title or f"Tip of the Week #{number}"}"',
        "layout: tips",
        "sidenav: side-nav-tips.html",
        "type: markdown",
        f"permalink: tips/{number}",
        f"order: {order if order is not None else repr(f'{number:03d}')}",
    ]
    if published is not None:
        lines.append(f"published: {'true' if published else 'false'}")
    return "\n".join(lines)


@pytest.fixture
def write_page(content_dir: Path) -> WritePage:
    """Return a helper writing ``name`` with the given front-matter and body."""

    def _write(name: str, front_matter: str, body: str = "") -> Path:
        path = content_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_page(front_matter, body), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_tip(write_page: WritePage) -> cabc.Callable[..., Path]:
    """Return a helper writing ``tips/<nnn>.md`` for tip ``number``."""

    def _write(
        number: int,
        body: str = "",
        *,
        order: str | None = None,
        published: bool | None = None,
        name: str | None = None,
    ) -> Path:
        front_matter = tip_front_matter(number, order=order, published=published)
        return write_page(name or f"tips/{number:03d}.md", front_matter, body)

    return _write
