"""Helpers shared by rule modules: cached rendering and line lookup."""

from __future__ import annotations

import functools
import typing as typ

from totw_pages.render import HtmlContentRenderer, RenderResult

if typ.TYPE_CHECKING:
    from totw_pages.content import Document


@functools.lru_cache(maxsize=1024)
def _render_body(body: str, pygments_style: str) -> RenderResult:
    return HtmlContentRenderer(pygments_style).render(body)


def render_document(document: Document, pygments_style: str) -> RenderResult:
    """Render ``document.body``, reusing results across rules in one run.

    Exceptions from the Markdown pipeline propagate and are not cached.
    """
    return _render_body(document.body, pygments_style)


def clear_render_cache() -> None:
    """Drop cached render results."""
    _render_body.cache_clear()


def locate(document: Document, needle: str) -> int | None:
    """Return the file line of the first body line containing ``needle``."""
    if not needle:
        return None
    for index, line in enumerate(document.body.splitlines(), start=1):
        if needle in line:
            return document.file_line(index)
    return None


__all__ = ["clear_render_cache", "locate", "render_document"]
