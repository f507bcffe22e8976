"""Shared dataclasses used by the render smoke test."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True)
class RenderResult:
    """Output of rendering one document body.

    Attributes
    ----------
    html : str
        HTML produced by Python-Markdown.
    anchors : list[str]
        ``href`` values of ``<a>`` elements in the rendered tree, in tree order.
    code_languages : list[str | None]
        Info-string language of each fenced code block; ``None`` for fences
        without one.
    images : list[str]
        ``src`` values of ``<img>`` elements.
    """

    html: str
    anchors: list[str]
    code_languages: list[str | None]
    images: list[str] = dc.field(default_factory=list)


__all__ = ["RenderResult"]
