"""Utilities for rendering document bodies and inspecting their links."""

from .links import (
    LinkCollectorExtension,
    LinkKind,
    classify_link,
    normalize_permalink,
    resolve_internal_link,
)
from .models import RenderResult
from .renderer import (
    HtmlContentRenderer,
    fence_labels,
    fence_languages,
    unbalanced_fence_line,
    unknown_languages,
)

__all__ = [
    "HtmlContentRenderer",
    "LinkCollectorExtension",
    "LinkKind",
    "RenderResult",
    "classify_link",
    "fence_labels",
    "fence_languages",
    "normalize_permalink",
    "resolve_internal_link",
    "unbalanced_fence_line",
    "unknown_languages",
]
