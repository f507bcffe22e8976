"""Collect and classify link targets found while rendering Markdown.

Tips cross-reference each other heavily (``/tips/117``, ``../tips/148``,
``https://abseil.io/tips/1``). The :class:`LinkCollectorExtension` records
every ``href``/``src`` in the rendered element tree, including reference-style
links resolved by Markdown, and in the raw HTML blocks and inline tags
Markdown stashes away, so the link check sees what the site generator would
emit. :func:`classify_link` and :func:`normalize_permalink` turn those
targets into comparable permalinks.
"""

from __future__ import annotations

import enum
import posixpath
import re
import typing as typ
from html.parser import HTMLParser
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.postprocessors import Postprocessor
from markdown.treeprocessors import Treeprocessor

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

TEMPLATE_PATTERN = re.compile(r"\{\{.*?\}\}|\{%.*?%\}")
EXTERNAL_PREFIXES = ("http://", "https://", "//")
NON_PAGE_SCHEMES = ("mailto:", "tel:", "data:", "javascript:", "ftp:")
PAGE_SUFFIXES = (".html", ".md")
LINK_ATTRIBUTES = {"a": "href", "img": "src"}


class LinkKind(enum.StrEnum):
    """Broad category of a link target."""

    EXTERNAL = "external"
    ANCHOR = "anchor"
    INTERNAL = "internal"
    PLACEHOLDER = "placeholder"
    OTHER = "other"


class LinkCollectorExtension(Extension):
    """Record every link target produced while converting Markdown.

    Insert this extension into a ``markdown.Markdown`` instance and read
    :attr:`links` after ``convert`` returns. Targets are recorded as
    ``(tag, attribute value)`` pairs: element-tree links in tree order, then
    links written as raw HTML in stash order.
    """

    def __init__(self) -> None:
        super().__init__()
        self.links: list[tuple[str, str]] = []

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the link-collecting treeprocessor on the Markdown instance."""
        processor = LinkCollectorTreeprocessor(md, self.links)
        md.treeprocessors.register(processor, "totw_link_collector", 0)
        md.postprocessors.register(
            RawHtmlLinkPostprocessor(md, self.links), "totw_raw_html_links", 40
        )

    def reset(self) -> None:
        """Forget links collected by a previous conversion."""
        self.links.clear()


class LinkCollectorTreeprocessor(Treeprocessor):
    """Append anchor and image targets in the parsed tree to a shared list."""

    def __init__(self, md: Markdown, sink: list[tuple[str, str]]) -> None:
        super().__init__(md)
        self.sink = sink

    def run(self, root: Element) -> None:
        """Walk the tree, recording ``a[href]`` and ``img[src]`` values."""
        self.sink.extend(_element_links(root))


def _element_links(root: Element) -> cabc.Iterator[tuple[str, str]]:
    for element in root.iter():
        attribute = LINK_ATTRIBUTES.get(element.tag)
        value = element.get(attribute) if attribute is not None else None
        if value is not None:
            yield element.tag, value


class _RawHtmlLinkParser(HTMLParser):
    def __init__(self, sink: list[tuple[str, str]]) -> None:
        super().__init__(convert_charrefs=True)
        self.sink = sink

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        attribute = LINK_ATTRIBUTES.get(tag)
        if attribute is None:
            return
        for name, value in attrs:
            if name == attribute and value is not None:
                self.sink.append((tag, value))


class RawHtmlLinkPostprocessor(Postprocessor):
    """Record ``a[href]`` and ``img[src]`` values from stashed raw HTML.

    Inline tags such as ``<a href="...">`` and whole HTML blocks bypass the
    element tree; Markdown keeps them in ``htmlStash`` until output. The
    stash holds strings, plus elements for plain HTML nested in
    ``markdown="1"`` blocks.
    """

    def __init__(self, md: Markdown, sink: list[tuple[str, str]]) -> None:
        super().__init__(md)
        self.sink = sink

    def run(self, text: str) -> str:
        """Scan every stashed HTML block and return ``text`` unchanged."""
        for block in self.md.htmlStash.rawHtmlBlocks:
            if isinstance(block, str):
                parser = _RawHtmlLinkParser(self.sink)
                parser.feed(block)
                parser.close()
            else:
                self.sink.extend(_element_links(block))
        return text


def _is_placeholder(target: str, placeholders: cabc.Iterable[str]) -> bool:
    stripped = target.strip()
    if stripped in {"", "#"} or TEMPLATE_PATTERN.search(stripped):
        return True
    return any(
        re.search(rf"(?<![A-Za-z0-9]){re.escape(word)}(?![A-Za-z0-9])", stripped)
        for word in placeholders
    )


def _strip_site_prefix(target: str, site_prefixes: cabc.Iterable[str]) -> str | None:
    for prefix in site_prefixes:
        base = prefix.rstrip("/")
        if not base:
            continue
        if target == base:
            return "/"
        if target.startswith((f"{base}/", f"{base}#", f"{base}?")):
            return target[len(base) :] or "/"
    return None


def classify_link(
    target: str,
    *,
    site_prefixes: cabc.Iterable[str] = (),
    placeholders: cabc.Iterable[str] = (),
) -> LinkKind:
    """Return the :class:`LinkKind` of ``target``.

    Parameters
    ----------
    target : str
        Raw ``href`` or ``src`` value.
    site_prefixes : Iterable[str], optional
        Absolute URL prefixes that address the site itself; matching targets
        are internal rather than external.
    placeholders : Iterable[str], optional
        Words that mark an unfinished link target, such as ``TODO``.

    Returns
    -------
    LinkKind
        ``placeholder`` for empty, ``#``, templated, or placeholder-word
        targets; ``anchor`` for same-page fragments; ``internal`` for site
        paths; ``external`` for other absolute URLs; ``other`` for schemes
        such as ``mailto:``.
    """
    if _is_placeholder(target, placeholders):
        return LinkKind.PLACEHOLDER
    stripped = target.strip()
    if _strip_site_prefix(stripped, site_prefixes) is not None:
        return LinkKind.INTERNAL
    lower = stripped.lower()
    if lower.startswith(NON_PAGE_SCHEMES):
        return LinkKind.OTHER
    if lower.startswith(EXTERNAL_PREFIXES) or "://" in stripped:
        return LinkKind.EXTERNAL
    if stripped.startswith("#"):
        return LinkKind.ANCHOR
    if urlsplit(stripped).scheme:
        return LinkKind.OTHER
    return LinkKind.INTERNAL


def normalize_permalink(path: str) -> str:
    """Return a canonical form of a site path for comparison.

    Leading and trailing slashes, query strings, fragments, ``index.html``,
    and ``.html``/``.md`` suffixes are dropped, so ``/tips/234/``,
    ``tips/234.html#intro`` and ``tips/234`` all normalize to ``tips/234``.

    >>> normalize_permalink("/tips/234/index.html#intro")
    'tips/234'
    """
    parsed = urlsplit(path.strip())
    text = parsed.path
    text = posixpath.normpath(text) if text else ""
    text = text.strip("/")
    if text in {".", ""}:
        return ""
    if text.endswith("index.html"):
        text = text[: -len("index.html")].rstrip("/")
    for suffix in PAGE_SUFFIXES:
        if text.endswith(suffix):
            text = text[: -len(suffix)]
            break
    return text


def resolve_internal_link(
    target: str,
    *,
    from_permalink: str,
    site_prefixes: cabc.Iterable[str] = (),
) -> str:
    """Return the normalized permalink an internal link points at.

    Relative targets are joined to the directory of ``from_permalink`` the
    way a browser resolves them against the page URL (treated as a
    directory when it ends with ``/``).

    >>> resolve_internal_link("../tips/117", from_permalink="tips/234")
    'tips/117'
    """
    stripped = target.strip()
    without_site = _strip_site_prefix(stripped, site_prefixes)
    if without_site is not None:
        return normalize_permalink(without_site)
    path = urlsplit(stripped).path
    if path.startswith("/"):
        return normalize_permalink(path)
    source = from_permalink.strip()
    base = source if source.endswith("/") else posixpath.dirname(source.rstrip("/"))
    joined = posixpath.normpath(posixpath.join("/", base.lstrip("/"), path))
    return normalize_permalink(joined)


__all__ = [
    "LinkCollectorExtension",
    "LinkCollectorTreeprocessor",
    "LinkKind",
    "RawHtmlLinkPostprocessor",
    "classify_link",
    "normalize_permalink",
    "resolve_internal_link",
]
