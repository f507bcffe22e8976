"""Internal link integrity for published documents.

Published pages must not ship unfinished links: empty or ``#`` targets,
``TODO``-style stand-ins, unrendered template expressions, or reference-style
links whose label was never defined (Markdown leaves those as literal
``[text][label]`` text). Internal links must also land on a permalink that
exists in the corpus and is itself published.
"""

from __future__ import annotations

import collections.abc as cabc
import posixpath
import re
import typing as typ
from urllib.parse import urlsplit

import structlog

from totw_pages.markdown_parser import iter_prose_lines
from totw_pages.render import (
    LinkKind,
    classify_link,
    resolve_internal_link,
)

from ._support import locate, render_document
from .models import Finding, Severity
from .permalinks import permalink_index

if typ.TYPE_CHECKING:
    from totw_pages.config import LintConfig
    from totw_pages.content import Corpus, Document

logger = structlog.get_logger(__name__)

INTERNAL_LINKS = "internal-links"
REFERENCE_LINK_PATTERN = re.compile(r"(?<![\\!\]\w])\[([^\[\]]+)\]\[([^\[\]]*)\]")
REFERENCE_DEFINITION_PATTERN = re.compile(r"^\s{0,3}\[([^\]]+)\]:\s*\S")
INLINE_CODE_PATTERN = re.compile(r"(`+)(?:(?!\1).)+?\1")
PAGE_EXTENSIONS = frozenset({"", ".html", ".md"})


def _normalize_label(label: str) -> str:
    return re.sub(r"\s+", " ", label).strip().lower()


def undefined_reference_links(body: str) -> list[tuple[str, int]]:
    """Return ``(label, line)`` for reference-style links with no definition.

    Collapsed references (``[text][]``) use the link text as the label.
    Footnote markers and text inside code is ignored.
    """
    lines = body.splitlines()
    prose = list(iter_prose_lines(lines))
    defined = {
        _normalize_label(match.group(1))
        for _index, line in prose
        if (match := REFERENCE_DEFINITION_PATTERN.match(line))
    }
    undefined: list[tuple[str, int]] = []
    for index, line in prose:
        text = INLINE_CODE_PATTERN.sub("", line)
        for match in REFERENCE_LINK_PATTERN.finditer(text):
            text_part, label_part = match.group(1), match.group(2)
            label = label_part or text_part
            if label.startswith("^"):
                continue
            if _normalize_label(label) not in defined:
                undefined.append((label, index + 1))
    return undefined


def _is_page_target(target: str) -> bool:
    path = urlsplit(target.strip()).path
    _root, extension = posixpath.splitext(path)
    return extension.lower() in PAGE_EXTENSIONS


def _link_findings(
    document: Document,
    targets: cabc.Iterable[tuple[str, str]],
    *,
    known: dict[str, list[Document]],
    config: LintConfig,
    severity: Severity,
) -> cabc.Iterator[Finding]:
    for tag, target in targets:
        kind = classify_link(
            target,
            site_prefixes=config.site_prefixes,
            placeholders=config.placeholder_patterns,
        )
        if kind is LinkKind.PLACEHOLDER:
            shown = target or "(empty)"
            yield Finding(
                rule=INTERNAL_LINKS,
                severity=severity,
                message=f"Unresolved link placeholder '{shown}'.",
                path=document.path,
                line=locate(document, f"]({target})") or locate(document, target),
            )
            continue
        if kind is not LinkKind.INTERNAL or tag != "a" or not _is_page_target(target):
            continue
        resolved = resolve_internal_link(
            target,
            from_permalink=document.permalink,
            site_prefixes=config.site_prefixes,
        )
        if not resolved:
            continue
        matches = known.get(resolved)
        if not matches:
            yield Finding(
                rule=INTERNAL_LINKS,
                severity=severity,
                message=f"Link '{target}' does not match any permalink.",
                path=document.path,
                line=locate(document, target),
            )
        elif not any(match.published for match in matches):
            yield Finding(
                rule=INTERNAL_LINKS,
                severity=severity,
                message=f"Link '{target}' points at unpublished page '{resolved}'.",
                path=document.path,
                line=locate(document, target),
            )


def check_internal_links(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report unresolved placeholders and dangling internal links.

    Only published documents are checked. Documents that fail to render are
    skipped here; the ``markdown-render`` rule reports them.
    """
    known = permalink_index(corpus.documents)
    for document in corpus.published():
        for label, line in undefined_reference_links(document.body):
            yield Finding(
                rule=INTERNAL_LINKS,
                severity=severity,
                message=f"Reference link label '{label}' is never defined.",
                path=document.path,
                line=document.file_line(line),
            )
        try:
            result = render_document(document, config.pygments_style)
        except Exception:  # noqa: BLE001 - reported by the markdown-render rule
            logger.debug("links.render_failed", path=str(document.path))
            continue
        targets = [("a", href) for href in result.anchors]
        targets.extend(("img", src) for src in result.images)
        yield from _link_findings(
            document, targets, known=known, config=config, severity=severity
        )


__all__ = [
    "INTERNAL_LINKS",
    "check_internal_links",
    "undefined_reference_links",
]
