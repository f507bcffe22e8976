"""Rules that render bodies and inspect their Markdown structure."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from collections import Counter

from totw_pages.content import find_footnote_definitions, find_footnote_references
from totw_pages.render import fence_labels, unbalanced_fence_line, unknown_languages

from ._support import render_document
from .models import Finding, Severity

if typ.TYPE_CHECKING:
    from totw_pages.config import LintConfig
    from totw_pages.content import Corpus

MARKDOWN_RENDER = "markdown-render"
CODE_FENCE_LANGUAGE = "code-fence-language"
FOOTNOTES = "footnotes"
FOOTNOTES_UNUSED = "footnotes-unused"


def check_markdown_render(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report bodies that fail to render or leave a code fence open."""
    for document in corpus.documents:
        open_line = unbalanced_fence_line(document.body)
        if open_line is not None:
            yield Finding(
                rule=MARKDOWN_RENDER,
                severity=severity,
                message="Code fence is opened but never closed.",
                path=document.path,
                line=document.file_line(open_line),
            )
        try:
            render_document(document, config.pygments_style)
        except Exception as exc:  # noqa: BLE001 - any renderer failure is a finding
            yield Finding(
                rule=MARKDOWN_RENDER,
                severity=severity,
                message=f"Markdown failed to render: {type(exc).__name__}: {exc}",
                path=document.path,
                line=document.body_line_offset,
            )


def check_code_fence_language(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report fenced code blocks labelled with a language Pygments cannot lex.

    Each unknown language is reported once, at the first fence that uses it.
    """
    for document in corpus.documents:
        try:
            result = render_document(document, config.pygments_style)
        except Exception:  # noqa: BLE001, S112 - reported by the markdown-render rule
            continue
        opened_on: dict[str, int] = {}
        for label, line in fence_labels(document.body):
            if label is not None:
                opened_on.setdefault(label, line)
        for language in unknown_languages(result.code_languages):
            yield Finding(
                rule=CODE_FENCE_LANGUAGE,
                severity=severity,
                message=f"No syntax highlighter for fence language '{language}'.",
                path=document.path,
                line=document.file_line(opened_on[language]),
            )


def check_footnotes(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report footnote markers without a definition and duplicate definitions."""
    for document in corpus.documents:
        definitions = find_footnote_definitions(document.body)
        labels = Counter(footnote.label for footnote in definitions)
        for footnote in definitions:
            if labels[footnote.label] > 1:
                yield Finding(
                    rule=FOOTNOTES,
                    severity=severity,
                    message=f"Footnote '[^{footnote.label}]' is defined more than once.",
                    path=document.path,
                    line=document.file_line(footnote.line),
                )
        for label, line in find_footnote_references(document.body):
            if label not in labels:
                yield Finding(
                    rule=FOOTNOTES,
                    severity=severity,
                    message=f"Footnote '[^{label}]' has no definition.",
                    path=document.path,
                    line=document.file_line(line),
                )


def check_footnotes_unused(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report footnote definitions that no marker references."""
    for document in corpus.documents:
        referenced = {label for label, _line in find_footnote_references(document.body)}
        for footnote in find_footnote_definitions(document.body):
            if footnote.label not in referenced:
                yield Finding(
                    rule=FOOTNOTES_UNUSED,
                    severity=severity,
                    message=f"Footnote '[^{footnote.label}]' is never referenced.",
                    path=document.path,
                    line=document.file_line(footnote.line),
                )


__all__ = [
    "CODE_FENCE_LANGUAGE",
    "FOOTNOTES",
    "FOOTNOTES_UNUSED",
    "MARKDOWN_RENDER",
    "check_code_fence_language",
    "check_footnotes",
    "check_footnotes_unused",
    "check_markdown_render",
]
