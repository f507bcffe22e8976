"""Permalink uniqueness across the corpus."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from totw_pages.render import normalize_permalink

from .models import Finding, Severity

if typ.TYPE_CHECKING:
    from totw_pages.config import LintConfig
    from totw_pages.content import Corpus, Document

PERMALINK_UNIQUE = "permalink-unique"


def permalink_index(documents: cabc.Iterable[Document]) -> dict[str, list[Document]]:
    """Group documents by normalized permalink."""
    index: dict[str, list[Document]] = {}
    for document in documents:
        index.setdefault(normalize_permalink(document.permalink), []).append(document)
    return index


def check_permalink_unique(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report every document that shares its permalink with another.

    Permalinks are compared after normalization, so ``/tips/1/`` and
    ``tips/1`` collide. Each member of a collision group gets a finding naming
    the other files.
    """
    for permalink, documents in sorted(permalink_index(corpus.documents).items()):
        if len(documents) < 2:
            continue
        for document in documents:
            others = ", ".join(
                corpus.relative(other.path) for other in documents if other is not document
            )
            yield Finding(
                rule=PERMALINK_UNIQUE,
                severity=severity,
                message=f"Permalink '{permalink}' is also used by {others}.",
                path=document.path,
                line=1,
            )


__all__ = ["PERMALINK_UNIQUE", "check_permalink_unique", "permalink_index"]
