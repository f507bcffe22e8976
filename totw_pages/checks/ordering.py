"""Rules tying tip ``order`` values, permalinks, and provenance together."""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import typing as typ

from totw_pages.content import parse_provenance

from .models import Finding, Severity

if typ.TYPE_CHECKING:
    from totw_pages.config import LintConfig
    from totw_pages.content import Corpus, Document

TIP_ORDER = "tip-order"
TIP_ORDER_SEQUENCE = "tip-order-sequence"
TIP_PROVENANCE = "tip-provenance"


def _order_problems(document: Document) -> cabc.Iterator[str]:
    order = document.order
    if order is None:
        yield "Tip is missing the 'order' field."
        return
    number = document.order_number
    if number is None:
        yield f"Tip order '{order}' is not an integer."
        return
    if not document.order_quoted:
        yield (
            f"Tip order {order} is a bare YAML integer; quote it as a string "
            "so zero padding survives."
        )
    tip_number = document.tip_number
    if tip_number is None:
        yield (
            f"Tip permalink '{document.permalink}' does not name a tip number "
            "('tips/<n>')."
        )
    elif tip_number != number:
        yield (
            f"Tip order '{order}' does not match permalink "
            f"'{document.permalink}' (expected {tip_number})."
        )


def check_tip_order(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report tips whose ``order`` is not the number in their permalink."""
    for document in corpus.tips():
        for message in _order_problems(document):
            yield Finding(
                rule=TIP_ORDER,
                severity=severity,
                message=message,
                path=document.path,
                line=1,
            )


def check_tip_order_sequence(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report published tips that break the listing's publication sequence.

    Tips are walked in listing order. A tip whose order repeats the previous
    tip's order competes for the same slot; a tip whose "Originally posted"
    date precedes the latest date seen so far was published out of sequence.
    """
    previous: Document | None = None
    latest: tuple[dt.date, Document] | None = None
    for document in corpus.listing("tips"):
        number = document.order_number
        if number is None:
            continue
        if previous is not None and previous.order_number == number:
            yield Finding(
                rule=TIP_ORDER_SEQUENCE,
                severity=severity,
                message=(
                    f"Tip order {number} repeats the order of "
                    f"{corpus.relative(previous.path)}."
                ),
                path=document.path,
                line=1,
            )
        previous = document

        posted_on = parse_provenance(document.body).posted_on
        if posted_on is None:
            continue
        if latest is not None and posted_on < latest[0]:
            yield Finding(
                rule=TIP_ORDER_SEQUENCE,
                severity=severity,
                message=(
                    f"Tip {number} was posted on {posted_on.isoformat()}, before "
                    f"{corpus.relative(latest[1].path)} "
                    f"({latest[0].isoformat()}) which it follows in order."
                ),
                path=document.path,
                line=1,
            )
        else:
            latest = (posted_on, document)


def _file_line(document: Document, body_line: int | None) -> int | None:
    return document.file_line(body_line) if body_line is not None else None


def _provenance_problems(document: Document) -> cabc.Iterator[tuple[str, int | None]]:
    provenance = parse_provenance(document.body)
    tip_number = document.tip_number
    posted_line = _file_line(document, provenance.posted_line)
    if (
        tip_number is not None
        and provenance.posted_number is not None
        and provenance.posted_number != tip_number
    ):
        yield (
            f"Body says 'Originally posted as TotW #{provenance.posted_number}' "
            f"but the permalink is tip {tip_number}.",
            posted_line,
        )
    if (
        tip_number is not None
        and provenance.quicklink_number is not None
        and provenance.quicklink_number != tip_number
    ):
        yield (
            f"Quicklink points at tip {provenance.quicklink_number} "
            f"but the permalink is tip {tip_number}.",
            _file_line(document, provenance.quicklink_line),
        )
    if provenance.posted_on is not None:
        for updated, line in zip(
            provenance.updated_on, provenance.updated_lines, strict=True
        ):
            if updated < provenance.posted_on:
                yield (
                    f"Updated date {updated.isoformat()} is before the posted "
                    f"date {provenance.posted_on.isoformat()}.",
                    document.file_line(line),
                )


def check_tip_provenance(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report tips whose preamble contradicts their permalink or dates."""
    for document in corpus.tips():
        for message, line in _provenance_problems(document):
            yield Finding(
                rule=TIP_PROVENANCE,
                severity=severity,
                message=message,
                path=document.path,
                line=line,
            )


__all__ = [
    "TIP_ORDER",
    "TIP_ORDER_SEQUENCE",
    "TIP_PROVENANCE",
    "check_tip_order",
    "check_tip_order_sequence",
    "check_tip_provenance",
]
