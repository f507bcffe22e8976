"""Extract the publication statements tips make about themselves.

A tip body usually opens with a short preamble::

    Originally posted as TotW #1 on August 20, 2012

    *By [Titus Winters](mailto:titus@cs.ucsb.edu)*

    Updated 2017-09-18

    Quicklink: [abseil.io/tips/1](https://abseil.io/tips/1)

:func:`parse_provenance` reads those lines into a
:class:`~totw_pages.content.models.TipProvenance`. Dates that do not parse are
skipped rather than raised, so a typo surfaces as a check finding instead of a
load failure.
"""

from __future__ import annotations

import datetime as dt
import re

from totw_pages.markdown_parser import iter_prose_lines

from .models import TipProvenance

POSTED_PATTERN = re.compile(
    r"Originally\s+posted\s+as\s+TotW\s*#\s*(?P<number>\d+)"
    r"(?:\s+on\s+(?P<date>[A-Z][a-z]+\.?\s+\d{1,2},\s*\d{4}))?",
    re.IGNORECASE,
)
UPDATED_PATTERN = re.compile(
    r"^\s*\*?\s*Updated:?\s+(?P<date>\d{4}-\d{2}-\d{2})\b", re.IGNORECASE
)
BYLINE_PATTERN = re.compile(r"^\s*[*_]\s*By\s+(?P<names>.+?)\s*[*_]\s*$")
BYLINE_NAME_PATTERN = re.compile(r"\[([^\]]+)\]\([^)]*\)")
QUICKLINK_PATTERN = re.compile(r"Quicklink:.*?tips/(?P<number>\d+)", re.IGNORECASE)
POSTED_DATE_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%b. %d, %Y")


def _parse_posted_date(text: str | None) -> dt.date | None:
    if not text:
        return None
    normalized = re.sub(r"\s+", " ", text.strip())
    for fmt in POSTED_DATE_FORMATS:
        try:
            return dt.datetime.strptime(normalized, fmt).date()  # noqa: DTZ007
        except ValueError:
            continue
    return None


def _parse_iso_date(text: str) -> dt.date | None:
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        return None


def _byline_names(names: str) -> list[str]:
    linked = BYLINE_NAME_PATTERN.findall(names)
    if linked:
        return [name.strip() for name in linked]
    parts = re.split(r",\s*|\s+and\s+", names)
    return [part.strip() for part in parts if part.strip()]


def parse_provenance(body: str) -> TipProvenance:
    """Return the provenance details stated in a tip ``body``.

    Only the first "Originally posted" statement and the first byline are
    used; every "Updated" line is collected in order.
    """
    provenance = TipProvenance()
    for index, line in iter_prose_lines(body.splitlines()):
        if provenance.posted_line is None:
            posted = POSTED_PATTERN.search(line)
            if posted:
                provenance.posted_number = int(posted.group("number"))
                provenance.posted_on = _parse_posted_date(posted.group("date"))
                provenance.posted_line = index + 1
                continue
        updated = UPDATED_PATTERN.match(line)
        if updated:
            parsed = _parse_iso_date(updated.group("date"))
            if parsed is not None:
                provenance.updated_on.append(parsed)
                provenance.updated_lines.append(index + 1)
            continue
        if not provenance.authors:
            byline = BYLINE_PATTERN.match(line)
            if byline:
                provenance.authors = _byline_names(byline.group("names"))
                continue
        if provenance.quicklink_number is None:
            quicklink = QUICKLINK_PATTERN.search(line)
            if quicklink:
                provenance.quicklink_number = int(quicklink.group("number"))
                provenance.quicklink_line = index + 1
    return provenance


__all__ = ["parse_provenance"]
