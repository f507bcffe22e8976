"""Typed dataclasses describing documents in the tips corpus."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import enum
import typing as typ
from pathlib import Path

from totw_pages._constants import TIP_PERMALINK_PATTERN


class Layout(enum.StrEnum):
    """Page templates known to the external site generator."""

    TIPS = "tips"
    DOCS = "docs"


class FrontMatterError(ValueError):
    """Raised when a document's front-matter block is missing or invalid.

    Attributes
    ----------
    path : Path or None
        Source file the error was found in, when known.
    line : int or None
        1-based line number within the source file, when known.
    """

    def __init__(
        self, message: str, *, path: Path | None = None, line: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line

    def __str__(self) -> str:
        location = ""
        if self.path is not None:
            location = str(self.path)
            if self.line is not None:
                location = f"{location}:{self.line}"
            location = f"{location}: "
        return f"{location}{self.message}"


@dc.dataclass(slots=True)
class Document:
    """One Markdown file and its parsed front-matter.

    Attributes
    ----------
    title : str
        Page heading and ``<title>`` text.
    layout : Layout
        Template selected by the site generator.
    permalink : str
        Canonical route for the page, unique per document.
    path : Path
        Source file the document was read from.
    body : str
        Markdown (with embedded HTML) following the front-matter block.
    sidenav : str or None
        Sidebar navigation file identifier.
    order : str or None
        Listing sort key; tips use zero-padded digits.
    order_quoted : bool
        ``False`` when ``order`` was written as a bare YAML integer, which
        drops any zero padding.
    published : bool
        Visibility gate; unpublished pages are excluded from listings.
    type : str or None
        Body parser hint, expected to be ``"markdown"``.
    body_line_offset : int
        Line number of the first body line within ``path``.
    extra : dict[str, Any]
        Front-matter keys outside the known schema, kept verbatim.
    """

    title: str
    layout: Layout
    permalink: str
    path: Path
    body: str = ""
    sidenav: str | None = None
    order: str | None = None
    order_quoted: bool = True
    published: bool = True
    type: str | None = None
    body_line_offset: int = 1
    extra: dict[str, typ.Any] = dc.field(default_factory=dict)

    @property
    def tip_number(self) -> int | None:
        """Return the number in a ``tips/<n>`` permalink, or ``None``."""
        match = TIP_PERMALINK_PATTERN.match(self.permalink.strip())
        if match is None:
            return None
        return int(match.group("number"))

    @property
    def order_number(self) -> int | None:
        """Return ``order`` as an integer when it is made only of digits."""
        if self.order is None:
            return None
        text = self.order.strip()
        if not text.isdigit():
            return None
        return int(text)

    def file_line(self, body_line: int) -> int:
        """Translate a 1-based body line into a line of the source file."""
        return self.body_line_offset + body_line - 1


@dc.dataclass(slots=True)
class MacroRow:
    """A row from a compiler pre-defined macro reference table.

    Attributes
    ----------
    macro : str
        Macro name with surrounding backticks removed.
    target : str
        Platform, architecture, or language mode the macro identifies.
    defined_by : str
        Compiler or standard that defines the macro.
    note : str
        Free-text remark.
    section : str
        Title of the ``##`` section containing the table, or ``""``.
    line : int
        1-based body line of the row.
    cell_count : int
        Number of cells actually present in the source row.
    """

    macro: str
    target: str
    defined_by: str
    note: str
    section: str = ""
    line: int = 0
    cell_count: int = 4


@dc.dataclass(slots=True)
class Footnote:
    """A footnote definition anchored to a ``[^label]`` marker."""

    label: str
    text: str
    line: int


@dc.dataclass(slots=True)
class TipProvenance:
    """Publication details a tip states about itself in its body.

    Attributes
    ----------
    posted_number : int or None
        Tip number from an "Originally posted as TotW #N" line.
    posted_on : date or None
        Date from the same line.
    posted_line : int or None
        Body line of the "Originally posted" statement.
    updated_on : list[date]
        Dates from "Updated YYYY-MM-DD" lines, in order of appearance.
    updated_lines : list[int]
        Body line of each entry in ``updated_on``.
    authors : list[str]
        Names taken from the ``*By [Name](mailto:...)*`` byline.
    quicklink_number : int or None
        Tip number from a "Quicklink: abseil.io/tips/N" line.
    quicklink_line : int or None
        Body line of the quicklink.
    """

    posted_number: int | None = None
    posted_on: dt.date | None = None
    posted_line: int | None = None
    updated_on: list[dt.date] = dc.field(default_factory=list)
    updated_lines: list[int] = dc.field(default_factory=list)
    authors: list[str] = dc.field(default_factory=list)
    quicklink_number: int | None = None
    quicklink_line: int | None = None


__all__ = [
    "Document",
    "Footnote",
    "FrontMatterError",
    "Layout",
    "MacroRow",
    "TipProvenance",
]
