r"""Split Markdown bodies into headed sections.

Reference pages such as the pre-defined macro tables group their content under
``##`` headings ("Compilers", "Operating systems", ...). This module splits a
body into ordered sections and ``###`` subsections with unique slugs and the
line span each one covers, so other parsers can attribute what they find to
the surrounding heading. Headings inside fenced code blocks are ignored.

Example
-------
>>> from totw_pages.markdown_parser import parse_sections
>>> sections = parse_sections("## Compilers\nBody text\n\n### GCC\nMore")
>>> sections[0].title, sections[0].subsections[0].title
('Compilers', 'GCC')
>>> sections[0].start_line
1
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re

SECTION_PATTERN = re.compile(r"^##\s+(.*?)\s*#*\s*$")
SUBSECTION_PATTERN = re.compile(r"^###\s+(.*?)\s*#*\s*$")
FENCE_PATTERN = re.compile(r"^\s*(`{3,}|~{3,})")


@dc.dataclass(slots=True)
class Subsection:
    """Third-level heading and the Markdown beneath it.

    Attributes
    ----------
    title : str
        Text content of the subsection heading.
    markdown : str
        Markdown (sans heading) that belongs to this subsection.
    start_line : int
        1-based body line of the heading.
    """

    title: str
    markdown: str
    start_line: int


@dc.dataclass(slots=True)
class Section:
    """Second-level heading metadata and child subsections.

    Attributes
    ----------
    title : str
        Heading text with escapes removed.
    slug : str
        URL-safe identifier unique within the document.
    order : int
        1-based order of the section in the document.
    markdown : str
        Markdown content for the section (excluding the heading itself).
    start_line : int
        1-based body line of the heading.
    end_line : int
        Last body line belonging to the section.
    subsections : list[Subsection]
        Parsed third-level subsections within this section.
    """

    title: str
    slug: str
    order: int
    markdown: str
    start_line: int
    end_line: int
    subsections: list[Subsection]


def _clean_heading(text: str) -> str:
    """Return a cleaned heading, removing escapes and whitespace."""
    return text.replace("\\", "").strip()


def _slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "section"


def _unique_slug(base: str, used: set[str]) -> str:
    """Generate a unique slug, appending numeric suffixes when needed."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


def iter_prose_lines(lines: list[str]) -> cabc.Iterator[tuple[int, str]]:
    """Yield ``(index, line)`` for lines outside fenced code blocks.

    Fence marker lines themselves are skipped. A fence closes only on a
    marker of the same character that is at least as long as the opener.
    """
    fence: str | None = None
    for index, line in enumerate(lines):
        fence_match = FENCE_PATTERN.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker[0] * len(marker)
            elif marker.startswith(fence):
                fence = None
            continue
        if fence is None:
            yield index, line


def _heading_lines(lines: list[str], pattern: re.Pattern[str]) -> list[tuple[int, str]]:
    """Return ``(index, title)`` for heading lines outside fenced code."""
    found: list[tuple[int, str]] = []
    for index, line in iter_prose_lines(lines):
        match = pattern.match(line)
        if match:
            found.append((index, _clean_heading(match.group(1))))
    return found


def _split_subsections(lines: list[str], first_line: int) -> list[Subsection]:
    """Return the ``###`` subsections found in a section's body lines."""
    headings = _heading_lines(lines, SUBSECTION_PATTERN)
    subsections: list[Subsection] = []
    for idx, (index, title) in enumerate(headings):
        end = headings[idx + 1][0] if idx + 1 < len(headings) else len(lines)
        chunk = "\n".join(lines[index + 1 : end]).strip()
        subsections.append(
            Subsection(title=title, markdown=chunk, start_line=first_line + index)
        )
    return subsections


def parse_sections(markdown_text: str) -> list[Section]:
    """Split markdown into ordered Section objects with subsections.

    Parameters
    ----------
    markdown_text : str
        Raw markdown content with ``##`` section headings and optional
        ``###`` subsections.

    Returns
    -------
    list[Section]
        Parsed sections including titles, slugs, line spans, and their
        ``Subsection`` entries. Returns an empty list when no second-level
        headings are present.
    """
    lines = markdown_text.splitlines()
    headings = _heading_lines(lines, SECTION_PATTERN)
    if not headings:
        return []

    sections: list[Section] = []
    used_slugs: set[str] = set()
    for idx, (index, title) in enumerate(headings):
        end = headings[idx + 1][0] if idx + 1 < len(headings) else len(lines)
        body_lines = lines[index + 1 : end]
        sections.append(
            Section(
                title=title,
                slug=_unique_slug(_slugify(title), used_slugs),
                order=idx + 1,
                markdown="\n".join(body_lines).strip(),
                start_line=index + 1,
                end_line=end,
                subsections=_split_subsections(body_lines, index + 2),
            )
        )
    return sections


def section_for_line(sections: list[Section], line: int) -> Section | None:
    """Return the section whose span contains the 1-based ``line``."""
    for section in sections:
        if section.start_line <= line <= section.end_line:
            return section
    return None
