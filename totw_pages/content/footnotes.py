"""Locate footnote markers and definitions in Markdown bodies.

Tips use Markdown footnotes (``[^label]`` markers with ``[^label]: text``
definitions) that the site generator resolves at render time. These helpers
find both sides so a missing definition can be reported before publishing.
Markers inside fenced code blocks and inline code spans are ignored.
"""

from __future__ import annotations

import re

from totw_pages.markdown_parser import iter_prose_lines

from .models import Footnote

DEFINITION_PATTERN = re.compile(r"^\s{0,3}\[\^([^\]\s]+)\]:\s?(.*)$")
REFERENCE_PATTERN = re.compile(r"\[\^([^\]\s]+)\](?!:)")
INLINE_CODE_PATTERN = re.compile(r"(`+)(?:(?!\1).)+?\1")
CONTINUATION_PATTERN = re.compile(r"^(?: {4}|\t)(.*)$")


def _without_inline_code(line: str) -> str:
    return INLINE_CODE_PATTERN.sub(lambda match: " " * len(match.group(0)), line)


def find_footnote_references(body: str) -> list[tuple[str, int]]:
    """Return ``(label, line)`` for every footnote marker in ``body``.

    Markers that open a definition line are not references. Lines are
    1-based body lines.
    """
    references: list[tuple[str, int]] = []
    for index, line in iter_prose_lines(body.splitlines()):
        text = _without_inline_code(line)
        definition = DEFINITION_PATTERN.match(text)
        if definition:
            text = definition.group(2)
        references.extend(
            (match.group(1), index + 1) for match in REFERENCE_PATTERN.finditer(text)
        )
    return references


def find_footnote_definitions(body: str) -> list[Footnote]:
    """Return every ``[^label]: text`` definition in ``body``.

    Indented lines directly following a definition are treated as its
    continuation and joined with single spaces.
    """
    definitions: list[Footnote] = []
    current: Footnote | None = None
    previous_index = -2
    for index, line in iter_prose_lines(body.splitlines()):
        match = DEFINITION_PATTERN.match(line)
        if match:
            current = Footnote(
                label=match.group(1), text=match.group(2).strip(), line=index + 1
            )
            definitions.append(current)
        elif current is not None and index == previous_index + 1:
            continuation = CONTINUATION_PATTERN.match(line)
            if continuation and continuation.group(1).strip():
                current.text = f"{current.text} {continuation.group(1).strip()}".strip()
            elif line.strip():
                current = None
        previous_index = index
    return definitions


__all__ = ["find_footnote_definitions", "find_footnote_references"]
