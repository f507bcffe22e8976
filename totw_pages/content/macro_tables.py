r"""Read compiler pre-defined macro reference tables out of Markdown.

The macro reference page lists, in pipe tables, which macro identifies which
target and who defines it. The tables are documentation, not detection logic;
this module only lifts their rows into :class:`MacroRow` records so they can
be proofread and exported.

Example
-------
>>> from totw_pages.content.macro_tables import parse_macro_tables
>>> body = (
...     "## Compilers\n"
...     "| Macro | Target | Defined by | Notes |\n"
...     "|---|---|---|---|\n"
...     "| `__clang__` | Clang | Clang | Also set by clang-cl |\n"
... )
>>> row = parse_macro_tables(body)[0]
>>> row.macro, row.section, row.line
('__clang__', 'Compilers', 4)
"""

from __future__ import annotations

import re

from totw_pages.markdown_parser import iter_prose_lines, parse_sections, section_for_line

from .models import MacroRow

MACRO_COLUMNS = 4
TABLE_ROW_PATTERN = re.compile(r"^\s*\|.*\|\s*$")
DELIMITER_CELL_PATTERN = re.compile(r"^:?-{1,}:?$")


def split_row(line: str) -> list[str]:
    """Split a pipe-table row into stripped cells, honouring ``\\|`` escapes."""
    text = line.strip()
    text = text.removeprefix("|")
    if text.endswith("|") and not text.endswith("\\|"):
        text = text[:-1]
    cells = re.split(r"(?<!\\)\|", text)
    return [cell.replace("\\|", "|").strip() for cell in cells]


def _is_delimiter_row(cells: list[str]) -> bool:
    return bool(cells) and all(
        DELIMITER_CELL_PATTERN.match(cell.replace(" ", "")) for cell in cells
    )


def _strip_code(cell: str) -> str:
    """Remove a single layer of backticks wrapping a macro name."""
    match = re.fullmatch(r"(`+)\s*(.*?)\s*\1", cell)
    return match.group(2) if match else cell


def _iter_tables(lines: list[str]) -> list[list[tuple[int, list[str]]]]:
    """Group consecutive pipe-table rows (outside code fences) into tables."""
    tables: list[list[tuple[int, list[str]]]] = []
    current: list[tuple[int, list[str]]] = []
    previous_index = -2
    for index, line in iter_prose_lines(lines):
        if not TABLE_ROW_PATTERN.match(line):
            continue
        if index != previous_index + 1 and current:
            tables.append(current)
            current = []
        current.append((index, split_row(line)))
        previous_index = index
    if current:
        tables.append(current)
    return tables


def parse_macro_tables(body: str) -> list[MacroRow]:
    """Return every data row from the macro tables in ``body``.

    Parameters
    ----------
    body : str
        Markdown body of a reference document.

    Returns
    -------
    list[MacroRow]
        Rows in document order. Only tables whose header has at least four
        columns and is followed by a delimiter row are considered. Rows with
        fewer than four cells are padded with empty strings and report the
        real count in ``cell_count``.
    """
    lines = body.splitlines()
    sections = parse_sections(body)
    rows: list[MacroRow] = []
    for table in _iter_tables(lines):
        if len(table) < 2:
            continue
        (_, header), (_, delimiter) = table[0], table[1]
        if len(header) < MACRO_COLUMNS or not _is_delimiter_row(delimiter):
            continue
        for index, cells in table[2:]:
            line = index + 1
            section = section_for_line(sections, line)
            padded = [*cells, *[""] * (MACRO_COLUMNS - len(cells))]
            rows.append(
                MacroRow(
                    macro=_strip_code(padded[0]),
                    target=padded[1],
                    defined_by=padded[2],
                    note=" | ".join(cell for cell in padded[3:] if cell),
                    section=section.title if section else "",
                    line=line,
                    cell_count=len(cells),
                )
            )
    return rows


__all__ = ["MACRO_COLUMNS", "parse_macro_tables", "split_row"]
