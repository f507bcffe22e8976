"""Parse the Markdown corpus into typed documents and reference records.

This subpackage reads content files, splits their YAML front-matter from the
Markdown body, and produces :class:`Document` records that the checks consume.
It also lifts the descriptive structures inside bodies (macro reference
tables, footnotes, and tip provenance preambles) into dataclasses. The primary
entry point is :func:`load_corpus`.

Examples
--------
>>> from pathlib import Path
>>> from totw_pages.content import load_corpus
>>> corpus = load_corpus(Path("content"))  # doctest: +SKIP
>>> len(corpus.tips())  # doctest: +SKIP
234
"""

from .corpus import Corpus, LoadError, load_corpus
from .footnotes import find_footnote_definitions, find_footnote_references
from .front_matter import load_document, parse_document, split_front_matter
from .macro_tables import parse_macro_tables
from .models import (
    Document,
    Footnote,
    FrontMatterError,
    Layout,
    MacroRow,
    TipProvenance,
)
from .provenance import parse_provenance

__all__ = [
    "Corpus",
    "Document",
    "Footnote",
    "FrontMatterError",
    "Layout",
    "LoadError",
    "MacroRow",
    "TipProvenance",
    "find_footnote_definitions",
    "find_footnote_references",
    "load_corpus",
    "load_document",
    "parse_document",
    "parse_macro_tables",
    "parse_provenance",
    "split_front_matter",
]
