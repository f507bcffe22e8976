"""Discover and load every document under a content directory.

The corpus is a flat collection of independent Markdown files. Loading is
tolerant: a file whose front-matter cannot be parsed becomes a
:class:`LoadError` so a single broken tip does not hide findings in the rest
of the corpus.

Examples
--------
>>> from pathlib import Path
>>> from totw_pages.content.corpus import load_corpus
>>> corpus = load_corpus(Path("content"))  # doctest: +SKIP
>>> [doc.permalink for doc in corpus.listing("tips")][:2]  # doctest: +SKIP
['tips/1', 'tips/2']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import fnmatch
import typing as typ

import structlog

from .front_matter import load_document
from .models import Document, FrontMatterError, Layout

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = structlog.get_logger(__name__)

DEFAULT_INCLUDE = ("**/*.md",)


@dc.dataclass(slots=True)
class LoadError:
    """A content file that could not be turned into a :class:`Document`."""

    path: Path
    message: str
    line: int | None = None


@dc.dataclass(slots=True)
class Corpus:
    """Documents loaded from one content root.

    Attributes
    ----------
    root : Path
        Directory the documents were discovered under.
    documents : list[Document]
        Successfully parsed documents, sorted by path.
    errors : list[LoadError]
        Files that failed to parse, sorted by path.
    """

    root: Path
    documents: list[Document] = dc.field(default_factory=list)
    errors: list[LoadError] = dc.field(default_factory=list)

    def tips(self) -> list[Document]:
        """Return documents that use the ``tips`` layout."""
        return [doc for doc in self.documents if doc.layout is Layout.TIPS]

    def published(self) -> list[Document]:
        """Return documents whose ``published`` flag is set."""
        return [doc for doc in self.documents if doc.published]

    def by_permalink(self) -> dict[str, list[Document]]:
        """Group documents by their literal permalink."""
        grouped: dict[str, list[Document]] = {}
        for doc in self.documents:
            grouped.setdefault(doc.permalink, []).append(doc)
        return grouped

    def listing(self, layout: Layout | str = Layout.TIPS) -> list[Document]:
        """Return published documents of ``layout`` in listing order.

        Documents sort by numeric ``order`` first; documents whose order is
        missing or not numeric follow, sorted by their raw order text and then
        by permalink.
        """
        wanted = Layout(layout)
        selected = [
            doc for doc in self.documents if doc.layout is wanted and doc.published
        ]
        return sorted(selected, key=_listing_key)

    def relative(self, path: Path) -> str:
        """Return ``path`` relative to the corpus root in POSIX form."""
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()


def _listing_key(doc: Document) -> tuple[int, int, str, str]:
    number = doc.order_number
    if number is None:
        return (1, 0, doc.order or "", doc.permalink)
    return (0, number, doc.order or "", doc.permalink)


def _is_excluded(relative: str, exclude: cabc.Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(relative, pattern) for pattern in exclude)


def discover_files(
    root: Path,
    include: cabc.Iterable[str] = DEFAULT_INCLUDE,
    exclude: cabc.Iterable[str] = (),
) -> list[Path]:
    """Return the sorted content files under ``root`` matching the globs.

    ``include`` patterns are passed to :meth:`Path.glob`; ``exclude`` patterns
    are matched with :mod:`fnmatch` against the root-relative POSIX path.
    """
    excluded = tuple(exclude)
    found: set[Path] = set()
    for pattern in include:
        for path in root.glob(pattern):
            if not path.is_file():
                continue
            relative = path.relative_to(root).as_posix()
            if _is_excluded(relative, excluded):
                continue
            found.add(path)
    return sorted(found)


def load_corpus(
    root: Path,
    include: cabc.Iterable[str] = DEFAULT_INCLUDE,
    exclude: cabc.Iterable[str] = (),
) -> Corpus:
    """Load every matching Markdown file under ``root`` into a :class:`Corpus`.

    Parameters
    ----------
    root : Path
        Content directory to scan.
    include : Iterable[str], optional
        Glob patterns selecting content files. Defaults to ``**/*.md``.
    exclude : Iterable[str], optional
        Patterns for root-relative paths to skip (for example ``README.md``).

    Returns
    -------
    Corpus
        Parsed documents and per-file load errors.

    Raises
    ------
    FileNotFoundError
        If ``root`` does not exist or is not a directory.
    UnicodeDecodeError
        If a content file is not valid UTF-8.
    """
    if not root.is_dir():
        msg = f"Content directory '{root}' not found."
        raise FileNotFoundError(msg)

    corpus = Corpus(root=root)
    for path in discover_files(root, include, exclude):
        try:
            corpus.documents.append(load_document(path))
        except FrontMatterError as exc:
            logger.debug("document.rejected", path=str(path), error=exc.message)
            corpus.errors.append(LoadError(path=path, message=exc.message, line=exc.line))
    logger.info(
        "corpus.loaded",
        root=str(root),
        documents=len(corpus.documents),
        errors=len(corpus.errors),
    )
    return corpus


__all__ = ["DEFAULT_INCLUDE", "Corpus", "LoadError", "discover_files", "load_corpus"]
