r"""Split and parse the YAML front-matter block of corpus documents.

Every content file opens with a ``---`` delimited YAML block that the external
site generator reads to route and template the page. This module separates
that block from the Markdown body, loads it with ruamel.yaml in safe mode, and
validates the fields into a :class:`~totw_pages.content.models.Document`.

Example
-------
>>> from pathlib import Path
>>> from totw_pages.content.front_matter import parse_document
>>> text = "---\ntitle: Tip 1\nlayout: tips\npermalink: tips/1\norder: '001'\n---\nBody\n"
>>> doc = parse_document(text, Path("01.md"))
>>> (doc.title, doc.order, doc.tip_number)
('Tip 1', '001', 1)
"""

from __future__ import annotations

import typing as typ

import structlog
from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from totw_pages._constants import (
    FRONT_MATTER_DELIMITER,
    FRONT_MATTER_KEYS,
    FRONT_MATTER_TERMINATORS,
)

from .models import Document, FrontMatterError, Layout

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = structlog.get_logger(__name__)


def split_front_matter(
    text: str, *, path: Path | None = None
) -> tuple[str, str, int]:
    """Return the raw YAML block, the body, and the body's first line number.

    Parameters
    ----------
    text : str
        Full file contents.
    path : Path, optional
        Source path used in error messages.

    Returns
    -------
    tuple[str, str, int]
        YAML text between the delimiters, the Markdown body after the closing
        delimiter, and the 1-based file line on which the body starts.

    Raises
    ------
    FrontMatterError
        If the file does not open with ``---`` or the block is never closed.
    """
    lines = text.removeprefix("\ufeff").splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        msg = "Document does not start with a '---' front-matter block."
        raise FrontMatterError(msg, path=path, line=1)

    for index, line in enumerate(lines[1:], start=1):
        if line.rstrip("\r\n").rstrip() in FRONT_MATTER_TERMINATORS:
            raw = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            return raw, body, index + 2

    msg = "Front-matter block is not terminated by '---'."
    raise FrontMatterError(msg, path=path, line=1)


def _load_yaml(raw: str, *, path: Path | None) -> dict[str, typ.Any]:
    """Load the front-matter YAML into a plain mapping."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(raw)
    except MarkedYAMLError as exc:
        line = exc.problem_mark.line + 2 if exc.problem_mark is not None else None
        msg = f"Invalid front-matter YAML: {exc.problem or exc}"
        raise FrontMatterError(msg, path=path, line=line) from exc
    except YAMLError as exc:
        msg = f"Invalid front-matter YAML: {exc}"
        raise FrontMatterError(msg, path=path, line=1) from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = "Front-matter must be a YAML mapping."
        raise FrontMatterError(msg, path=path, line=2)
    return dict(loaded)


def _required_str(data: typ.Mapping[str, typ.Any], key: str, path: Path) -> str:
    value = data.get(key)
    if value is None or not str(value).strip():
        msg = f"Front-matter is missing required field '{key}'."
        raise FrontMatterError(msg, path=path, line=1)
    return str(value)


def _optional_str(value: object | None) -> str | None:
    """Return the string form of ``value`` or None when absent."""
    if value is None:
        return None
    return str(value)


def _parse_layout(value: object, path: Path) -> Layout:
    try:
        return Layout(str(value).strip())
    except ValueError as exc:
        known = ", ".join(layout.value for layout in Layout)
        msg = f"Unknown layout '{value}'. Known layouts: {known}"
        raise FrontMatterError(msg, path=path, line=1) from exc


def _parse_published(value: object, path: Path) -> bool:
    match value:
        case None:
            return True
        case bool():
            return value
        case _:
            msg = f"Field 'published' must be true or false, got {value!r}."
            raise FrontMatterError(msg, path=path, line=1)


def parse_document(text: str, path: Path) -> Document:
    """Parse a complete Markdown file into a :class:`Document`.

    Parameters
    ----------
    text : str
        Full file contents, front-matter included.
    path : Path
        Path recorded on the document and used in error messages.

    Returns
    -------
    Document
        Parsed document with unknown front-matter keys preserved in ``extra``.

    Raises
    ------
    FrontMatterError
        If the block is missing, is not valid YAML, is not a mapping, lacks
        ``title`` or ``permalink``, names an unknown ``layout``, or carries a
        non-boolean ``published`` value.
    """
    raw, body, body_line_offset = split_front_matter(text, path=path)
    data = _load_yaml(raw, path=path)

    title = _required_str(data, "title", path)
    permalink = _required_str(data, "permalink", path)
    if "layout" not in data:
        msg = "Front-matter is missing required field 'layout'."
        raise FrontMatterError(msg, path=path, line=1)
    layout = _parse_layout(data["layout"], path)

    order_value = data.get("order")
    match order_value:
        case None:
            order, order_quoted = None, True
        case bool():
            msg = f"Field 'order' must be a string of digits, got {order_value!r}."
            raise FrontMatterError(msg, path=path, line=1)
        case int():
            order, order_quoted = str(order_value), False
        case _:
            order, order_quoted = str(order_value), True

    extra = {key: value for key, value in data.items() if key not in FRONT_MATTER_KEYS}
    return Document(
        title=title,
        layout=layout,
        permalink=permalink,
        path=path,
        body=body,
        sidenav=_optional_str(data.get("sidenav")),
        order=order,
        order_quoted=order_quoted,
        published=_parse_published(data.get("published"), path),
        type=_optional_str(data.get("type")),
        body_line_offset=body_line_offset,
        extra=extra,
    )


def load_document(path: Path) -> Document:
    """Read ``path`` as UTF-8 and parse it with :func:`parse_document`."""
    text = path.read_text(encoding="utf-8")
    document = parse_document(text, path)
    logger.debug("document.loaded", path=str(path), permalink=document.permalink)
    return document


__all__ = ["load_document", "parse_document", "split_front_matter"]
