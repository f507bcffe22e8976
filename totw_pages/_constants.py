"""Common literal values used across totw_pages.

These constants keep front-matter keys, delimiters, and file names centralized
so the parser, checks, and tests can import the same values without drifting.
Intended for internal use within the totw_pages package.

Examples
--------
>>> from totw_pages import _constants
>>> _constants.TIP_PERMALINK_PATTERN.match("tips/234").group("number")
'234'
>>> _constants.CONTENT_TYPE
'markdown'
"""

import re

FRONT_MATTER_DELIMITER = "---"
FRONT_MATTER_TERMINATORS = frozenset({"---", "..."})
CONTENT_TYPE = "markdown"

FRONT_MATTER_KEYS = frozenset(
    {"title", "layout", "sidenav", "permalink", "order", "published", "type"}
)

TIP_PERMALINK_PATTERN = re.compile(r"^/?tips/(?P<number>\d+)/?$")
SIDENAV_SUFFIXES = (".yml", ".yaml")
