"""Input normalization for SQL LIKE patterns and free-text terms."""

import re

LIKE_ESCAPE_CHAR = "\\"

_WHITESPACE_RE = re.compile(r"\s+")


def escape_like(value: str) -> str:
    """Escape LIKE wildcards (% and _) and the escape char so value matches literally.

    Use with ``.like(pattern, escape=LIKE_ESCAPE_CHAR)``.
    """
    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


def contains_pattern(value: str) -> str:
    """Lower-cased ``%value%`` pattern for case-insensitive substring matching."""
    return f"%{escape_like(value.strip().lower())}%"


def prefix_pattern(value: str) -> str:
    """Lower-cased ``value%`` pattern for case-insensitive prefix matching."""
    return f"{escape_like(value.strip().lower())}%"


def normalize_whitespace(value: str) -> str:
    """Collapse runs of whitespace to one space and trim (query frequency keys)."""
    return _WHITESPACE_RE.sub(" ", value).strip()
