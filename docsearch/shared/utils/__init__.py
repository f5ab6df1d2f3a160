"""Shared utilities: datetime, generators, sanitization."""

from docsearch.shared.utils.datetime import ensure_utc, utc_now
from docsearch.shared.utils.generators import generate_cuid
from docsearch.shared.utils.sanitization import (
    LIKE_ESCAPE_CHAR,
    contains_pattern,
    escape_like,
    normalize_whitespace,
    prefix_pattern,
)

__all__ = [
    "LIKE_ESCAPE_CHAR",
    "contains_pattern",
    "ensure_utc",
    "escape_like",
    "generate_cuid",
    "normalize_whitespace",
    "prefix_pattern",
    "utc_now",
]
