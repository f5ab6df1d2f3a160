"""Cache key builders. Single place for key format (DRY).

Key components must not contain CACHE_KEY_SEP to avoid ambiguous or
colliding keys.
"""

from urllib.parse import quote

from docsearch.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_AUTOCOMPLETE


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value contains the cache key separator."""
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def autocomplete_key(field: str, prefix: str, limit: int) -> str:
    """Cache key for ranked autocomplete suggestions.

    The prefix is lower-cased (matching and ranking are case-insensitive)
    and percent-encoded so it never contains the separator.
    """
    _validate_key_component(field, "field")
    term = quote(prefix.strip().lower(), safe="")
    return CACHE_KEY_SEP.join((CACHE_PREFIX_AUTOCOMPLETE, field.lower(), str(limit), term))


def autocomplete_pattern() -> str:
    """SCAN pattern matching every autocomplete entry."""
    return f"{CACHE_PREFIX_AUTOCOMPLETE}{CACHE_KEY_SEP}*"
