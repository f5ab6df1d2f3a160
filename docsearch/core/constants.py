"""Core constants: cache key prefixes and shared literal values."""

# Cache key prefixes
CACHE_PREFIX_AUTOCOMPLETE = "autocomplete"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Field selector meaning "title, author and category together"
AUTOCOMPLETE_ALL_FIELDS = "ALL"
