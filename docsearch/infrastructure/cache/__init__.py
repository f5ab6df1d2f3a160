"""Cache: Redis service and cache key builders."""

from docsearch.infrastructure.cache.keys import autocomplete_key, autocomplete_pattern
from docsearch.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheService",
    "autocomplete_key",
    "autocomplete_pattern",
]
