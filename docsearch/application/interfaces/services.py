"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services and external
collaborators (search engines, permission checks, metrics, cache) (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from docsearch.application.dtos.document import DocumentResult
    from docsearch.application.dtos.search import EngineHit
    from docsearch.domain.enums import SearchEngine


# Full-text engine client interface (Solr, OpenSearch, Typesense)
class ISearchBackendClient(Protocol):
    """Protocol for a full-text search engine reached over the network.

    search() may raise (network error, bad response) or return an empty
    list; callers (orchestrator, comparator) must catch. Index/delete
    calls report success as a bool and never raise.
    """

    engine: SearchEngine
    timeout_seconds: float

    async def search(self, term: str, limit: int | None = None) -> list[EngineHit]:
        """Return ranked hits for term: at most limit, or search_result_rows when None."""

    async def index_document(self, document: DocumentResult) -> bool:
        """Upsert one document into the engine."""

    async def index_documents(self, documents: list[DocumentResult]) -> int:
        """Bulk upsert; return number indexed."""

    async def delete_document(self, document_id: str) -> bool:
        """Remove one document from the engine."""

    async def is_available(self) -> bool:
        """Return True if the engine answers a health request."""


# Permission filter interface
class IPermissionFilter(Protocol):
    """Protocol for batch-checked document authorization."""

    async def filter_allowed(self, document_ids: list[str], principal: str) -> list[str]:
        """Return the subset of document_ids the principal may view (order preserved)."""

    async def ensure_can_view(self, document_id: str, principal: str) -> None:
        """Raise PermissionDeniedError when the principal may not view the document."""


# Metrics sink interface
class IMetricsSink(Protocol):
    """Protocol for recording per-operation latency."""

    def record_operation(self, name: str, duration_ms: float) -> None:
        """Record one completed operation and its wall-clock duration."""


# Cache interface
class ICacheService(Protocol):
    """Protocol for cache backends (e.g. Redis). Used for autocomplete results."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store value with optional TTL in seconds."""

    async def delete_pattern(self, pattern: str) -> None:
        """Remove all keys matching pattern."""
