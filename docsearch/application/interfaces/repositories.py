"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from docsearch.application.dtos.document import (
        DocumentCreate,
        DocumentResult,
        DocumentUpdate,
    )
    from docsearch.application.dtos.search import Facets, SearchQuery, SearchResultPage
    from docsearch.domain.enums import AutocompleteField


# Document repository interface
class IDocumentRepository(Protocol):
    """Protocol for document persistence (plain CRUD)."""

    async def get_by_id(self, document_id: str) -> DocumentResult | None:
        """Return document by ID, or None."""

    async def get_by_ids(self, document_ids: list[str]) -> list[DocumentResult]:
        """Return documents whose id is in document_ids (any order, missing ids skipped)."""

    async def get_all(self, skip: int = 0, limit: int | None = None) -> list[DocumentResult]:
        """Return documents ordered by creation time (newest first)."""

    async def count(self) -> int:
        """Return total document count."""

    async def exists_by_id(self, document_id: str) -> bool:
        """Return True if a document with this id exists."""

    async def create_document(self, data: DocumentCreate) -> DocumentResult:
        """Persist a new document; id and timestamps are assigned here."""

    async def update_document(
        self, document_id: str, data: DocumentUpdate
    ) -> DocumentResult:
        """Overwrite provided fields and refresh updated_at. Raises NotFoundError."""

    async def delete_by_id(self, document_id: str) -> bool:
        """Hard delete; return False when the document does not exist."""


# Relational search interface
class ISearchRepository(Protocol):
    """Protocol for the relational search engine (filters, facets, autocomplete)."""

    async def search(self, query: SearchQuery) -> SearchResultPage:
        """Filtered, sorted, paginated search. Facets included when query.include_facets."""

    async def search_ids(self, query: SearchQuery) -> list[str]:
        """Ids of every document matching the filter set, in the query's sort order (no paging)."""

    async def filter_ids(self, query: SearchQuery, document_ids: list[str]) -> set[str]:
        """Subset of document_ids that also satisfy the query's structured filters."""

    async def facets(self, query: SearchQuery) -> Facets:
        """Category, status and author facet counts."""

    async def autocomplete(
        self, field: AutocompleteField, prefix: str, limit: int
    ) -> list[str]:
        """Distinct field values starting with prefix (case-insensitive), ascending."""
