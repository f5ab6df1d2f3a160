"""Application DTOs (no ORM dependency)."""

from docsearch.application.dtos.document import (
    DocumentCreate,
    DocumentResult,
    DocumentUpdate,
)
from docsearch.application.dtos.search import (
    AutocompleteCandidate,
    EngineComparisonReport,
    EngineHit,
    Facets,
    FacetValue,
    IndexingResult,
    ReindexResult,
    SearchQuery,
    SearchResultPage,
)

__all__ = [
    "AutocompleteCandidate",
    "DocumentCreate",
    "DocumentResult",
    "DocumentUpdate",
    "EngineComparisonReport",
    "EngineHit",
    "FacetValue",
    "Facets",
    "IndexingResult",
    "ReindexResult",
    "SearchQuery",
    "SearchResultPage",
]
