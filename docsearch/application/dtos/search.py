"""DTOs for search, facets, autocomplete and engine comparison (no dependency on ORM)."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

from docsearch.application.dtos.document import DocumentResult

DEFAULT_PAGE = 0
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class SearchQuery:
    """Search request: free text, structured filters, sort and pagination.

    Filters are independently optional and combined with AND. page/size are
    raw caller input; use normalized_page()/normalized_size() when querying.
    """

    query: str | None = None
    category: str | None = None
    status: str | None = None
    author: str | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    updated_after: datetime | None = None
    updated_before: datetime | None = None
    sort_by: str | None = None
    sort_order: str | None = None
    page: int | None = None
    size: int | None = None
    include_facets: bool = False

    @property
    def text(self) -> str | None:
        """Trimmed free-text term, or None when blank."""
        if self.query is None:
            return None
        return self.query.strip() or None

    def has_text(self) -> bool:
        return self.text is not None

    def has_filters(self) -> bool:
        """True when any structured filter (not free text) is set."""
        return (
            _present(self.category)
            or _present(self.status)
            or _present(self.author)
            or self.created_after is not None
            or self.created_before is not None
            or self.updated_after is not None
            or self.updated_before is not None
        )

    def normalized_page(self) -> int:
        """Page index: negative or missing becomes 0."""
        if self.page is None or self.page < 0:
            return DEFAULT_PAGE
        return self.page

    def normalized_size(self, default: int = DEFAULT_PAGE_SIZE, maximum: int = MAX_PAGE_SIZE) -> int:
        """Page size: non-positive or missing becomes default; capped at maximum."""
        if self.size is None or self.size <= 0:
            return default
        return min(self.size, maximum)


def _present(value: str | None) -> bool:
    return value is not None and bool(value.strip())


@dataclass(frozen=True)
class FacetValue:
    """One facet bucket: raw value, document count, display label (same as value)."""

    value: str
    count: int
    label: str


@dataclass(frozen=True)
class Facets:
    """Facet groups computed under 'all filters except this dimension'."""

    categories: list[FacetValue] = field(default_factory=list)
    statuses: list[FacetValue] = field(default_factory=list)
    authors: list[FacetValue] = field(default_factory=list)


@dataclass(frozen=True)
class SearchResultPage:
    """One page of documents plus pagination counters and optional facets."""

    content: list[DocumentResult]
    total_elements: int
    total_pages: int
    current_page: int
    page_size: int
    has_next: bool
    has_previous: bool
    facets: Facets | None = None

    @classmethod
    def build(
        cls,
        content: list[DocumentResult],
        total_elements: int,
        page: int,
        size: int,
        facets: Facets | None = None,
    ) -> SearchResultPage:
        """Derive total_pages / has_next / has_previous from total, page and size."""
        total_pages = math.ceil(total_elements / size) if size > 0 else 0
        return cls(
            content=content,
            total_elements=total_elements,
            total_pages=total_pages,
            current_page=page,
            page_size=size,
            has_next=page < total_pages - 1,
            has_previous=page > 0,
            facets=facets,
        )


@dataclass(frozen=True)
class EngineHit:
    """Single hit from a full-text engine. Score scale is engine-defined."""

    id: str
    title: str | None
    content: str | None
    author: str | None
    score: float
    engine: str


@dataclass(frozen=True)
class EngineComparisonReport:
    """Side-by-side results and elapsed milliseconds for the three engines."""

    query: str
    solr_results: list[EngineHit]
    opensearch_results: list[EngineHit]
    typesense_results: list[EngineHit]
    solr_time: int
    opensearch_time: int
    typesense_time: int

    @property
    def fastest_engine(self) -> str:
        """Engine with the smallest elapsed time (ties resolved Solr, OpenSearch, TypeSense)."""
        timings = (
            ("Solr", self.solr_time),
            ("OpenSearch", self.opensearch_time),
            ("TypeSense", self.typesense_time),
        )
        return min(timings, key=lambda item: item[1])[0]


@dataclass(frozen=True)
class AutocompleteCandidate:
    """Autocomplete suggestion: display text, source field tag, optional owning document."""

    text: str
    type: str
    document_id: str | None = None


@dataclass(frozen=True)
class IndexingResult:
    """Per-engine outcome of indexing one document."""

    document_id: str
    solr_success: bool
    opensearch_success: bool
    typesense_success: bool
    message: str


@dataclass(frozen=True)
class ReindexResult:
    """Outcome of reindexing every stored document."""

    total_documents: int
    success_count: int
    failure_count: int
    message: str
