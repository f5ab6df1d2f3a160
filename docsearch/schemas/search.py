"""Search, facet, autocomplete and engine comparison API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docsearch.application.dtos.search import SearchQuery
from docsearch.core.constants import AUTOCOMPLETE_ALL_FIELDS
from docsearch.schemas.document import DocumentResponse


class SearchRequest(BaseModel):
    """Body for POST /documents/search and /documents/facets.

    Accepts snake_case or camelCase keys. page/size are normalized by the
    search layer (negative page -> 0, size defaulted and capped).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    query: str | None = Field(default=None, max_length=500)
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

    def to_query(self) -> SearchQuery:
        return SearchQuery(**self.model_dump())


class FacetValueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    value: str
    count: int
    label: str


class FacetsResponse(BaseModel):
    """Facet groups; each dimension ignores its own filter."""

    model_config = ConfigDict(from_attributes=True)

    categories: list[FacetValueResponse] = []
    statuses: list[FacetValueResponse] = []
    authors: list[FacetValueResponse] = []


class SearchResultPageResponse(BaseModel):
    """One page of search results with pagination counters."""

    model_config = ConfigDict(from_attributes=True)

    content: list[DocumentResponse]
    total_elements: int
    total_pages: int
    current_page: int
    page_size: int
    has_next: bool
    has_previous: bool
    facets: FacetsResponse | None = None


class AutocompleteRequest(BaseModel):
    """Body for POST /documents/autocomplete."""

    prefix: str = Field(..., max_length=255)
    field: str | None = AUTOCOMPLETE_ALL_FIELDS
    limit: int | None = None


class AutocompleteCandidateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    text: str
    type: str
    document_id: str | None = None


class EngineHitResponse(BaseModel):
    """One hit from a full-text engine (score scale is engine specific)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str | None = None
    content: str | None = None
    author: str | None = None
    score: float
    engine: str


class EngineComparisonResponse(BaseModel):
    """Same query run on all three engines with elapsed milliseconds."""

    model_config = ConfigDict(from_attributes=True)

    query: str
    solr_results: list[EngineHitResponse]
    opensearch_results: list[EngineHitResponse]
    typesense_results: list[EngineHitResponse]
    solr_time: int
    opensearch_time: int
    typesense_time: int
    fastest_engine: str
