"""Unified search: strategy selection, engine fallback, permission filtering, metrics."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from docsearch.application.dtos.search import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    AutocompleteCandidate,
    EngineHit,
    Facets,
    SearchQuery,
    SearchResultPage,
)
from docsearch.application.services.autocomplete_ranker import AutocompleteRanker
from docsearch.core.constants import AUTOCOMPLETE_ALL_FIELDS
from docsearch.domain.enums import AutocompleteField, SearchEngine
from docsearch.domain.exceptions import (
    BackendUnavailableError,
    InvalidArgumentError,
    InvalidFieldError,
)
from docsearch.infrastructure.cache.keys import autocomplete_key
from docsearch.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from docsearch.application.dtos.document import DocumentResult
    from docsearch.application.interfaces.repositories import (
        IDocumentRepository,
        ISearchRepository,
    )
    from docsearch.application.interfaces.services import (
        ICacheService,
        IMetricsSink,
        IPermissionFilter,
        ISearchBackendClient,
    )
    from docsearch.application.services.query_frequency import QueryFrequencyAnalyzer

logger = logging.getLogger(__name__)

# Typesense (fast, typo-tolerant) -> OpenSearch -> Solr; relational store last.
ENGINE_PRIORITY: tuple[SearchEngine, ...] = (
    SearchEngine.TYPESENSE,
    SearchEngine.OPENSEARCH,
    SearchEngine.SOLR,
)

# Title suggestions get twice the budget of author/category under ALL.
_ALL_FIELDS_PLAN: tuple[tuple[AutocompleteField, int], ...] = (
    (AutocompleteField.TITLE, 2),
    (AutocompleteField.AUTHOR, 1),
    (AutocompleteField.CATEGORY, 1),
)


def order_engines(
    clients: Mapping[SearchEngine, ISearchBackendClient],
) -> list[tuple[SearchEngine, ISearchBackendClient]]:
    """Pair each configured client with its tag in fallback priority order."""
    return [(engine, clients[engine]) for engine in ENGINE_PRIORITY if engine in clients]


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _dedupe(ids: list[str]) -> list[str]:
    return list(dict.fromkeys(ids))


class UnifiedSearchOrchestrator:
    """Entry point for document search, facets and autocomplete.

    Picks one strategy per search call:

    - structured filters without free text: relational store only
    - free text: full-text engines in priority order, first success wins;
      hits are resolved against the store, filtered and paged in engine
      order; if every engine fails the relational substring search answers
    - neither: relational store, unfiltered

    When a principal is given, result ids pass through the permission filter
    in one batch before pagination counters are computed. Each public call
    records exactly one metrics sample.
    """

    def __init__(
        self,
        search_repo: ISearchRepository,
        document_repo: IDocumentRepository,
        engines: Sequence[tuple[SearchEngine, ISearchBackendClient]],
        permission_filter: IPermissionFilter,
        metrics: IMetricsSink,
        *,
        ranker: AutocompleteRanker | None = None,
        cache: ICacheService | None = None,
        query_frequency: QueryFrequencyAnalyzer | None = None,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
        autocomplete_min_prefix: int = 2,
        autocomplete_default_limit: int = 10,
        autocomplete_max_limit: int = 50,
        autocomplete_cache_ttl: int = 60,
        engine_max_hits: int = 1000,
    ) -> None:
        self.search_repo = search_repo
        self.document_repo = document_repo
        self.engines = list(engines)
        self.permission_filter = permission_filter
        self.metrics = metrics
        self.ranker = ranker or AutocompleteRanker()
        self.cache = cache
        self.query_frequency = query_frequency
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self.autocomplete_min_prefix = autocomplete_min_prefix
        self.autocomplete_default_limit = autocomplete_default_limit
        self.autocomplete_max_limit = autocomplete_max_limit
        self.autocomplete_cache_ttl = autocomplete_cache_ttl
        self.engine_max_hits = engine_max_hits

    # ---- search -------------------------------------------------------------

    @traced("search.documents")
    async def search_documents(
        self, query: SearchQuery, principal: str | None = None
    ) -> SearchResultPage:
        start = time.perf_counter()
        try:
            if query.has_text():
                page = await self._full_text_search(query, principal)
            else:
                if query.has_filters():
                    logger.debug("Filter-only query: using relational search")
                page = await self._relational_search(query, principal)
        except Exception:
            self.metrics.record_operation("search_error", _elapsed_ms(start))
            raise
        duration = _elapsed_ms(start)
        self.metrics.record_operation("search", duration)
        if self.query_frequency is not None:
            self.query_frequency.record(query.text, duration)
        logger.info(
            "Search completed in %.0fms, found %d documents", duration, page.total_elements
        )
        return page

    async def _relational_search(
        self, query: SearchQuery, principal: str | None
    ) -> SearchResultPage:
        if principal is None:
            return await self.search_repo.search(query)
        # Recount after permission filtering: walk the full matching id set.
        ids = await self.search_repo.search_ids(query)
        allowed = await self.permission_filter.filter_allowed(ids, principal)
        return await self._page_from_ids(query, allowed)

    async def _full_text_search(
        self, query: SearchQuery, principal: str | None
    ) -> SearchResultPage:
        term = query.text or ""
        try:
            found = await self._first_engine_hits(term, self._hit_budget(query))
            if found is not None:
                engine, hits = found
                add_span_attributes(**{"search.engine": engine.value, "search.hits": len(hits)})
                return await self._page_from_hits(query, hits, principal)
        except Exception:
            logger.exception("Full-text search failed, falling back to relational search")
        logger.info("All search engines unavailable for %r, using relational search", term)
        return await self._relational_search(query, principal)

    def _hit_budget(self, query: SearchQuery) -> int:
        """Rows to ask an engine for first: enough to fill the requested page."""
        page = query.normalized_page()
        size = query.normalized_size(self.default_page_size, self.max_page_size)
        return min(max((page + 1) * size, 1), self.engine_max_hits)

    async def _engine_hits(
        self, client: ISearchBackendClient, term: str, budget: int
    ) -> list[EngineHit]:
        """All hits for term up to engine_max_hits.

        A full batch means more matches may exist: the budget doubles and the
        query repeats until the engine returns a short batch or the ceiling is
        reached.
        """
        while True:
            hits = await asyncio.wait_for(client.search(term, budget), client.timeout_seconds)
            if len(hits) < budget or budget >= self.engine_max_hits:
                return hits
            budget = min(budget * 2, self.engine_max_hits)

    async def _first_engine_hits(
        self, term: str, budget: int
    ) -> tuple[SearchEngine, list[EngineHit]] | None:
        """Hits from the first engine that answers; None when all fail."""
        for engine, client in self.engines:
            try:
                hits = await self._engine_hits(client, term, budget)
            except BackendUnavailableError as e:
                logger.warning("%s unavailable, trying next engine: %s", engine.value, e.reason)
                continue
            except TimeoutError:
                logger.warning(
                    "%s timed out after %ss, trying next engine",
                    engine.value,
                    client.timeout_seconds,
                )
                continue
            except Exception as e:
                logger.warning("%s search failed, trying next engine: %s", engine.value, e)
                continue
            logger.debug("%s answered with %d hits", engine.value, len(hits))
            return engine, hits
        return None

    async def _page_from_hits(
        self, query: SearchQuery, hits: list[EngineHit], principal: str | None
    ) -> SearchResultPage:
        """Resolve engine hits to stored documents, keeping engine ranking."""
        ids = _dedupe([hit.id for hit in hits])
        if ids and query.has_filters():
            matching = await self.search_repo.filter_ids(query, ids)
            ids = [doc_id for doc_id in ids if doc_id in matching]
        if ids and principal is not None:
            ids = await self.permission_filter.filter_allowed(ids, principal)
        return await self._page_from_ids(query, ids)

    async def _page_from_ids(self, query: SearchQuery, ids: list[str]) -> SearchResultPage:
        """Page over an ordered id list; ids no longer in the store are dropped."""
        page = query.normalized_page()
        size = query.normalized_size(self.default_page_size, self.max_page_size)
        documents = await self.document_repo.get_by_ids(ids) if ids else []
        by_id: dict[str, DocumentResult] = {d.id: d for d in documents}
        ordered = [by_id[doc_id] for doc_id in ids if doc_id in by_id]
        content = ordered[page * size : (page + 1) * size]
        facets = await self.search_repo.facets(query) if query.include_facets else None
        return SearchResultPage.build(content, len(ordered), page, size, facets)

    # ---- facets -------------------------------------------------------------

    @traced("search.facets")
    async def get_facets(self, query: SearchQuery, principal: str | None = None) -> Facets:
        start = time.perf_counter()
        try:
            facets = await self.search_repo.facets(query)
        except Exception:
            self.metrics.record_operation("facets_error", _elapsed_ms(start))
            raise
        self.metrics.record_operation("facets", _elapsed_ms(start))
        return facets

    # ---- autocomplete -------------------------------------------------------

    @traced("search.autocomplete")
    async def autocomplete(
        self,
        prefix: str,
        field: str | None = AUTOCOMPLETE_ALL_FIELDS,
        limit: int | None = None,
        principal: str | None = None,
    ) -> list[AutocompleteCandidate]:
        """Ranked suggestions for prefix.

        Raises:
            InvalidFieldError: field is not ALL, title, author or category.
            InvalidArgumentError: prefix shorter than the minimum length.
        """
        start = time.perf_counter()
        try:
            results = await self._autocomplete(prefix, field, limit)
        except Exception:
            self.metrics.record_operation("autocomplete_error", _elapsed_ms(start))
            raise
        self.metrics.record_operation("autocomplete", _elapsed_ms(start))
        return results

    async def _autocomplete(
        self, prefix: str, field: str | None, limit: int | None
    ) -> list[AutocompleteCandidate]:
        fields = self._autocomplete_plan(field)
        if prefix is None or len(prefix.strip()) < self.autocomplete_min_prefix:
            raise InvalidArgumentError(
                f"Prefix must be at least {self.autocomplete_min_prefix} characters",
                field="prefix",
            )
        term = prefix.strip()
        if limit is None or limit <= 0:
            limit = self.autocomplete_default_limit
        limit = min(limit, self.autocomplete_max_limit)

        key = autocomplete_key(field_label(field), term, limit)
        cached = await self._cache_get(key)
        if cached is not None:
            return [AutocompleteCandidate(**item) for item in cached]

        results: list[AutocompleteCandidate] = []
        for source, multiplier in fields:
            values = await self.search_repo.autocomplete(source, term, limit * multiplier)
            candidates = [
                AutocompleteCandidate(text=value, type=source.value) for value in values
            ]
            results.extend(self.ranker.rank(candidates, term))
        results = results[:limit]
        await self._cache_set(key, results)
        return results

    def _autocomplete_plan(self, field: str | None) -> tuple[tuple[AutocompleteField, int], ...]:
        if field is None or not field.strip() or field.strip().upper() == AUTOCOMPLETE_ALL_FIELDS:
            return _ALL_FIELDS_PLAN
        try:
            return ((AutocompleteField(field.strip().lower()), 1),)
        except ValueError:
            raise InvalidFieldError(field) from None

    async def _cache_get(self, key: str) -> list[dict] | None:
        if self.cache is None or not self.cache.is_available():
            return None
        return await self.cache.get(key)

    async def _cache_set(self, key: str, results: list[AutocompleteCandidate]) -> None:
        if self.cache is None or not self.cache.is_available():
            return
        payload = [
            {"text": r.text, "type": r.type, "document_id": r.document_id} for r in results
        ]
        await self.cache.set(key, payload, ttl=self.autocomplete_cache_ttl)


def field_label(field: str | None) -> str:
    """Canonical field name for cache keys: ALL or the lower-cased field."""
    if field is None or not field.strip() or field.strip().upper() == AUTOCOMPLETE_ALL_FIELDS:
        return AUTOCOMPLETE_ALL_FIELDS
    return field.strip().lower()
