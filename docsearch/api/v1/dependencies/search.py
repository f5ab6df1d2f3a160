"""Search, autocomplete and engine comparison dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docsearch.api.v1.dependencies.app_state import (
    get_cache,
    get_metrics,
    get_permission_filter,
    get_query_frequency,
    get_search_clients,
)
from docsearch.api.v1.dependencies.documents import get_document_repo
from docsearch.application.services.permission_service import PermissionService
from docsearch.application.services.query_frequency import QueryFrequencyAnalyzer
from docsearch.application.services.search_metrics import SearchMetricsCollector
from docsearch.application.use_cases.engine_comparison import EngineComparator
from docsearch.application.use_cases.search import UnifiedSearchOrchestrator, order_engines
from docsearch.core.config import get_settings
from docsearch.domain.enums import SearchEngine
from docsearch.infrastructure.cache.redis_cache import CacheService
from docsearch.infrastructure.persistence.database import get_db
from docsearch.infrastructure.persistence.repositories import (
    DocumentRepository,
    SearchRepository,
)
from docsearch.infrastructure.search.base import HttpSearchClient


async def get_search_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SearchRepository:
    """Relational search repository (read-only)."""
    settings = get_settings()
    return SearchRepository(
        db,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
        min_prefix_length=settings.autocomplete_min_prefix,
    )


async def get_search_orchestrator(
    search_repo: Annotated[SearchRepository, Depends(get_search_repo)],
    document_repo: Annotated[DocumentRepository, Depends(get_document_repo)],
    clients: Annotated[dict[SearchEngine, HttpSearchClient], Depends(get_search_clients)],
    permission_filter: Annotated[PermissionService, Depends(get_permission_filter)],
    metrics: Annotated[SearchMetricsCollector, Depends(get_metrics)],
    query_frequency: Annotated[QueryFrequencyAnalyzer, Depends(get_query_frequency)],
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> UnifiedSearchOrchestrator:
    settings = get_settings()
    return UnifiedSearchOrchestrator(
        search_repo,
        document_repo,
        order_engines(clients),
        permission_filter,
        metrics,
        cache=cache,
        query_frequency=query_frequency,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
        autocomplete_min_prefix=settings.autocomplete_min_prefix,
        autocomplete_default_limit=settings.autocomplete_default_limit,
        autocomplete_max_limit=settings.autocomplete_max_limit,
        autocomplete_cache_ttl=settings.cache_ttl_autocomplete,
        engine_max_hits=settings.search_max_hits,
    )


async def get_engine_comparator(
    clients: Annotated[dict[SearchEngine, HttpSearchClient], Depends(get_search_clients)],
) -> EngineComparator:
    return EngineComparator(clients)
