"""Providers for process-wide collaborators stored on app.state."""

from __future__ import annotations

from fastapi import Request

from docsearch.application.services.permission_service import PermissionService
from docsearch.application.services.query_frequency import QueryFrequencyAnalyzer
from docsearch.application.services.search_metrics import SearchMetricsCollector
from docsearch.core.config import get_settings
from docsearch.domain.enums import SearchEngine
from docsearch.infrastructure.cache.redis_cache import CacheService
from docsearch.infrastructure.search.base import HttpSearchClient


def get_principal(request: Request) -> str | None:
    """Requesting principal from the configured header; None when absent or blank."""
    raw = request.headers.get(get_settings().principal_header_name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def get_search_clients(request: Request) -> dict[SearchEngine, HttpSearchClient]:
    return request.app.state.search_clients


def get_metrics(request: Request) -> SearchMetricsCollector:
    return request.app.state.metrics


def get_query_frequency(request: Request) -> QueryFrequencyAnalyzer:
    return request.app.state.query_frequency


def get_permission_filter(request: Request) -> PermissionService:
    return request.app.state.permission_filter


def get_cache(request: Request) -> CacheService | None:
    return getattr(request.app.state, "cache", None)
