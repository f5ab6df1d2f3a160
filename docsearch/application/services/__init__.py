"""Application services: ranking, permission filter, metrics, query frequency."""

from docsearch.application.services.autocomplete_ranker import AutocompleteRanker
from docsearch.application.services.permission_service import PermissionService
from docsearch.application.services.query_frequency import (
    QueryFrequencyAnalyzer,
    QueryStats,
)
from docsearch.application.services.search_metrics import (
    OperationStats,
    SearchMetricsCollector,
)

__all__ = [
    "AutocompleteRanker",
    "OperationStats",
    "PermissionService",
    "QueryFrequencyAnalyzer",
    "QueryStats",
    "SearchMetricsCollector",
]
