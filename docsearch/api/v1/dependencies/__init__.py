"""Presentation-layer dependency injection (composition root).

Routes depend only on these providers. Process-wide collaborators (engine
clients, metrics collector, permission filter, cache) live on app.state and
are created by the lifespan; repositories and use cases are built per
request on the request's DB session.
"""

from docsearch.api.v1.dependencies.app_state import (
    get_cache,
    get_metrics,
    get_permission_filter,
    get_principal,
    get_query_frequency,
    get_search_clients,
)
from docsearch.api.v1.dependencies.documents import (
    get_document_repo,
    get_document_service,
    get_indexing_service,
)
from docsearch.api.v1.dependencies.search import (
    get_engine_comparator,
    get_search_orchestrator,
    get_search_repo,
)

__all__ = [
    "get_cache",
    "get_document_repo",
    "get_document_service",
    "get_engine_comparator",
    "get_indexing_service",
    "get_metrics",
    "get_permission_filter",
    "get_principal",
    "get_query_frequency",
    "get_search_clients",
    "get_search_orchestrator",
    "get_search_repo",
]
