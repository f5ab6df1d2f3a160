"""Application layer: DTOs, ports, services and use cases.

Depends only on domain and protocol definitions. Infrastructure implements
the ports (repositories, engine clients, cache).
"""

from docsearch.application.interfaces import (
    ICacheService,
    IDocumentRepository,
    IMetricsSink,
    IPermissionFilter,
    ISearchBackendClient,
    ISearchRepository,
)
from docsearch.application.use_cases import (
    DocumentService,
    EngineComparator,
    IndexingService,
    UnifiedSearchOrchestrator,
)

__all__ = [
    "DocumentService",
    "EngineComparator",
    "ICacheService",
    "IDocumentRepository",
    "IMetricsSink",
    "IPermissionFilter",
    "ISearchBackendClient",
    "ISearchRepository",
    "IndexingService",
    "UnifiedSearchOrchestrator",
]
