"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from docsearch.infrastructure.
"""

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

__all__ = [
    "ICacheService",
    "IDocumentRepository",
    "IMetricsSink",
    "IPermissionFilter",
    "ISearchBackendClient",
    "ISearchRepository",
]
