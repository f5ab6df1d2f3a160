"""Application use cases: documents, unified search, engine comparison, indexing."""

from docsearch.application.use_cases.documents import DocumentService
from docsearch.application.use_cases.engine_comparison import EngineComparator
from docsearch.application.use_cases.indexing import IndexingService
from docsearch.application.use_cases.search import (
    ENGINE_PRIORITY,
    UnifiedSearchOrchestrator,
    order_engines,
)

__all__ = [
    "ENGINE_PRIORITY",
    "DocumentService",
    "EngineComparator",
    "IndexingService",
    "UnifiedSearchOrchestrator",
    "order_engines",
]
