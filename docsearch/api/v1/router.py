"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from docsearch.api.v1.dependencies.
"""

from fastapi import APIRouter

from docsearch.api.v1.endpoints import documents, health, indexing, search

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(search.router, prefix="/search", tags=["search-engines"])
api_router.include_router(indexing.router, tags=["indexing"])
