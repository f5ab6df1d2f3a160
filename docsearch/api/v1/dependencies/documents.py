"""Document and indexing dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docsearch.api.v1.dependencies.app_state import get_cache, get_search_clients
from docsearch.application.use_cases.documents import DocumentService
from docsearch.application.use_cases.indexing import IndexingService
from docsearch.core.config import get_settings
from docsearch.domain.enums import SearchEngine
from docsearch.infrastructure.cache.redis_cache import CacheService
from docsearch.infrastructure.persistence.database import get_db, get_db_transactional
from docsearch.infrastructure.persistence.repositories import DocumentRepository
from docsearch.infrastructure.search.base import HttpSearchClient


async def get_document_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DocumentRepository:
    """Document repository on the read session."""
    return DocumentRepository(db)


async def get_document_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    clients: Annotated[dict[SearchEngine, HttpSearchClient], Depends(get_search_clients)],
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> DocumentService:
    """DocumentService for writes (committed when the request succeeds)."""
    return DocumentService(DocumentRepository(db), clients=clients, cache=cache)


async def get_indexing_service(
    document_repo: Annotated[DocumentRepository, Depends(get_document_repo)],
    clients: Annotated[dict[SearchEngine, HttpSearchClient], Depends(get_search_clients)],
) -> IndexingService:
    return IndexingService(
        document_repo, clients, batch_size=get_settings().index_batch_size
    )
