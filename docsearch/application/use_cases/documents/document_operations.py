"""Document CRUD with best-effort propagation to the search engines."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING

from docsearch.application.dtos.document import (
    DocumentCreate,
    DocumentResult,
    DocumentUpdate,
)
from docsearch.domain.exceptions import InvalidArgumentError, NotFoundError
from docsearch.infrastructure.cache.keys import autocomplete_pattern

if TYPE_CHECKING:
    from docsearch.application.interfaces.repositories import IDocumentRepository
    from docsearch.application.interfaces.services import (
        ICacheService,
        ISearchBackendClient,
    )
    from docsearch.domain.enums import SearchEngine

logger = logging.getLogger(__name__)


def _require_title(title: str | None) -> str:
    if title is None or not title.strip():
        raise InvalidArgumentError("Title is required", field="title")
    return title.strip()


class DocumentService:
    """Create, read, update and delete documents.

    The relational store is authoritative: its errors propagate. Engine
    sync after a write is best effort and only logged on failure.
    """

    def __init__(
        self,
        document_repo: IDocumentRepository,
        clients: Mapping[SearchEngine, ISearchBackendClient] | None = None,
        cache: ICacheService | None = None,
    ) -> None:
        self.document_repo = document_repo
        self.clients = dict(clients or {})
        self.cache = cache

    async def get_document(self, document_id: str) -> DocumentResult:
        """Raises NotFoundError when absent."""
        document = await self.document_repo.get_by_id(document_id)
        if document is None:
            raise NotFoundError("Document", document_id)
        return document

    async def list_documents(self, skip: int = 0, limit: int = 100) -> list[DocumentResult]:
        return await self.document_repo.get_all(skip=skip, limit=limit)

    async def create_document(self, data: DocumentCreate) -> DocumentResult:
        data = replace(data, title=_require_title(data.title))
        document = await self.document_repo.create_document(data)
        logger.info("Created document %s", document.id)
        await self._sync_index(document)
        return document

    async def update_document(self, document_id: str, data: DocumentUpdate) -> DocumentResult:
        """Partial update. Raises NotFoundError when absent."""
        if data.title is not None:
            data = replace(data, title=_require_title(data.title))
        document = await self.document_repo.update_document(document_id, data)
        logger.info("Updated document %s", document_id)
        await self._sync_index(document)
        return document

    async def delete_document(self, document_id: str) -> bool:
        """Hard delete. False when the document did not exist (nothing changes)."""
        deleted = await self.document_repo.delete_by_id(document_id)
        if not deleted:
            logger.debug("Delete of missing document %s ignored", document_id)
            return False
        logger.info("Deleted document %s", document_id)
        await self._sync_delete(document_id)
        return True

    async def _sync_index(self, document: DocumentResult) -> None:
        if self.clients:
            await asyncio.gather(
                *(client.index_document(document) for client in self.clients.values())
            )
        await self._invalidate_suggestions()

    async def _sync_delete(self, document_id: str) -> None:
        if self.clients:
            await asyncio.gather(
                *(client.delete_document(document_id) for client in self.clients.values())
            )
        await self._invalidate_suggestions()

    async def _invalidate_suggestions(self) -> None:
        if self.cache is not None and self.cache.is_available():
            await self.cache.delete_pattern(autocomplete_pattern())
