"""Push stored documents into the full-text engines."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from docsearch.application.dtos.search import IndexingResult, ReindexResult
from docsearch.domain.enums import SearchEngine
from docsearch.domain.exceptions import NotFoundError

if TYPE_CHECKING:
    from docsearch.application.dtos.document import DocumentResult
    from docsearch.application.interfaces.repositories import IDocumentRepository
    from docsearch.application.interfaces.services import ISearchBackendClient

logger = logging.getLogger(__name__)


class IndexingService:
    """Index one or all documents in every configured engine."""

    def __init__(
        self,
        document_repo: IDocumentRepository,
        clients: Mapping[SearchEngine, ISearchBackendClient],
        batch_size: int = 100,
    ) -> None:
        self.document_repo = document_repo
        self.clients = dict(clients)
        self.batch_size = batch_size

    async def _index_everywhere(self, document: DocumentResult) -> dict[SearchEngine, bool]:
        engines = list(self.clients)
        outcomes = await asyncio.gather(
            *(self.clients[engine].index_document(document) for engine in engines)
        )
        return dict(zip(engines, outcomes, strict=True))

    async def index_document(self, document_id: str) -> IndexingResult:
        """Index one stored document. Raises NotFoundError when it does not exist."""
        document = await self.document_repo.get_by_id(document_id)
        if document is None:
            raise NotFoundError("Document", document_id)
        outcomes = await self._index_everywhere(document)
        succeeded = sum(outcomes.values())
        message = (
            "Indexed in all engines"
            if succeeded == len(outcomes)
            else f"Indexed in {succeeded} of {len(outcomes)} engines"
        )
        return IndexingResult(
            document_id=document_id,
            solr_success=outcomes.get(SearchEngine.SOLR, False),
            opensearch_success=outcomes.get(SearchEngine.OPENSEARCH, False),
            typesense_success=outcomes.get(SearchEngine.TYPESENSE, False),
            message=message,
        )

    async def reindex_all(self) -> ReindexResult:
        """Walk every stored document in batches.

        A document counts as a success when at least one engine accepted it.
        """
        total = await self.document_repo.count()
        success = 0
        failure = 0
        offset = 0
        while True:
            batch = await self.document_repo.get_all(skip=offset, limit=self.batch_size)
            if not batch:
                break
            for document in batch:
                outcomes = await self._index_everywhere(document)
                if any(outcomes.values()):
                    success += 1
                else:
                    failure += 1
            offset += len(batch)
        logger.info("Reindex finished: %d documents, %d ok, %d failed", total, success, failure)
        return ReindexResult(
            total_documents=total,
            success_count=success,
            failure_count=failure,
            message=f"Reindexed {success} of {total} documents",
        )
