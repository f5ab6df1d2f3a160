"""Indexing API: push stored documents into the search engines."""

from typing import Annotated

from fastapi import APIRouter, Depends

from docsearch.api.v1.dependencies import get_indexing_service
from docsearch.application.use_cases.indexing import IndexingService
from docsearch.schemas.document import IndexingResponse, ReindexResponse

router = APIRouter()


@router.post("/documents/{document_id}/index", response_model=IndexingResponse)
async def index_document(
    document_id: str,
    service: Annotated[IndexingService, Depends(get_indexing_service)],
):
    """Index one document in every engine. 404 when the document does not exist."""
    return IndexingResponse.model_validate(await service.index_document(document_id))


@router.post("/reindex", response_model=ReindexResponse)
async def reindex_all(
    service: Annotated[IndexingService, Depends(get_indexing_service)],
):
    return ReindexResponse.model_validate(await service.reindex_all())
