"""Documents API: CRUD plus unified search, facets and autocomplete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from docsearch.api.v1.dependencies import (
    get_document_service,
    get_permission_filter,
    get_principal,
    get_search_orchestrator,
)
from docsearch.application.services.permission_service import PermissionService
from docsearch.application.use_cases.documents import DocumentService
from docsearch.application.use_cases.search import UnifiedSearchOrchestrator
from docsearch.schemas.document import (
    DocumentCreateRequest,
    DocumentDeleteResponse,
    DocumentResponse,
    DocumentUpdateRequest,
)
from docsearch.schemas.search import (
    AutocompleteCandidateResponse,
    AutocompleteRequest,
    FacetsResponse,
    SearchRequest,
    SearchResultPageResponse,
)

router = APIRouter()


@router.post("/search", response_model=SearchResultPageResponse)
async def search_documents(
    body: SearchRequest,
    orchestrator: Annotated[UnifiedSearchOrchestrator, Depends(get_search_orchestrator)],
    principal: Annotated[str | None, Depends(get_principal)],
):
    """Filtered / full-text search. Engine outages fall back to the relational store."""
    page = await orchestrator.search_documents(body.to_query(), principal=principal)
    return SearchResultPageResponse.model_validate(page)


@router.post("/facets", response_model=FacetsResponse)
async def get_facets(
    body: SearchRequest,
    orchestrator: Annotated[UnifiedSearchOrchestrator, Depends(get_search_orchestrator)],
    principal: Annotated[str | None, Depends(get_principal)],
):
    facets = await orchestrator.get_facets(body.to_query(), principal=principal)
    return FacetsResponse.model_validate(facets)


@router.post("/autocomplete", response_model=list[AutocompleteCandidateResponse])
async def autocomplete(
    body: AutocompleteRequest,
    orchestrator: Annotated[UnifiedSearchOrchestrator, Depends(get_search_orchestrator)],
    principal: Annotated[str | None, Depends(get_principal)],
):
    """Ranked suggestions; field is ALL, title, author or category."""
    results = await orchestrator.autocomplete(
        body.prefix, field=body.field, limit=body.limit, principal=principal
    )
    return [AutocompleteCandidateResponse.model_validate(r) for r in results]


@router.get("", response_model=list[DocumentResponse])
async def list_documents(
    service: Annotated[DocumentService, Depends(get_document_service)],
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """Documents, newest first."""
    documents = await service.list_documents(skip=skip, limit=limit)
    return [DocumentResponse.model_validate(d) for d in documents]


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    service: Annotated[DocumentService, Depends(get_document_service)],
    permission_filter: Annotated[PermissionService, Depends(get_permission_filter)],
    principal: Annotated[str | None, Depends(get_principal)],
):
    document = await service.get_document(document_id)
    if principal is not None:
        await permission_filter.ensure_can_view(document_id, principal)
    return DocumentResponse.model_validate(document)


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    body: DocumentCreateRequest,
    service: Annotated[DocumentService, Depends(get_document_service)],
):
    document = await service.create_document(body.to_dto())
    return DocumentResponse.model_validate(document)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    body: DocumentUpdateRequest,
    service: Annotated[DocumentService, Depends(get_document_service)],
):
    """Partial update: only fields present in the body are overwritten."""
    document = await service.update_document(document_id, body.to_dto())
    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", response_model=DocumentDeleteResponse)
async def delete_document(
    document_id: str,
    service: Annotated[DocumentService, Depends(get_document_service)],
):
    """Hard delete. deleted is False (not 404) for an unknown id."""
    return DocumentDeleteResponse(deleted=await service.delete_document(document_id))
