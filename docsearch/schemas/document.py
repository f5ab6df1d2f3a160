"""Document API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docsearch.application.dtos.document import DocumentCreate, DocumentUpdate
from docsearch.domain.enums import DocumentCategory, DocumentStatus
from docsearch.infrastructure.persistence.models.document import (
    AUTHOR_MAX_LENGTH,
    CONTENT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)


class DocumentCreateRequest(BaseModel):
    """Request body for POST /documents."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, max_length=CONTENT_MAX_LENGTH)
    author: str | None = Field(default=None, max_length=AUTHOR_MAX_LENGTH)
    category: str | None = Field(
        default=None, max_length=64, examples=DocumentCategory.values()
    )
    status: str | None = Field(default=None, max_length=32, examples=DocumentStatus.values())

    def to_dto(self) -> DocumentCreate:
        return DocumentCreate(**self.model_dump())


class DocumentUpdateRequest(BaseModel):
    """Request body for PUT /documents/{id}. Omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, max_length=CONTENT_MAX_LENGTH)
    author: str | None = Field(default=None, max_length=AUTHOR_MAX_LENGTH)
    category: str | None = Field(
        default=None, max_length=64, examples=DocumentCategory.values()
    )
    status: str | None = Field(default=None, max_length=32, examples=DocumentStatus.values())

    def to_dto(self) -> DocumentUpdate:
        return DocumentUpdate(**self.model_dump())


class DocumentResponse(BaseModel):
    """Stored document."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str | None = None
    author: str | None = None
    category: str | None = None
    status: str | None = None
    created_at: datetime
    updated_at: datetime


class DocumentDeleteResponse(BaseModel):
    """Response for DELETE /documents/{id}; deleted is False when the id was unknown."""

    deleted: bool


class IndexingResponse(BaseModel):
    """Per-engine outcome of POST /documents/{id}/index."""

    model_config = ConfigDict(from_attributes=True)

    document_id: str
    solr_success: bool
    opensearch_success: bool
    typesense_success: bool
    message: str


class ReindexResponse(BaseModel):
    """Outcome of POST /reindex."""

    model_config = ConfigDict(from_attributes=True)

    total_documents: int
    success_count: int
    failure_count: int
    message: str
