"""Document repository. Returns application DTOs."""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docsearch.application.dtos.document import (
    DocumentCreate,
    DocumentResult,
    DocumentUpdate,
)
from docsearch.domain.exceptions import NotFoundError
from docsearch.infrastructure.persistence.models.document import Document
from docsearch.infrastructure.persistence.repositories.base import BaseRepository
from docsearch.shared.utils import ensure_utc, utc_now

logger = logging.getLogger(__name__)

# Smallest step the DateTime column round-trips on every backend.
_TIMESTAMP_STEP = timedelta(microseconds=1)


def _create_to_document(d: DocumentCreate) -> Document:
    """Map DocumentCreate (write-model) to ORM Document; timestamps equal on create."""
    now = utc_now()
    return Document(
        title=d.title,
        content=d.content,
        author=d.author,
        category=d.category,
        status=d.status,
        created_at=now,
        updated_at=now,
    )


def document_to_result(d: Document) -> DocumentResult:
    """Map ORM Document to application DocumentResult (timestamps normalized to UTC)."""
    return DocumentResult(
        id=d.id,
        title=d.title,
        content=d.content,
        author=d.author,
        category=d.category,
        status=d.status,
        created_at=ensure_utc(d.created_at),
        updated_at=ensure_utc(d.updated_at),
    )


class DocumentRepository(BaseRepository[Document]):
    """Document CRUD. Accepts DocumentCreate/DocumentUpdate; returns DocumentResult."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Document)

    async def get_by_id(self, document_id: str) -> DocumentResult | None:  # type: ignore[override]
        row = await super().get_by_id(document_id)
        return document_to_result(row) if row else None

    async def get_by_ids(self, document_ids: list[str]) -> list[DocumentResult]:
        return [document_to_result(row) for row in await self.get_many(document_ids)]

    async def get_all(self, skip: int = 0, limit: int | None = None) -> list[DocumentResult]:
        """Return documents newest first."""
        stmt = (
            select(Document)
            .order_by(Document.created_at.desc(), Document.id.asc())
            .offset(max(skip, 0))
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return [document_to_result(row) for row in result.scalars().all()]

    async def count(self) -> int:
        return await self.count_all()

    async def exists_by_id(self, document_id: str) -> bool:
        return await self.exists(document_id)

    async def create_document(self, data: DocumentCreate) -> DocumentResult:
        created = await self.create(_create_to_document(data))
        logger.debug("Created document %s", created.id)
        return document_to_result(created)

    async def update_document(
        self, document_id: str, data: DocumentUpdate
    ) -> DocumentResult:
        """Overwrite provided fields and advance updated_at.

        updated_at is strictly greater than its previous value even when two
        updates land within the clock's resolution.

        Raises:
            NotFoundError: No document with this id.
        """
        row = await super().get_by_id(document_id)
        if row is None:
            raise NotFoundError("Document", document_id)
        for name, value in data.changes().items():
            setattr(row, name, value)
        previous = ensure_utc(row.updated_at)
        row.updated_at = max(utc_now(), previous + _TIMESTAMP_STEP)
        saved = await self.save(row)
        return document_to_result(saved)

    async def delete_by_id(self, document_id: str) -> bool:
        """Hard delete. Returns False when the document does not exist."""
        row = await super().get_by_id(document_id)
        if row is None:
            return False
        await self.delete(row)
        logger.debug("Deleted document %s", document_id)
        return True
