"""Persistence repositories. Re-exports for dependency injection."""

from docsearch.infrastructure.persistence.repositories.base import BaseRepository
from docsearch.infrastructure.persistence.repositories.document_repo import DocumentRepository
from docsearch.infrastructure.persistence.repositories.search_repo import SearchRepository

__all__ = [
    "BaseRepository",
    "DocumentRepository",
    "SearchRepository",
]
