"""Document use cases: CRUD with engine sync."""

from docsearch.application.use_cases.documents.document_operations import DocumentService

__all__ = ["DocumentService"]
