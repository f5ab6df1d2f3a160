"""Persistence models: ORM entities and mixins."""

from docsearch.infrastructure.persistence.models.document import Document
from docsearch.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin

__all__ = [
    "CuidMixin",
    "Document",
    "TimestampMixin",
]
