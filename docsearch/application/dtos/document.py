"""DTOs for document use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DocumentCreate:
    """Input for creating a document (write-model). Repo assigns id and timestamps."""

    title: str
    content: str | None = None
    author: str | None = None
    category: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class DocumentUpdate:
    """Partial update: fields left as None are not overwritten."""

    title: str | None = None
    content: str | None = None
    author: str | None = None
    category: str | None = None
    status: str | None = None

    def changes(self) -> dict[str, str]:
        """Return only the fields that were provided."""
        return {
            name: value
            for name, value in (
                ("title", self.title),
                ("content", self.content),
                ("author", self.author),
                ("category", self.category),
                ("status", self.status),
            )
            if value is not None
        }


@dataclass(frozen=True)
class DocumentResult:
    """Document read-model (result of get_by_id, search, create, update)."""

    id: str
    title: str
    content: str | None
    author: str | None
    category: str | None
    status: str | None
    created_at: datetime
    updated_at: datetime
