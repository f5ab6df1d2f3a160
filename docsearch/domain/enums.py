"""Domain enumerations for the docsearch application.

Enums represent fixed sets of domain values (document status, search
engines, sortable and autocomplete fields).
"""

from enum import Enum


class DocumentStatus(str, Enum):
    """Document workflow status."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]


class DocumentCategory(str, Enum):
    """Known document categories (category column is free text; these are the seeded values)."""

    DOCUMENT = "document"
    TASK = "task"
    ATTACHMENT = "attachment"
    APPROVAL = "approval"

    @classmethod
    def values(cls) -> list[str]:
        """Return all known category values as strings."""
        return [category.value for category in cls]


class SearchEngine(str, Enum):
    """Full-text search backends. Value is the engine tag carried on hits."""

    SOLR = "Solr"
    OPENSEARCH = "OpenSearch"
    TYPESENSE = "TypeSense"


class SortField(str, Enum):
    """Whitelisted sort fields. Value is the ORM attribute name."""

    TITLE = "title"
    AUTHOR = "author"
    CATEGORY = "category"
    STATUS = "status"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"

    @classmethod
    def parse(cls, raw: str | None) -> "SortField | None":
        """Return the sort field for raw (camelCase, snake_case or enum name), or None if unknown."""
        if raw is None:
            return None
        key = raw.strip()
        if not key:
            return None
        normalized = key.replace("_", "").lower()
        for field in cls:
            if field.value.replace("_", "") == normalized:
                return field
        return None


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "ASC"
    DESC = "DESC"


class AutocompleteField(str, Enum):
    """Fields that support prefix autocomplete."""

    TITLE = "title"
    AUTHOR = "author"
    CATEGORY = "category"


class HealthStatus(str, Enum):
    """Search engine health read-out."""

    UP = "UP"
    DOWN = "DOWN"
    DEGRADED = "DEGRADED"
