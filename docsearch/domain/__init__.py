"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation.
"""

from docsearch.domain.enums import (
    AutocompleteField,
    DocumentCategory,
    DocumentStatus,
    HealthStatus,
    SearchEngine,
    SortField,
    SortOrder,
)
from docsearch.domain.exceptions import (
    BackendUnavailableError,
    DocSearchException,
    InvalidArgumentError,
    InvalidFieldError,
    NotFoundError,
    PermissionDeniedError,
    SqlNotConfiguredException,
)

__all__ = [
    # Enums
    "AutocompleteField",
    "DocumentCategory",
    "DocumentStatus",
    "HealthStatus",
    "SearchEngine",
    "SortField",
    "SortOrder",
    # Exceptions
    "BackendUnavailableError",
    "DocSearchException",
    "InvalidArgumentError",
    "InvalidFieldError",
    "NotFoundError",
    "PermissionDeniedError",
    "SqlNotConfiguredException",
]
