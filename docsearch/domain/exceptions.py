"""Domain exceptions for the docsearch application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DocSearchException(Exception):
    """Base exception for all docsearch application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the error as a JSON-serializable dict (error, message, details)."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(DocSearchException):
    """Raised when a referenced resource (e.g. document) does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and identifier.

        Args:
            resource_type: Type of resource (e.g. 'document').
            resource_id: Identifier that was not found.
        """
        super().__init__(
            f"{resource_type.capitalize()} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidArgumentError(DocSearchException):
    """Raised when request parameters are malformed (e.g. prefix too short)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: str = "VALIDATION_ERROR",
    ) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or parameter that failed validation.
            error_code: Machine-readable code (subclasses override).
        """
        details = {"field": field} if field else {}
        super().__init__(message, error_code, details)


class InvalidFieldError(InvalidArgumentError):
    """Raised when autocomplete is requested for an unknown field."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Unknown field: {field}", field=field, error_code="INVALID_FIELD")


class BackendUnavailableError(DocSearchException):
    """Raised when a search engine call fails or times out.

    Internal: caught by the orchestrator (fallback) and the comparator
    (empty result for that engine). Never surfaced by the search path.
    """

    def __init__(self, engine: str, reason: str) -> None:
        """Initialize with engine name and failure reason.

        Args:
            engine: Engine tag (e.g. 'Solr').
            reason: Short description of the failure (error text or 'timeout').
        """
        super().__init__(
            f"Search engine unavailable: {engine} ({reason})",
            "BACKEND_UNAVAILABLE",
            {"engine": engine, "reason": reason},
        )
        self.engine = engine
        self.reason = reason


class PermissionDeniedError(DocSearchException):
    """Raised when the principal lacks access to a document or action."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'document').
            action: Optional action that was attempted (e.g. 'read').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class SqlNotConfiguredException(DocSearchException):
    """Raised when a database session is requested but no engine could be created."""

    def __init__(self) -> None:
        super().__init__(
            "SQL database is not configured. Set DATABASE_URL.",
            "SQL_NOT_CONFIGURED",
        )
