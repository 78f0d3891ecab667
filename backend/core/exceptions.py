"""
Exception hierarchy for the Corpus Chat RAG service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and an HTTP status code
used when the error is converted to a JSON response at the request boundary.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class CorpusChatException(Exception):
    """Base exception for all Corpus Chat application errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
            status_code: Optional HTTP status overriding the class default
        """
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(CorpusChatException):
    """Raised when the chat request body is missing or malformed."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class IngestionError(CorpusChatException):
    """Raised when the corpus file cannot be read at index build time."""

    def __init__(
        self,
        message: str,
        source_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize ingestion error.

        Args:
            message: Error message
            source_path: Corpus path that failed to load
            details: Additional context
        """
        details = details or {}
        if source_path:
            details["source_path"] = source_path
        super().__init__(message, details)


class ProviderError(CorpusChatException):
    """Raised when the embedding or generation provider fails or misbehaves."""

    status_code = 502

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        """
        Initialize provider error.

        Args:
            message: Error message
            operation: Provider operation that failed (embed_documents, embed_query, generate)
            details: Additional context
            status_code: HTTP status reported by the provider; 502 when absent
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details, status_code)


class IndexUnavailable(CorpusChatException):
    """Raised by the initialization gate once the index build has failed."""

    status_code = 503


def upstream_status_code(error: BaseException) -> int | None:
    """
    Extract the HTTP status carried by a provider SDK exception.

    Looks at ``status_code``, then ``code`` (google.api_core errors), then an
    attached ``response.status_code``. Only 4xx/5xx values count.
    """
    candidates = (
        getattr(error, "status_code", None),
        getattr(error, "code", None),
        getattr(getattr(error, "response", None), "status_code", None),
    )
    for candidate in candidates:
        if isinstance(candidate, int) and not isinstance(candidate, bool) and 400 <= candidate <= 599:
            return candidate
    return None
