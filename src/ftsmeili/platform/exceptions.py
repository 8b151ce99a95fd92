"""Exceptions raised by the ftsmeili platform.

Transport-level "not found" outcomes are not exceptions: the store returns
``None`` / ``False`` for them so callers can tell a missing document apart
from a failure that must propagate.
"""

from typing import Any


class FtsMeiliError(Exception):
    """Base exception class for ftsmeili."""

    def __init__(
        self,
        message: str,
        error_code: str = "FTSMEILI_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(FtsMeiliError):
    """Raised when a required setting is missing or blank."""

    def __init__(self, message: str = "Your MeilisearchPlatform is not configured properly", key: str | None = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details={"key": key} if key else None,
        )


class ClientError(FtsMeiliError):
    """Raised when the platform is used before it was loaded."""

    def __init__(self, message: str = "platform not loaded"):
        super().__init__(message=message, error_code="CLIENT_ERROR")


# Search engine exceptions
class SearchEngineError(FtsMeiliError):
    """Base class for failures reported by, or while talking to, Meilisearch."""


class TransientTransportError(SearchEngineError):
    """Communication with Meilisearch failed; the operation can be retried later."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Meilisearch unreachable during {operation}: {reason}",
            error_code="SEARCH_ENGINE_UNAVAILABLE",
            details={"operation": operation, "reason": reason},
        )


class SearchEngineApiError(SearchEngineError):
    """Meilisearch answered with an error status."""

    def __init__(self, operation: str, status_code: int, message: str, code: str = ""):
        self.status_code = status_code
        self.code = code
        super().__init__(
            message=message,
            error_code="SEARCH_ENGINE_API_ERROR",
            details={"operation": operation, "status_code": status_code, "code": code},
        )


class IndexingError(SearchEngineError):
    """Meilisearch rejected a document (failed indexing task)."""

    def __init__(self, document_id: str, reason: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=f"Error indexing document '{document_id}': {reason}",
            error_code="INDEXING_ERROR",
            details=details or {"document_id": document_id, "reason": reason},
        )


# Mapping exceptions
class AccessIsEmptyError(FtsMeiliError):
    """Raised when a document without access record is about to be indexed."""

    def __init__(self, document_id: str):
        super().__init__(
            message=f"Document '{document_id}' has no access record",
            error_code="ACCESS_IS_EMPTY",
            details={"document_id": document_id},
        )


class SearchQueryGenerationError(FtsMeiliError):
    """Raised when a search request cannot be turned into a Meilisearch query."""

    def __init__(self, reason: str):
        super().__init__(message=f"Cannot generate search query: {reason}", error_code="SEARCH_QUERY_GENERATION")


class DocumentNotFoundError(FtsMeiliError):
    """Raised when no stored document matches a provider/document pair."""

    def __init__(self, provider_id: str, document_id: str):
        super().__init__(
            message=f"Document '{provider_id}:{document_id}' not found",
            error_code="DOCUMENT_NOT_FOUND",
            details={"provider_id": provider_id, "document_id": document_id},
        )
