"""
Domain exceptions for the Scoutboard application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class ScoutboardError(Exception):
    """Base exception for all Scoutboard errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Pipeline Exceptions
class PipelineError(ScoutboardError):
    """Base exception for pipeline operations."""

    pass


class InvalidStageError(PipelineError):
    """Stage id is not part of the pipeline's registry."""

    def __init__(self, kind: str, stage_id: Any, valid: list[str] | None = None):
        valid = valid or []
        super().__init__(
            f"Invalid stage '{stage_id}' for pipeline '{kind}'"
            + (f". Valid: {', '.join(valid)}" if valid else ""),
            code="INVALID_STAGE",
            details={"kind": kind, "stage_id": stage_id, "valid": valid},
        )


# Storage Exceptions
class StorageError(ScoutboardError):
    """Base exception for storage operations."""

    pass


class RecordNotFoundError(StorageError):
    """Record does not exist (or was deleted concurrently)."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(
            f"Record not found: {collection}/{record_id}",
            code="RECORD_NOT_FOUND",
            details={"collection": collection, "record_id": record_id},
        )


class PersistenceFailedError(StorageError):
    """The record store rejected or failed a write."""

    def __init__(
        self,
        operation: str,
        collection: str,
        record_id: str | None = None,
        cause: str | None = None,
    ):
        super().__init__(
            f"Persistence failed during {operation} on {collection}"
            + (f"/{record_id}" if record_id else "")
            + (f": {cause}" if cause else ""),
            code="PERSISTENCE_FAILED",
            details={
                "operation": operation,
                "collection": collection,
                "record_id": record_id,
                "cause": cause,
            },
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Enrichment Exceptions
class EnrichmentError(ScoutboardError):
    """Base exception for external profile lookups."""

    pass


class FetchNetworkError(EnrichmentError):
    """Network-level failure while fetching a profile page."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Network error fetching {url}: {reason}",
            code="FETCH_NETWORK_ERROR",
            details={"url": url, "reason": reason},
        )


class FetchBlockedError(EnrichmentError):
    """The remote site refused the request."""

    def __init__(self, url: str, status_code: int | None = None):
        super().__init__(
            f"Request blocked for {url}"
            + (f" (HTTP {status_code})" if status_code else ""),
            code="FETCH_BLOCKED",
            details={"url": url, "status_code": status_code},
        )


class FetchParseError(EnrichmentError):
    """The fetched page could not be interpreted."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Failed to parse {url}: {reason}",
            code="FETCH_PARSE_ERROR",
            details={"url": url, "reason": reason},
        )


# Validation Exceptions
class ValidationError(ScoutboardError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class ConfigurationError(ScoutboardError):
    """Configuration error."""

    pass
