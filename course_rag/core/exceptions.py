"""
Exception hierarchy for the course retrieval pipeline.

Every error carries a message plus a details dict that ends up in log
records and in a material's stored error message.

Taxonomy: extraction errors are recovered into the extracted document,
embedding errors are retried then mark the material failed, validation
errors are raised to the caller, store errors fail the whole operation.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class CourseRagError(Exception):
    """Base exception for all course retrieval pipeline errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(CourseRagError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class EmptyTextError(ValidationError):
    """Raised when a text to embed is empty or whitespace only."""

    def __init__(self, index: int | None = None) -> None:
        details = {"index": index} if index is not None else None
        super().__init__("Text to embed must not be empty", field="text", details=details)


class EmptyQueryError(ValidationError):
    """Raised when a search query is empty or whitespace only."""

    def __init__(self) -> None:
        super().__init__("Search query must not be empty", field="query")


class EmbeddingDimensionError(ValidationError):
    """Raised when a vector does not have the configured dimension."""

    def __init__(self, expected: int, actual: int, details: dict[str, Any] | None = None) -> None:
        """
        Initialize dimension mismatch error.

        Args:
            expected: Configured embedding dimension
            actual: Length of the offending vector
            details: Additional context
        """
        details = details or {}
        details.update({"expected": expected, "actual": actual})
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Embedding dimension mismatch: expected {expected}, got {actual}",
            field="embedding",
            details=details,
        )


class DocumentProcessingError(CourseRagError):
    """Base exception for material processing errors."""

    def __init__(
        self,
        message: str,
        material_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if material_id:
            details["material_id"] = material_id
        super().__init__(message, details)


class ExtractionError(DocumentProcessingError):
    """Raised inside a format handler when text extraction fails."""

    def __init__(
        self,
        message: str,
        material_id: str | None = None,
        file_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_type:
            details["file_type"] = file_type
        super().__init__(message, material_id, details)


class EmbeddingError(DocumentProcessingError):
    """Raised when embedding generation fails."""


class EmbeddingAPIError(EmbeddingError):
    """Raised when the embedding provider answers with an error status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, details=details)


class EmbeddingRateLimitError(EmbeddingAPIError):
    """Raised when the embedding provider rejects a call for quota reasons."""

    def __init__(self, message: str = "Embedding provider rate limit exceeded") -> None:
        super().__init__(message, status_code=429)


class EmptyEmbeddingError(EmbeddingError):
    """Raised when the provider returns no vector values."""

    def __init__(self, message: str = "Embedding provider returned an empty vector") -> None:
        super().__init__(message)


class CircuitOpenError(CourseRagError):
    """Raised when a call is short-circuited by an open circuit breaker."""

    def __init__(self, name: str, retry_after: float) -> None:
        """
        Initialize circuit open error.

        Args:
            name: Circuit breaker name
            retry_after: Seconds until a trial call is allowed
        """
        self.retry_after = retry_after
        super().__init__(
            f"Circuit '{name}' is open",
            {"circuit": name, "retry_after_s": round(retry_after, 3)},
        )


class VectorStoreError(CourseRagError):
    """Raised when index store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class RetrievalError(CourseRagError):
    """Raised when retrieval operations fail."""

    def __init__(
        self,
        message: str,
        course_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if course_id:
            details["course_id"] = course_id
        super().__init__(message, details)


class ChunkNotFoundError(RetrievalError):
    """Raised when a source chunk for a similarity lookup does not exist."""

    def __init__(self, material_id: str, chunk_id: str) -> None:
        super().__init__(
            f"Chunk not found: {material_id}/{chunk_id}",
            details={"material_id": material_id, "chunk_id": chunk_id},
        )


class MaterialNotFoundError(RetrievalError):
    """Raised when a material cannot be found."""

    def __init__(self, material_id: str) -> None:
        super().__init__(
            f"Material not found: {material_id}",
            details={"material_id": material_id},
        )
