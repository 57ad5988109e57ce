"""
Custom Exceptions for the Retrieval Engine.

This module defines a hierarchy of exceptions for precise error handling
across chunking, embedding, storage and directory ingestion.

Exception Hierarchy:
    RetrievalError (base)
    ├── ConfigurationError
    ├── EmbeddingError
    │   ├── EmbeddingUnavailable
    │   └── EmptyResult
    ├── StoreError
    │   ├── BackendUnavailable
    │   ├── DimensionMismatch
    │   └── UnsupportedOperation
    ├── IngestionIOError
    └── OperationTimeout

Usage:
    from vector_store.exceptions import (
        RetrievalError,
        EmbeddingUnavailable,
        StoreError,
    )

    try:
        manager.index_directory("./src")
    except EmbeddingUnavailable as e:
        print(f"Embedder down while indexing {e.path}")
    except RetrievalError as e:
        print(f"Retrieval failed: {e}")
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class RetrievalError(Exception):
    """
    Base exception for all retrieval-engine errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
        path: File being indexed when the error was raised (optional)
    """

    path: Optional[str] = None

    def __init__(
        self,
        message: str = "A retrieval error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class ConfigurationError(RetrievalError, ValueError):
    """Raised for invalid parameters, before any I/O takes place."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message, details)


# =============================================================================
# EMBEDDING ERRORS
# =============================================================================


class EmbeddingError(RetrievalError):
    """Base class for failures at the embedding boundary."""

    def __init__(
        self,
        message: str = "Embedding error",
        model: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.model = model
        super().__init__(message, details)


class EmbeddingUnavailable(EmbeddingError):
    """
    Raised when the embedding service cannot be reached or rejects a request.

    Attributes:
        model: Embedding model that was requested
        base_url: Address of the embedding service
    """

    def __init__(
        self,
        model: str,
        base_url: str,
        details: Optional[str] = None,
    ):
        self.base_url = base_url
        super().__init__(
            message=f"Embedding service at {base_url} unavailable for model '{model}'",
            model=model,
            details=details,
        )


class EmptyResult(EmbeddingError):
    """Raised when the service returns zero vectors for non-empty input."""

    def __init__(self, model: str):
        super().__init__(
            message=f"No embeddings returned by model '{model}'",
            model=model,
        )


# =============================================================================
# STORE ERRORS
# =============================================================================


class StoreError(RetrievalError):
    """Base class for vector store failures."""

    def __init__(
        self,
        message: str = "Vector store error",
        details: Optional[str] = None,
    ):
        super().__init__(message, details)


class BackendUnavailable(StoreError):
    """
    Raised when a backend cannot be opened or reached.

    Attributes:
        backend: Storage kind ("embedded", "remote", ...)
    """

    def __init__(
        self,
        backend: str,
        message: str,
        details: Optional[str] = None,
    ):
        self.backend = backend
        super().__init__(f"[{backend}] {message}", details)


class DimensionMismatch(StoreError):
    """
    Raised when an embedding's length disagrees with the collection.

    Attributes:
        expected: Dimensionality fixed for the collection
        actual: Dimensionality of the rejected vector
    """

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Embedding dimension mismatch: expected {expected}, got {actual}"
        )


class UnsupportedOperation(StoreError):
    """Raised by a backend that cannot perform a contractual operation."""

    def __init__(self, operation: str, backend: str):
        self.operation = operation
        self.backend = backend
        super().__init__(f"Operation '{operation}' is not supported by the {backend} backend")


# =============================================================================
# INGESTION ERRORS
# =============================================================================


class IngestionIOError(RetrievalError):
    """
    Raised when the root of a directory ingestion cannot be read.

    Unreadable files beneath the root are skipped, not reported.

    Attributes:
        path: Directory that could not be read
    """

    def __init__(self, path: str, details: Optional[str] = None):
        self.path = path
        super().__init__(f"Cannot read directory: {path}", details)


class OperationTimeout(RetrievalError):
    """
    Raised when an embedding or store call exceeds the caller's timeout.

    The failure is transient; retrying the operation is safe.

    Attributes:
        operation: Name of the abandoned operation
        timeout: Budget in seconds that was exceeded
    """

    def __init__(self, operation: str, timeout: Optional[float]):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"Operation '{operation}' timed out after {timeout}s")
