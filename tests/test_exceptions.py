"""
Tests for retrieval-engine exceptions.
"""

import pytest

from vector_store import (
    # Base
    RetrievalError,
    ConfigurationError,
    # Embedding errors
    EmbeddingError,
    EmbeddingUnavailable,
    EmptyResult,
    # Store errors
    StoreError,
    BackendUnavailable,
    DimensionMismatch,
    UnsupportedOperation,
    # Ingestion and timing
    IngestionIOError,
    OperationTimeout,
)


class TestRetrievalError:
    """Tests for base RetrievalError."""

    def test_create_simple(self):
        error = RetrievalError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.details is None

    def test_create_with_details(self):
        error = RetrievalError("Error occurred", details="More info here")
        assert str(error) == "Error occurred | Details: More info here"
        assert error.details == "More info here"


class TestConfigurationError:
    def test_is_a_value_error(self):
        error = ConfigurationError("overlap must be smaller than chunk_size")
        assert isinstance(error, ValueError)
        assert isinstance(error, RetrievalError)


class TestEmbeddingErrors:
    def test_unavailable(self):
        error = EmbeddingUnavailable("nomic-embed-text", "http://localhost:11434", details="refused")
        assert error.model == "nomic-embed-text"
        assert error.base_url == "http://localhost:11434"
        assert "localhost:11434" in str(error)
        assert "refused" in str(error)

    def test_empty_result(self):
        error = EmptyResult("nomic-embed-text")
        assert error.model == "nomic-embed-text"
        assert "No embeddings" in str(error)


class TestStoreErrors:
    def test_backend_unavailable(self):
        error = BackendUnavailable("remote", "Cannot connect", details="timeout")
        assert error.backend == "remote"
        assert str(error).startswith("[remote] Cannot connect")

    def test_dimension_mismatch(self):
        error = DimensionMismatch(768, 384)
        assert error.expected == 768
        assert error.actual == 384
        assert "768" in str(error) and "384" in str(error)

    def test_unsupported_operation(self):
        error = UnsupportedOperation("remove_by_source", "remote")
        assert error.operation == "remove_by_source"
        assert "remote" in str(error)


class TestIngestionErrors:
    def test_io_error(self):
        error = IngestionIOError("/missing", details="No such file")
        assert error.path == "/missing"
        assert "/missing" in str(error)

    def test_path_defaults_to_none(self):
        error = EmbeddingUnavailable("m", "http://x")
        assert error.path is None

        error.path = "src/a.py"
        assert error.path == "src/a.py"
        assert isinstance(error, EmbeddingUnavailable)

    def test_timeout(self):
        error = OperationTimeout("search", 1.5)
        assert error.operation == "search"
        assert error.timeout == 1.5
        assert "1.5s" in str(error)


class TestHierarchy:
    @pytest.mark.parametrize("error,parent", [
        (EmbeddingUnavailable("m", "u"), EmbeddingError),
        (EmptyResult("m"), EmbeddingError),
        (BackendUnavailable("embedded", "x"), StoreError),
        (DimensionMismatch(1, 2), StoreError),
        (UnsupportedOperation("op", "b"), StoreError),
        (IngestionIOError("p"), RetrievalError),
        (OperationTimeout("op", 1.0), RetrievalError),
        (ConfigurationError("x"), RetrievalError),
    ])
    def test_inheritance(self, error, parent):
        assert isinstance(error, parent)
        assert isinstance(error, RetrievalError)

    def test_catch_all_with_base(self):
        with pytest.raises(RetrievalError):
            raise DimensionMismatch(3, 4)
