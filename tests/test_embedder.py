"""Tests for vector_store.embedder - OllamaEmbedder."""

import httpx
import ollama
import pytest
from unittest.mock import MagicMock, patch

from vector_store.embedder import EmbeddingProvider, OllamaEmbedder
from vector_store.exceptions import (
    EmbeddingError,
    EmbeddingUnavailable,
    EmptyResult,
    OperationTimeout,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

FAKE_EMBEDDING = [0.1] * 768  # 768-dimensional fake embedding


@pytest.fixture
def mock_client():
    """Create a mock Ollama client."""
    with patch("vector_store.embedder.ollama.Client") as MockClient:
        client = MockClient.return_value
        client.embed.return_value = {
            "embeddings": [FAKE_EMBEDDING],
        }
        client.list.return_value = MagicMock(
            models=[
                MagicMock(model="nomic-embed-text:latest"),
                MagicMock(model="llama3:latest"),
            ]
        )
        yield client


@pytest.fixture
def embedder(mock_client):
    """Create an embedder with mocked Ollama client."""
    return OllamaEmbedder(model="nomic-embed-text")


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestInit:
    def test_client_gets_host_and_timeout(self):
        with patch("vector_store.embedder.ollama.Client") as MockClient:
            OllamaEmbedder(model="m", base_url="http://gpu-box:11434", timeout=5.0)
        MockClient.assert_called_once_with(host="http://gpu-box:11434", timeout=5.0)

    def test_is_an_embedding_provider(self, embedder):
        provider: EmbeddingProvider = embedder
        assert callable(provider.embed)


class TestEmbed:
    def test_single_text(self, embedder, mock_client):
        result = embedder.embed("Ein Testtext")
        assert len(result) == 768
        assert result == FAKE_EMBEDDING
        mock_client.embed.assert_called_once_with(model="nomic-embed-text", input="Ein Testtext")

    def test_model_override(self, embedder, mock_client):
        embedder.embed("Test", model="mxbai-embed-large")
        mock_client.embed.assert_called_once_with(model="mxbai-embed-large", input="Test")

    def test_same_input_same_vector(self, embedder):
        assert embedder.embed("Test") == embedder.embed("Test")

    def test_sets_dimensions(self, embedder, mock_client):
        assert embedder.dimensions is None
        embedder.embed("Test")
        assert embedder.dimensions == 768

    def test_empty_text_raises(self, embedder, mock_client):
        with pytest.raises(ValueError, match="empty"):
            embedder.embed("")
        mock_client.embed.assert_not_called()

    def test_whitespace_only_raises(self, embedder):
        with pytest.raises(ValueError, match="empty"):
            embedder.embed("   ")

    def test_connection_error(self, embedder, mock_client):
        mock_client.embed.side_effect = ConnectionError("refused")
        with pytest.raises(EmbeddingUnavailable, match="ollama serve") as exc_info:
            embedder.embed("Test")
        assert exc_info.value.model == "nomic-embed-text"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_transport_error(self, embedder, mock_client):
        mock_client.embed.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(EmbeddingUnavailable):
            embedder.embed("Test")

    def test_model_not_found(self, embedder, mock_client):
        mock_client.embed.side_effect = ollama.ResponseError("model 'x' not found", 404)
        with pytest.raises(EmbeddingUnavailable, match="not found"):
            embedder.embed("Test")

    def test_timeout(self, mock_client):
        mock_client.embed.side_effect = httpx.ReadTimeout("timed out")
        embedder = OllamaEmbedder(timeout=2.0)
        with pytest.raises(OperationTimeout) as exc_info:
            embedder.embed("Test")
        assert exc_info.value.operation == "embed"
        assert exc_info.value.timeout == 2.0

    def test_no_vectors(self, embedder, mock_client):
        mock_client.embed.return_value = {"embeddings": []}
        with pytest.raises(EmptyResult):
            embedder.embed("Test")

    def test_empty_vector(self, embedder, mock_client):
        mock_client.embed.return_value = {"embeddings": [[]]}
        with pytest.raises(EmbeddingError):
            embedder.embed("Test")

    def test_no_retry_on_failure(self, embedder, mock_client):
        mock_client.embed.side_effect = ConnectionError("refused")
        with pytest.raises(EmbeddingUnavailable):
            embedder.embed("Test")
        assert mock_client.embed.call_count == 1


class TestHealthCheck:
    def test_healthy(self, embedder):
        health = embedder.health_check()
        assert health["healthy"] is True
        assert health["ollama_running"] is True
        assert health["model_available"] is True

    def test_model_not_available(self, mock_client):
        embedder = OllamaEmbedder(model="nonexistent-model")
        health = embedder.health_check()
        assert health["healthy"] is False
        assert health["ollama_running"] is True
        assert health["model_available"] is False
        assert "not found" in health["error"]

    def test_ollama_not_running(self, mock_client):
        mock_client.list.side_effect = ConnectionError("refused")
        embedder = OllamaEmbedder(model="nomic-embed-text")
        health = embedder.health_check()
        assert health["healthy"] is False
        assert health["ollama_running"] is False
        assert "Cannot connect" in health["error"]
