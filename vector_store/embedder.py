"""
Ollama Embedder - Local embedding generation via Ollama API

Wraps the Ollama Python client to turn text into dense vectors. This is
the only EmbeddingProvider the engine ships; anything with the same
``embed`` signature can stand in for it.

Design:
- Thin wrapper around ollama.Client.embed()
- Never retries: a failed call surfaces exactly one terminal error
- Health check to verify Ollama is running and model is available
- No storage dependency, pure embedding logic

Usage:
    from vector_store.embedder import OllamaEmbedder

    embedder = OllamaEmbedder(model="nomic-embed-text")
    vector = embedder.embed("Ein Beispieltext")
"""

import logging
from typing import Optional, Protocol

import httpx
import ollama

from .exceptions import EmbeddingUnavailable, EmptyResult, OperationTimeout

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    """Maps text to a dense vector with a named model."""

    def embed(self, text: str, model: Optional[str] = None) -> list[float]:
        ...


class OllamaEmbedder:
    """
    Generates text embeddings using a local Ollama model.

    The embedder connects to a running Ollama instance and uses a specified
    embedding model to convert text into dense vector representations.
    """

    def __init__(
        self,
        model: str = "nomic-embed-text",
        base_url: str = "http://localhost:11434",
        timeout: Optional[float] = None,
    ):
        """
        Initialize the embedder.

        Args:
            model: Default Ollama model name for embeddings.
            base_url: Ollama API base URL.
            timeout: Per-request HTTP timeout in seconds (None = no limit).
        """
        self.model = model
        self.base_url = base_url
        self.timeout = timeout
        self._client = ollama.Client(host=base_url, timeout=timeout)
        self._dimensions: Optional[int] = None

    @property
    def dimensions(self) -> Optional[int]:
        """Return the embedding dimensions (available after first embed call)."""
        return self._dimensions

    def embed(self, text: str, model: Optional[str] = None) -> list[float]:
        """
        Generate an embedding for a single text.

        Args:
            text: The text to embed.
            model: Model to use instead of the default.

        Returns:
            List of floats representing the embedding vector.

        Raises:
            ValueError: If the text is empty.
            EmbeddingUnavailable: If Ollama is not reachable or rejects the request.
            EmptyResult: If Ollama returns no vectors.
            OperationTimeout: If the request exceeds the HTTP timeout.
        """
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        model = model or self.model
        try:
            response = self._client.embed(model=model, input=text)
        except ollama.ResponseError as e:
            raise EmbeddingUnavailable(model, self.base_url, details=str(e)) from e
        except httpx.TimeoutException as e:
            raise OperationTimeout("embed", self.timeout) from e
        except (ConnectionError, httpx.HTTPError) as e:
            raise EmbeddingUnavailable(
                model,
                self.base_url,
                details=f"{e}. Is Ollama running? Start it with: ollama serve",
            ) from e

        embeddings = response["embeddings"]
        if not embeddings or not embeddings[0]:
            raise EmptyResult(model)

        embedding = [float(x) for x in embeddings[0]]
        self._dimensions = len(embedding)
        return embedding

    def health_check(self) -> dict[str, bool | str]:
        """
        Check if Ollama is running and the embedding model is available.

        Returns:
            Dict with 'healthy' (bool), 'ollama_running' (bool),
            'model_available' (bool), and 'error' (str, if any).
        """
        result = {
            "healthy": False,
            "ollama_running": False,
            "model_available": False,
            "model": self.model,
            "error": "",
        }

        try:
            models = self._client.list()
            result["ollama_running"] = True

            model_names = [m.model for m in models.models]
            # "nomic-embed-text" matches "nomic-embed-text:latest"
            result["model_available"] = any(
                m and m.startswith(self.model) for m in model_names
            )

            if not result["model_available"]:
                result["error"] = (
                    f"Model '{self.model}' not found. "
                    f"Available: {model_names}. "
                    f"Pull it with: ollama pull {self.model}"
                )
            else:
                result["healthy"] = True

        except Exception as e:
            result["error"] = f"Cannot connect to Ollama: {e}"

        return result
