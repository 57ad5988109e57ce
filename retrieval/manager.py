"""
Retrieval Manager - ingestion and query-time retrieval

Ties the pipeline together:
- Ingest: chunk -> embed -> store, for single snippets or whole directories
- Retrieve: embed the query -> search the store -> render a context block

Design:
- Owns one EmbeddingProvider and one VectorStore, both injectable
- Embedding calls and store calls run on a private thread pool when a
  timeout is given, so the caller can stop waiting on them
- A failed file aborts a directory walk with its original error, tagged
  with the file's path
- A file is embedded completely before any of its chunks are written,
  so a failed embed leaves that file's previous chunks in place

Usage:
    from retrieval import RetrievalConfig, RetrievalManager

    with RetrievalManager(RetrievalConfig.from_env()) as manager:
        manager.index_directory("./src")
        print(manager.retrieve_context("How is the config loaded?"))
"""

import hashlib
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, Callable, Optional

from chunking import IndexedFile, chunk_file, iter_files, validate_chunking
from vector_store.base import VectorStore
from vector_store.embedder import EmbeddingProvider, OllamaEmbedder
from vector_store.exceptions import (
    ConfigurationError,
    OperationTimeout,
    RetrievalError,
)
from vector_store.factory import create_vector_store
from vector_store.models import Document, SearchResult

from .config import RetrievalConfig
from .context import render_context
from .models import IndexStats

logger = logging.getLogger(__name__)


class _Deadline:
    """Remaining time budget for one operation."""

    def __init__(self, timeout: Optional[float]):
        self.timeout = timeout
        self._expires = None if timeout is None else time.monotonic() + timeout

    def remaining(self, operation: str) -> Optional[float]:
        if self._expires is None:
            return None
        left = self._expires - time.monotonic()
        if left <= 0:
            raise OperationTimeout(operation, self.timeout)
        return left


class RetrievalManager:
    """
    Orchestrates knowledge ingestion and context retrieval.

    This is the only object client code needs: it hides the embedder,
    the chunker and whichever storage backend the config selects.
    """

    def __init__(
        self,
        config: Optional[RetrievalConfig] = None,
        embedder: Optional[EmbeddingProvider] = None,
        store: Optional[VectorStore] = None,
    ):
        """
        Initialize the manager.

        Args:
            config: Retrieval configuration. Uses defaults if not provided.
            embedder: Embedding provider. An OllamaEmbedder is created if omitted.
            store: Vector store. Built from config.storage if omitted.

        Raises:
            ConfigurationError: If the chunking or ranking parameters are invalid.
            BackendUnavailable: If the configured store cannot be opened.
        """
        self.config = config or RetrievalConfig()
        validate_chunking(self.config.chunk_size, self.config.chunk_overlap)
        if self.config.top_k < 0:
            raise ConfigurationError(f"top_k must not be negative, got {self.config.top_k}")

        self.embedder = embedder or OllamaEmbedder(
            model=self.config.embedding_model,
            base_url=self.config.ollama_base_url,
        )
        self.store = store or create_vector_store(
            self.config.storage,
            self.config.collection_name,
            self.config.vector_size,
            timeout=self.config.timeout_seconds,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="retrieval",
        )

    def __enter__(self) -> "RetrievalManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Stop the worker pool; calls still in flight are abandoned."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    # -------------------------------------------------------------------------
    # Ingestion
    # -------------------------------------------------------------------------

    def add_knowledge(
        self,
        content: str,
        source: str,
        timeout: Optional[float] = None,
    ) -> Document:
        """
        Embed a snippet and store it as one document.

        The id is derived from the source and a hash of the content, so
        adding the same snippet twice overwrites instead of duplicating.

        Returns:
            The stored document.
        """
        deadline = self._deadline(timeout)
        embedding = self._embed(content, deadline)

        digest = hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]
        document = Document(
            id=f"{source}_{digest}",
            content=content,
            embedding=embedding,
            metadata={"source": source},
        )
        self._call("add", deadline, self.store.add, document)
        return document

    def index_directory(self, path: str, timeout: Optional[float] = None) -> int:
        """
        Index every indexable file under ``path``.

        Returns:
            Number of files (not chunks) indexed.
        """
        return self.index_directory_with_stats(path, timeout=timeout).files_indexed

    def index_directory_with_stats(
        self,
        path: str,
        timeout: Optional[float] = None,
    ) -> IndexStats:
        """
        Index a directory tree and report what was done.

        Files are processed one at a time in traversal order. ``timeout``
        bounds each embedding and store call separately.

        Raises:
            IngestionIOError: If ``path`` itself cannot be read.
            RetrievalError: The first embedding or store failure, raised
                            as is with ``path`` set to the failing file.
                            Earlier files stay indexed and the walk can
                            be re-run.
        """
        start = time.time()
        stats = IndexStats(path=str(path))
        already_indexed = self._call("get_indexed_paths", self._deadline(timeout), self.store.get_indexed_paths)

        for file in iter_files(path):
            if not file.content.strip():
                logger.debug(f"Skipping empty file {file.path}")
                stats.files_skipped += 1
                continue

            try:
                stored = self._index_file(file, already_indexed, timeout)
            except RetrievalError as e:
                logger.warning(f"Indexing aborted at {file.path}: {e}")
                e.path = file.path
                e.add_note(f"while indexing {file.path}")
                raise

            stats.files_indexed += 1
            stats.chunks_stored += stored
            logger.info(f"Indexed: {file.path} ({stored} chunks)")

        stats.total_time_seconds = round(time.time() - start, 2)
        return stats

    def _index_file(self, file: IndexedFile, already_indexed: set[str], timeout: Optional[float]) -> int:
        chunks = [
            chunk
            for chunk in chunk_file(file, self.config.chunk_size, self.config.chunk_overlap)
            if chunk.text.strip()
        ]
        embeddings = [self._embed(chunk.text, self._deadline(timeout)) for chunk in chunks]

        # Drop chunks from a previous run so a shorter file leaves no stale tail
        if file.path in already_indexed:
            self._call("remove_by_source", self._deadline(timeout), self.store.remove_by_source, file.path)

        for chunk, embedding in zip(chunks, embeddings):
            document = Document(
                id=chunk.chunk_id,
                content=chunk.text,
                embedding=embedding,
                metadata={"source": chunk.source},
            ).with_metadata("chunk", chunk.chunk_index)
            self._call("add", self._deadline(timeout), self.store.add, document)

        return len(chunks)

    # -------------------------------------------------------------------------
    # Retrieval
    # -------------------------------------------------------------------------

    def retrieve(
        self,
        query: str,
        top_k: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> list[SearchResult]:
        """
        Return the stored documents most similar to ``query``, best first.

        An empty store yields an empty list without calling the embedder.
        """
        top_k = self.config.top_k if top_k is None else top_k
        if top_k < 0:
            raise ConfigurationError(f"top_k must not be negative, got {top_k}")

        deadline = self._deadline(timeout)
        if self._call("count", deadline, self.store.count) == 0:
            return []

        query_embedding = self._embed(query, deadline)
        return self._call("search", deadline, self.store.search, query_embedding, top_k)

    def retrieve_context(self, query: str, timeout: Optional[float] = None) -> str:
        """
        Render the top results for ``query`` as a numbered context block.

        Returns an empty string when the store is empty or nothing matches.
        Embedding failures are raised, never turned into an empty context.
        """
        return render_context(self.retrieve(query, timeout=timeout))

    # -------------------------------------------------------------------------
    # Store management
    # -------------------------------------------------------------------------

    def knowledge_base_count(self) -> int:
        return self.store.count()

    def clear(self) -> None:
        self.store.clear()
        logger.info("Knowledge base cleared")

    def get_indexed_paths(self) -> list[str]:
        return sorted(self.store.get_indexed_paths())

    def remove_source(self, source: str) -> int:
        removed = self.store.remove_by_source(source)
        logger.info(f"Removed {removed} documents under {source}")
        return removed

    def health_check(self) -> dict[str, Any]:
        """Report embedder health together with the store's state."""
        result: dict[str, Any] = {
            "storage": self.config.storage.describe(),
            "collection": self.config.collection_name,
        }
        embedder_health = getattr(self.embedder, "health_check", None)
        if embedder_health is not None:
            result.update(embedder_health())
        try:
            result["documents_stored"] = self.store.count()
            result["store_ok"] = True
        except RetrievalError as e:
            result["store_ok"] = False
            result["store_error"] = str(e)
        return result

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _deadline(self, timeout: Optional[float]) -> _Deadline:
        return _Deadline(self.config.timeout_seconds if timeout is None else timeout)

    def _embed(self, text: str, deadline: _Deadline) -> list[float]:
        return self._call("embed", deadline, self.embedder.embed, text, self.config.embedding_model)

    def _call(self, operation: str, deadline: _Deadline, fn: Callable, *args) -> Any:
        """
        Run an embedder or store call within the deadline.

        When time runs out the caller gets OperationTimeout and the call
        is abandoned. A store write that already started may still land
        afterwards; each write is a single document, so it lands whole.
        """
        remaining = deadline.remaining(operation)
        if remaining is None:
            return fn(*args)

        future = self._executor.submit(fn, *args)
        try:
            return future.result(timeout=remaining)
        except FuturesTimeoutError as e:
            future.cancel()
            logger.warning(f"{operation} exceeded {deadline.timeout}s, abandoning it")
            raise OperationTimeout(operation, deadline.timeout) from e
