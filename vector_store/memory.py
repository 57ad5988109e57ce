"""
In-Memory Vector Store - exact linear-scan reference engine

Holds every document in one ordered list behind a read-write lock:
- Readers (search, count, get_indexed_paths) run concurrently
- Writers (add, clear, remove_by_source) run one at a time
- A waiting writer blocks new readers, so writers are never starved

Search scores every stored document with exact cosine similarity and
sorts stably, which makes this engine the baseline any other backend
is checked against.

Usage:
    from vector_store.memory import InMemoryVectorStore

    store = InMemoryVectorStore()
    store.add(Document(id="a", content="...", embedding=[...], metadata={"source": "a.md"}))
    results = store.search([...], top_k=3)
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from .base import cosine_similarity, rank_results, source_matches
from .exceptions import DimensionMismatch, StoreError
from .models import Document, SearchResult

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Writer-preferring read-write lock built on a single condition."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True
        try:
            yield
        finally:
            with self._cond:
                self._writer_active = False
                self._cond.notify_all()


class InMemoryVectorStore:
    """
    Process-local vector store with exact cosine search.

    Re-adding an id overwrites the stored document in place, keeping its
    original insertion position for tie-breaking.
    """

    backend = "memory"

    def __init__(self, vector_size: Optional[int] = None):
        """
        Initialize an empty store.

        Args:
            vector_size: Fixed dimensionality. If omitted, the first added
                         document fixes it until the store is cleared.
        """
        self._fixed_size = vector_size
        self._dimension = vector_size
        self._documents: list[Document] = []
        self._positions: dict[str, int] = {}
        self._lock = ReadWriteLock()

    def add(self, document: Document) -> None:
        if not document.embedding:
            raise StoreError(f"Document '{document.id}' has an empty embedding")

        with self._lock.write_locked():
            size = len(document.embedding)
            if self._dimension is not None and size != self._dimension:
                raise DimensionMismatch(self._dimension, size)
            self._dimension = size

            position = self._positions.get(document.id)
            if position is None:
                self._positions[document.id] = len(self._documents)
                self._documents.append(document)
            else:
                self._documents[position] = document

    def search(self, query_embedding: Sequence[float], top_k: int) -> list[SearchResult]:
        if top_k <= 0:
            return []
        with self._lock.read_locked():
            scored = [
                (document, cosine_similarity(query_embedding, document.embedding))
                for document in self._documents
            ]
        return rank_results(scored, top_k)

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._documents)

    def clear(self) -> None:
        with self._lock.write_locked():
            self._documents = []
            self._positions = {}
            self._dimension = self._fixed_size

    def get_indexed_paths(self) -> set[str]:
        with self._lock.read_locked():
            return {doc.source for doc in self._documents if doc.source}

    def remove_by_source(self, source: str) -> int:
        with self._lock.write_locked():
            kept = [doc for doc in self._documents if not source_matches(doc.source, source)]
            removed = len(self._documents) - len(kept)
            if removed:
                self._documents = kept
                self._positions = {doc.id: i for i, doc in enumerate(kept)}
        if removed:
            logger.debug(f"Removed {removed} documents under {source}")
        return removed
