"""
Chroma Vector Store - embedded and remote backends on ChromaDB

One adapter, two ways of obtaining the chromadb client:
- Embedded: chromadb.PersistentClient on a local directory, so documents
  survive process restarts
- Remote: chromadb.HttpClient against a Chroma server addressed by URL

Design:
- The collection's dimensionality is recorded in its metadata when it is
  created and checked every time it is reopened
- Upsert semantics: adding an existing id overwrites it and keeps its
  original position
- Every document carries an insertion sequence number under a reserved
  metadata key; it is stripped again before documents are returned
- Search scores every stored embedding with the same cosine arithmetic
  as the in-memory engine and breaks ties by sequence number, so both
  engines rank identically
- Metadata is flat str -> str, which Chroma stores natively

Usage:
    from vector_store.chroma_store import open_embedded_store, connect_remote_store

    store = open_embedded_store("./data/chroma", "knowledge_base", vector_size=768)
    store = connect_remote_store("http://localhost:8000", "knowledge_base", vector_size=768)
"""

import logging
import os
import re
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence
from urllib.parse import urlparse

import chromadb
import httpx
from chromadb.errors import ChromaError

from .base import cosine_similarity, rank_results, source_matches
from .exceptions import BackendUnavailable, ConfigurationError, DimensionMismatch, StoreError
from .models import Document, SearchResult

logger = logging.getLogger(__name__)

# Chroma rejects very large requests, so deletes are sent in slices
BATCH_SIZE = 500

# Reserved metadata key holding the insertion sequence number
SEQUENCE_KEY = "_seq"

# Chroma's collection naming rule
_COLLECTION_NAME = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]{1,510}[a-zA-Z0-9]$")


def validate_collection_name(name: str) -> None:
    """
    Raises:
        ConfigurationError: If Chroma would reject the collection name.
    """
    if not _COLLECTION_NAME.match(name or "") or ".." in name:
        raise ConfigurationError(
            f"Invalid collection name: {name!r}",
            details="3-512 characters from [a-zA-Z0-9._-], starting and ending with a letter or digit",
        )


class ChromaVectorStore:
    """
    Vector store backed by a ChromaDB collection.

    Works with any chromadb client; the embedded and remote backends
    differ only in the client they hand in.
    """

    def __init__(
        self,
        client: chromadb.ClientAPI,
        collection_name: str,
        vector_size: int,
        backend: str = "embedded",
    ):
        """
        Open the named collection, creating it if absent.

        Args:
            client: A chromadb client (persistent, HTTP or ephemeral).
            collection_name: Name of the collection to use.
            vector_size: Dimensionality every stored embedding must have.
            backend: Label used in errors and logs.

        Raises:
            ConfigurationError: If the name or vector size is invalid.
            BackendUnavailable: If the collection cannot be opened or was
                                created with another dimensionality.
        """
        if vector_size <= 0:
            raise ConfigurationError(f"vector_size must be positive, got {vector_size}")
        validate_collection_name(collection_name)

        self.backend = backend
        self.collection_name = collection_name
        self.vector_size = vector_size
        self._client = client
        self._write_lock = threading.Lock()

        try:
            self._collection = client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine", "dimension": vector_size},
                embedding_function=None,
            )
        except Exception as e:
            raise BackendUnavailable(
                backend,
                f"Cannot open collection '{collection_name}'",
                details=str(e),
            ) from e

        stored = (self._collection.metadata or {}).get("dimension")
        if stored is not None and int(stored) != vector_size:
            raise BackendUnavailable(
                backend,
                f"Collection '{collection_name}' has dimension {stored}, expected {vector_size}",
            )

        with self._errors("open"):
            existing = self._collection.get(include=["metadatas"])["metadatas"] or []
        self._next_sequence = 1 + max(
            (int(meta.get(SEQUENCE_KEY, -1)) for meta in existing if meta),
            default=-1,
        )

        logger.info(f"Opened {backend} collection '{collection_name}'")

    @contextmanager
    def _errors(self, operation: str) -> Iterator[None]:
        """Translate chromadb and transport failures into StoreError kinds."""
        try:
            yield
        except StoreError:
            raise
        except (httpx.HTTPError, ConnectionError, OSError) as e:
            raise BackendUnavailable(
                self.backend,
                f"{operation} failed on collection '{self.collection_name}'",
                details=str(e),
            ) from e
        except ChromaError as e:
            raise StoreError(
                f"{operation} failed on collection '{self.collection_name}'",
                details=str(e),
            ) from e

    def add(self, document: Document) -> None:
        if not document.embedding:
            raise StoreError(f"Document '{document.id}' has an empty embedding")
        if len(document.embedding) != self.vector_size:
            raise DimensionMismatch(self.vector_size, len(document.embedding))

        with self._write_lock, self._errors("add"):
            previous = self._collection.get(ids=[document.id], include=["metadatas"])
            if previous["ids"] and previous["metadatas"] and previous["metadatas"][0]:
                sequence = int(previous["metadatas"][0].get(SEQUENCE_KEY, self._next_sequence))
            else:
                sequence = self._next_sequence
            self._next_sequence = max(self._next_sequence, sequence + 1)

            self._collection.upsert(
                ids=[document.id],
                embeddings=[list(document.embedding)],
                documents=[document.content],
                metadatas=[{**document.metadata, SEQUENCE_KEY: sequence}],
            )

    def search(self, query_embedding: Sequence[float], top_k: int) -> list[SearchResult]:
        if top_k <= 0:
            return []

        with self._errors("search"):
            raw = self._collection.get(include=["documents", "metadatas", "embeddings"])

        entries: list[tuple[int, Document]] = []
        for i, doc_id in enumerate(raw["ids"]):
            sequence, metadata = _split_metadata(raw["metadatas"][i])
            entries.append((sequence, Document(
                id=doc_id,
                content=raw["documents"][i] or "",
                embedding=[float(x) for x in raw["embeddings"][i]],
                metadata=metadata,
            )))

        entries.sort(key=lambda entry: entry[0])
        scored = [
            (doc, cosine_similarity(query_embedding, doc.embedding))
            for _, doc in entries
        ]
        return rank_results(scored, top_k)

    def count(self) -> int:
        with self._errors("count"):
            return self._collection.count()

    def clear(self) -> None:
        with self._write_lock, self._errors("clear"):
            ids = self._collection.get(include=[])["ids"]
            for i in range(0, len(ids), BATCH_SIZE):
                self._collection.delete(ids=ids[i:i + BATCH_SIZE])
            self._next_sequence = 0
        if ids:
            logger.info(f"Cleared {len(ids)} documents from '{self.collection_name}'")

    def get_indexed_paths(self) -> set[str]:
        with self._errors("get_indexed_paths"):
            result = self._collection.get(include=["metadatas"])
        paths = set()
        for meta in result["metadatas"] or []:
            if meta and meta.get("source"):
                paths.add(str(meta["source"]))
        return paths

    def remove_by_source(self, source: str) -> int:
        with self._write_lock, self._errors("remove_by_source"):
            result = self._collection.get(include=["metadatas"])
            doomed = [
                doc_id
                for doc_id, meta in zip(result["ids"], result["metadatas"] or [])
                if meta and source_matches(str(meta.get("source", "")), source)
            ]
            for i in range(0, len(doomed), BATCH_SIZE):
                self._collection.delete(ids=doomed[i:i + BATCH_SIZE])
        return len(doomed)


def _split_metadata(raw: Optional[dict[str, Any]]) -> tuple[int, dict[str, str]]:
    """Separate the sequence number from the caller's metadata."""
    metadata = dict(raw or {})
    sequence = int(metadata.pop(SEQUENCE_KEY, 0))
    return sequence, {key: str(value) for key, value in metadata.items()}


def open_embedded_store(
    path: str,
    collection_name: str,
    vector_size: int,
) -> ChromaVectorStore:
    """
    Open (or create) a persistent collection under ``path``.

    Raises:
        BackendUnavailable: If the directory is not writable or the
                            collection has another dimensionality.
    """
    validate_collection_name(collection_name)
    root = Path(path)
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BackendUnavailable("embedded", f"Cannot create storage directory {root}", details=str(e)) from e
    if not os.access(root, os.W_OK):
        raise BackendUnavailable("embedded", f"Storage directory is not writable: {root}")

    try:
        client = chromadb.PersistentClient(path=str(root))
    except Exception as e:
        raise BackendUnavailable("embedded", f"Cannot open storage at {root}", details=str(e)) from e

    return ChromaVectorStore(client, collection_name, vector_size, backend="embedded")


def parse_server_url(url: str) -> tuple[str, int, bool]:
    """
    Split a Chroma server URL into (host, port, ssl).

    Raises:
        ConfigurationError: If the URL has no host or an unknown scheme.
    """
    parsed = urlparse(url if "://" in url else f"http://{url}")
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ConfigurationError(f"Invalid remote storage URL: {url}")
    ssl = parsed.scheme == "https"
    port = parsed.port or (443 if ssl else 8000)
    return parsed.hostname, port, ssl


def _set_request_timeout(client: chromadb.ClientAPI, timeout: float) -> None:
    """Bound every HTTP request of a chromadb HttpClient."""
    # chromadb builds its httpx session with timeout=None and has no setting for it
    session = getattr(getattr(client, "_server", None), "_session", None)
    if isinstance(session, httpx.Client):
        session.timeout = httpx.Timeout(timeout)
    else:
        logger.warning("Chroma client exposes no HTTP session; requests are not time-limited")


def connect_remote_store(
    url: str,
    collection_name: str,
    vector_size: int,
    headers: Optional[dict[str, str]] = None,
    request_timeout: Optional[float] = None,
) -> ChromaVectorStore:
    """
    Connect to a Chroma server and verify (or create) the collection.

    Args:
        request_timeout: Per-request HTTP timeout in seconds (None = no limit).

    Raises:
        BackendUnavailable: If the server cannot be reached.
    """
    validate_collection_name(collection_name)
    host, port, ssl = parse_server_url(url)
    try:
        client = chromadb.HttpClient(host=host, port=port, ssl=ssl, headers=headers)
        if request_timeout is not None:
            _set_request_timeout(client, request_timeout)
        client.heartbeat()
    except Exception as e:
        raise BackendUnavailable("remote", f"Cannot connect to Chroma server at {url}", details=str(e)) from e

    return ChromaVectorStore(client, collection_name, vector_size, backend="remote")
