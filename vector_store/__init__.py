"""
Vector Store Module - pluggable document storage with cosine search

Stores documents (text + embedding + flat metadata) behind one contract
with three engines: an in-memory reference engine, an embedded ChromaDB
collection on local disk, and a remote Chroma server.

Quick Start:
    from vector_store import Document, StorageMode, create_vector_store

    store = create_vector_store(StorageMode.embedded("./data/chroma"), vector_size=768)
    store.add(Document(id="a_0", content="...", embedding=vector, metadata={"source": "a.md"}))
    results = store.search(query_vector, top_k=3)
"""

__version__ = "1.0.0"

from .base import VectorStore, cosine_similarity, rank_results, source_matches
from .chroma_store import ChromaVectorStore, connect_remote_store, open_embedded_store
from .embedder import EmbeddingProvider, OllamaEmbedder
from .exceptions import (
    BackendUnavailable,
    ConfigurationError,
    DimensionMismatch,
    EmbeddingError,
    EmbeddingUnavailable,
    EmptyResult,
    IngestionIOError,
    OperationTimeout,
    RetrievalError,
    StoreError,
    UnsupportedOperation,
)
from .factory import create_vector_store
from .memory import InMemoryVectorStore, ReadWriteLock
from .models import Document, SearchResult, StorageMode

__all__ = [
    "__version__",
    "VectorStore",
    "InMemoryVectorStore",
    "ChromaVectorStore",
    "ReadWriteLock",
    "create_vector_store",
    "open_embedded_store",
    "connect_remote_store",
    "cosine_similarity",
    "rank_results",
    "source_matches",
    "EmbeddingProvider",
    "OllamaEmbedder",
    "Document",
    "SearchResult",
    "StorageMode",
    "RetrievalError",
    "ConfigurationError",
    "EmbeddingError",
    "EmbeddingUnavailable",
    "EmptyResult",
    "StoreError",
    "BackendUnavailable",
    "DimensionMismatch",
    "UnsupportedOperation",
    "IngestionIOError",
    "OperationTimeout",
]
