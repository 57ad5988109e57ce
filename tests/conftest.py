"""
Pytest fixtures for the retrieval engine tests.
"""

import uuid
from pathlib import Path

import chromadb
import pytest

from retrieval import RetrievalConfig, RetrievalManager
from vector_store import Document, InMemoryVectorStore, StorageMode
from vector_store.chroma_store import ChromaVectorStore


VOCABULARY = ["config", "deploy", "test", "database", "cache"]
DIMENSIONS = len(VOCABULARY) + 1


class KeywordEmbedder:
    """
    Deterministic stand-in for the embedding service.

    Each vocabulary word contributes one axis; a constant last axis keeps
    every vector non-zero.
    """

    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    def embed(self, text, model=None):
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")
        self.calls.append((text, model))
        words = text.lower()
        return [float(words.count(word)) for word in VOCABULARY] + [0.1]


def make_document(doc_id: str, embedding: list[float], source: str = "notes", **metadata) -> Document:
    return Document(
        id=doc_id,
        content=f"content of {doc_id}",
        embedding=embedding,
        metadata={"source": source, **{k: str(v) for k, v in metadata.items()}},
    )


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def memory_store():
    return InMemoryVectorStore()


@pytest.fixture
def chroma_store():
    """ChromaVectorStore on an in-memory client with a fresh collection."""
    client = chromadb.EphemeralClient()
    return ChromaVectorStore(
        client,
        collection_name=f"test_{uuid.uuid4().hex[:8]}",
        vector_size=DIMENSIONS,
        backend="embedded",
    )


@pytest.fixture
def config():
    return RetrievalConfig(
        storage=StorageMode.memory(),
        vector_size=DIMENSIONS,
        chunk_size=100,
        chunk_overlap=20,
        top_k=3,
    )


@pytest.fixture
def manager(config, embedder, memory_store):
    with RetrievalManager(config, embedder=embedder, store=memory_store) as manager:
        yield manager


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    A small project tree:

        project/
            README.md
            main.py
            notes.exe
            Makefile
            pkg/
                config.py
                deep/
                    cache.ts
    """
    root = tmp_path / "project"
    (root / "pkg" / "deep").mkdir(parents=True)
    (root / "README.md").write_text("How to deploy the service.", encoding="utf-8")
    (root / "main.py").write_text("print('load config')", encoding="utf-8")
    (root / "notes.exe").write_text("binary-ish", encoding="utf-8")
    (root / "Makefile").write_text("test:\n\tpytest", encoding="utf-8")
    (root / "pkg" / "config.py").write_text("CONFIG = {'database': 'sqlite'}", encoding="utf-8")
    (root / "pkg" / "deep" / "cache.ts").write_text("export const cache = new Map();", encoding="utf-8")
    return root
