from dataclasses import dataclass, field
import os
from typing import Optional

from vector_store.models import StorageMode


def _default_storage() -> StorageMode:
    return StorageMode.embedded("data/retrieval/chroma")


@dataclass
class RetrievalConfig:
    storage: StorageMode = field(default_factory=_default_storage)
    collection_name: str = "knowledge_base"
    vector_size: int = 768
    embedding_model: str = "nomic-embed-text"
    ollama_base_url: str = "http://localhost:11434"
    chunk_size: int = 1000
    chunk_overlap: int = 200
    top_k: int = 3
    timeout_seconds: Optional[float] = None
    max_workers: int = 4

    @classmethod
    def from_env(cls) -> "RetrievalConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _float(name: str, default: Optional[float]) -> Optional[float]:
            value = os.environ.get(name)
            return float(value) if value else default

        return cls(
            storage=_storage_from_env(),
            collection_name=os.environ.get("RETRIEVAL_COLLECTION", cls.collection_name),
            vector_size=_int("RETRIEVAL_VECTOR_SIZE", cls.vector_size),
            embedding_model=os.environ.get("OLLAMA_EMBEDDING_MODEL", cls.embedding_model),
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", cls.ollama_base_url),
            chunk_size=_int("RETRIEVAL_CHUNK_SIZE", cls.chunk_size),
            chunk_overlap=_int("RETRIEVAL_CHUNK_OVERLAP", cls.chunk_overlap),
            top_k=_int("RETRIEVAL_TOP_K", cls.top_k),
            timeout_seconds=_float("RETRIEVAL_TIMEOUT", cls.timeout_seconds),
            max_workers=_int("RETRIEVAL_MAX_WORKERS", cls.max_workers),
        )


def _storage_from_env() -> StorageMode:
    kind = os.environ.get("RETRIEVAL_STORAGE", "embedded")
    if kind == "remote":
        return StorageMode.remote(os.environ.get("RETRIEVAL_STORAGE_URL", "http://localhost:8000"))
    if kind == "embedded":
        return StorageMode.embedded(os.environ.get("RETRIEVAL_STORAGE_PATH", "data/retrieval/chroma"))
    return StorageMode.from_config({kind: {}})
