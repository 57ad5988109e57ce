"""
Vector store factory.

Builds the storage engine named by a StorageMode. Callers get back the
VectorStore contract and nothing else.
"""

import logging
from typing import Callable, Optional

from .base import VectorStore
from .chroma_store import connect_remote_store, open_embedded_store
from .memory import InMemoryVectorStore
from .models import StorageMode

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "knowledge_base"

_BUILDERS: dict[str, Callable[[StorageMode, str, int, Optional[float]], VectorStore]] = {
    "memory": lambda mode, name, size, timeout: InMemoryVectorStore(vector_size=size),
    "embedded": lambda mode, name, size, timeout: open_embedded_store(mode.path, name, size),
    "remote": lambda mode, name, size, timeout: connect_remote_store(
        mode.url, name, size, request_timeout=timeout
    ),
}


def create_vector_store(
    storage_mode: StorageMode,
    collection_name: str = DEFAULT_COLLECTION,
    vector_size: int = 768,
    timeout: Optional[float] = None,
) -> VectorStore:
    """
    Create a vector store for the given storage mode.

    Args:
        storage_mode: Which backend to build and where it lives.
        collection_name: Collection (table) to open or create.
        vector_size: Dimensionality of the embeddings to be stored.
        timeout: Per-request limit in seconds for network backends.

    Returns:
        A store satisfying the VectorStore contract.

    Raises:
        BackendUnavailable: If the backend cannot be opened or reached.
        ConfigurationError: If the collection name is not usable.
    """
    logger.info(f"Creating vector store: {storage_mode.describe()}, collection '{collection_name}'")
    return _BUILDERS[storage_mode.kind](storage_mode, collection_name, vector_size, timeout)
