"""
Retrieval component for RAG pipelines.

Ingests snippets and directory trees into a vector store and renders the
most relevant passages for a query as a context block.
"""

__version__ = "1.0.0"

from .config import RetrievalConfig
from .context import CONTEXT_HEADER, render_context
from .manager import RetrievalManager
from .models import IndexStats

__all__ = [
    "__version__",
    "RetrievalConfig",
    "RetrievalManager",
    "IndexStats",
    "render_context",
    "CONTEXT_HEADER",
]
