"""
Vector Store Contract

Every storage engine (in-memory reference, embedded chromadb, remote
chromadb) exposes the same six operations. Callers only ever hold a
VectorStore; which engine sits behind it is decided once by the factory.

The scoring and ranking helpers live here so that every engine ranks
with exactly the same arithmetic as the reference engine.
"""

import math
import os
from typing import Iterable, Protocol, Sequence, runtime_checkable

from .models import Document, SearchResult


@runtime_checkable
class VectorStore(Protocol):
    """Capability interface shared by all storage engines."""

    def add(self, document: Document) -> None:
        """Store a document, overwriting any document with the same id."""
        ...

    def search(self, query_embedding: Sequence[float], top_k: int) -> list[SearchResult]:
        """Return at most top_k results, best first, ties in insertion order."""
        ...

    def count(self) -> int:
        ...

    def clear(self) -> None:
        ...

    def get_indexed_paths(self) -> set[str]:
        """Distinct 'source' metadata values."""
        ...

    def remove_by_source(self, source: str) -> int:
        """Remove documents whose source is or lies under ``source``."""
        ...


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine of the angle between two vectors.

    Returns 0.0 when the lengths differ or either vector has zero
    magnitude, so a malformed embedding never aborts a search.
    """
    if len(a) != len(b):
        return 0.0

    dot_product = sum(x * y for x, y in zip(a, b))
    magnitude_a = math.sqrt(sum(x * x for x in a))
    magnitude_b = math.sqrt(sum(y * y for y in b))

    if magnitude_a == 0.0 or magnitude_b == 0.0:
        return 0.0

    return dot_product / (magnitude_a * magnitude_b)


def source_matches(source: str, prefix: str) -> bool:
    """
    True if ``source`` equals ``prefix`` or is nested beneath it.

    "dirA" matches "dirA" and "dirA/x.py" but not "dirAB/x.py".
    """
    prefix = prefix.rstrip("/\\")
    if not prefix or not source:
        return False
    if source == prefix:
        return True
    return any(source.startswith(prefix + sep) for sep in {"/", os.sep})


def rank_results(
    scored: Iterable[tuple[Document, float]],
    top_k: int,
) -> list[SearchResult]:
    """
    Sort (document, score) pairs by descending score and truncate.

    ``sorted`` is stable, so equal scores keep the order of ``scored``.
    """
    if top_k <= 0:
        return []
    ranked = sorted(scored, key=lambda pair: pair[1], reverse=True)
    return [
        SearchResult(document=document, score=score)
        for document, score in ranked[:top_k]
    ]
