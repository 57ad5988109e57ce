"""
Data Models for the Vector Store

Defines:
1. Document - One indexed unit (a snippet or one chunk of a file)
2. SearchResult - A document paired with its cosine similarity
3. StorageMode - Configuration value selecting a storage backend

Design Principles:
- Pydantic v2 for validation (consistent with chunking and retrieval)
- Documents are frozen once created; an update is an overwrite by id
- Metadata is a flat str -> str mapping so every backend can store it
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigurationError


class Document(BaseModel):
    """A single stored document with its embedding."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique identifier within a store",
    )
    content: str = Field(
        ...,
        description="Exact text the embedding represents",
    )
    embedding: list[float] = Field(
        default_factory=list,
        description="Dense vector, fixed dimensionality per collection",
    )
    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="Flat metadata; always carries 'source'",
    )

    @property
    def source(self) -> str:
        """Origin path or label of this document."""
        return self.metadata.get("source", "")

    def with_metadata(self, key: str, value: Any) -> "Document":
        """Return a copy with one more metadata entry."""
        return self.model_copy(update={"metadata": {**self.metadata, key: str(value)}})


class SearchResult(BaseModel):
    """A single search hit."""
    document: Document
    score: float = Field(
        ...,
        description="Cosine similarity in [-1, 1]; 0.0 for degenerate inputs",
    )


class StorageMode(BaseModel):
    """
    Selects the backend a store is built on.

    Immutable for the lifetime of a store. Construct it with one of the
    classmethods or parse the configuration shape with from_config().
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["memory", "embedded", "remote"] = Field(
        ...,
        description="Backend kind",
    )
    path: Optional[str] = Field(
        None,
        description="Filesystem root for the embedded backend",
    )
    url: Optional[str] = Field(
        None,
        description="Network address of the remote backend",
    )

    @classmethod
    def memory(cls) -> "StorageMode":
        return cls(kind="memory")

    @classmethod
    def embedded(cls, path: str) -> "StorageMode":
        if not path:
            raise ConfigurationError("Embedded storage requires a path")
        return cls(kind="embedded", path=path)

    @classmethod
    def remote(cls, url: str) -> "StorageMode":
        if not url:
            raise ConfigurationError("Remote storage requires a url")
        return cls(kind="remote", url=url)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "StorageMode":
        """
        Parse ``{"embedded": {"path": ...}}`` or ``{"remote": {"url": ...}}``.

        ``{"memory": {}}`` selects the in-process reference engine.

        Raises:
            ConfigurationError: If the shape is not exactly one known kind.
        """
        if not isinstance(config, dict) or len(config) != 1:
            raise ConfigurationError(
                "Storage configuration must have exactly one key",
                details=f"got {config!r}",
            )
        kind, options = next(iter(config.items()))
        options = options or {}
        if kind == "embedded":
            return cls.embedded(options.get("path", ""))
        if kind == "remote":
            return cls.remote(options.get("url", ""))
        if kind == "memory":
            return cls.memory()
        raise ConfigurationError(f"Unknown storage kind: {kind}")

    def describe(self) -> str:
        if self.kind == "embedded":
            return f"embedded ({self.path})"
        if self.kind == "remote":
            return f"remote ({self.url})"
        return "memory"
