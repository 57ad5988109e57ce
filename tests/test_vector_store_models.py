"""Tests for vector_store.models - Data models."""

import pytest
from pydantic import ValidationError

from vector_store.exceptions import ConfigurationError
from vector_store.models import Document, SearchResult, StorageMode


class TestDocument:
    def test_creation(self):
        doc = Document(
            id="src/a.py_chunk_0",
            content="def main(): ...",
            embedding=[0.1, 0.2],
            metadata={"source": "src/a.py", "chunk": "0"},
        )
        assert doc.source == "src/a.py"
        assert doc.embedding == [0.1, 0.2]

    def test_defaults(self):
        doc = Document(id="x", content="text")
        assert doc.embedding == []
        assert doc.metadata == {}
        assert doc.source == ""

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Document(id="", content="text")

    def test_frozen(self):
        doc = Document(id="x", content="text")
        with pytest.raises(ValidationError):
            doc.content = "changed"

    def test_with_metadata_returns_copy(self):
        doc = Document(id="x", content="text", metadata={"source": "notes"})
        updated = doc.with_metadata("chunk", 3)

        assert updated.metadata == {"source": "notes", "chunk": "3"}
        assert doc.metadata == {"source": "notes"}


class TestSearchResult:
    def test_creation(self):
        doc = Document(id="x", content="text", embedding=[1.0])
        result = SearchResult(document=doc, score=0.87)
        assert result.document.id == "x"
        assert result.score == 0.87


class TestStorageMode:
    def test_memory(self):
        mode = StorageMode.memory()
        assert mode.kind == "memory"
        assert mode.describe() == "memory"

    def test_embedded(self):
        mode = StorageMode.embedded("./data/chroma")
        assert mode.kind == "embedded"
        assert mode.path == "./data/chroma"
        assert "./data/chroma" in mode.describe()

    def test_remote(self):
        mode = StorageMode.remote("http://localhost:8000")
        assert mode.kind == "remote"
        assert mode.url == "http://localhost:8000"

    def test_embedded_requires_path(self):
        with pytest.raises(ConfigurationError):
            StorageMode.embedded("")

    def test_remote_requires_url(self):
        with pytest.raises(ConfigurationError):
            StorageMode.remote("")

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            StorageMode(kind="cloud")

    def test_immutable(self):
        mode = StorageMode.embedded("./a")
        with pytest.raises(ValidationError):
            mode.path = "./b"


class TestStorageModeFromConfig:
    def test_embedded(self):
        mode = StorageMode.from_config({"embedded": {"path": "/var/lib/kb"}})
        assert mode == StorageMode.embedded("/var/lib/kb")

    def test_remote(self):
        mode = StorageMode.from_config({"remote": {"url": "https://chroma.example.com"}})
        assert mode == StorageMode.remote("https://chroma.example.com")

    def test_memory(self):
        assert StorageMode.from_config({"memory": {}}).kind == "memory"

    @pytest.mark.parametrize("config", [
        {},
        {"embedded": {"path": "a"}, "remote": {"url": "b"}},
        {"cloud": {}},
        {"embedded": {}},
        {"remote": None},
        "embedded",
    ])
    def test_invalid_shapes(self, config):
        with pytest.raises(ConfigurationError):
            StorageMode.from_config(config)
