"""Tests for vector_store.main - store inspection helpers."""

from unittest.mock import MagicMock

from vector_store.main import check_health, search_demo, show_store_info

from conftest import make_document


class TestShowStoreInfo:
    def test_lists_sources(self, memory_store, capsys):
        memory_store.add(make_document("1", [1.0, 0.0], source="src/b.py"))
        memory_store.add(make_document("2", [0.0, 1.0], source="src/a.py"))

        show_store_info(memory_store)

        out = capsys.readouterr().out
        assert "Documents:  2" in out
        assert out.index("src/a.py") < out.index("src/b.py")


class TestSearchDemo:
    def test_prints_hits(self, memory_store, embedder, capsys):
        memory_store.add(make_document("cfg", embedder.embed("config"), source="src/config.py"))

        search_demo(memory_store, embedder, "config", top_k=1)

        out = capsys.readouterr().out
        assert "Hit 1" in out
        assert "src/config.py" in out

    def test_no_hits(self, memory_store, embedder, capsys):
        search_demo(memory_store, embedder, "config", top_k=1)
        assert "No results." in capsys.readouterr().out


class TestCheckHealth:
    def test_unhealthy(self, capsys):
        embedder = MagicMock(model="nomic-embed-text")
        embedder.health_check.return_value = {"healthy": False, "error": "Cannot connect"}

        assert check_health(embedder) is False
        assert "ollama pull nomic-embed-text" in capsys.readouterr().out

    def test_healthy(self):
        embedder = MagicMock(model="nomic-embed-text")
        embedder.health_check.return_value = {"healthy": True}
        assert check_health(embedder) is True
