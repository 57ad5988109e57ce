"""Tests for retrieval.main - command dispatch."""

import pytest

from retrieval.main import build_parser, main, run


def _run(manager, *argv):
    run(build_parser().parse_args(list(argv)), manager)


class TestCommands:
    def test_index_and_count(self, manager, source_tree, capsys):
        _run(manager, "index", str(source_tree))
        out = capsys.readouterr().out
        assert "Indexed 4 files (4 chunks)" in out

        _run(manager, "count")
        assert capsys.readouterr().out.strip() == "4"

    def test_add_and_query(self, manager, capsys):
        _run(manager, "add", "Deploys run on Fridays.", "--source", "notes")
        assert capsys.readouterr().out.startswith("Stored notes_")

        _run(manager, "query", "When do deploys run?")
        assert "[1] Deploys run on Fridays." in capsys.readouterr().out

    def test_query_empty_store(self, manager, capsys):
        _run(manager, "query", "anything")
        assert "No relevant context found." in capsys.readouterr().out

    def test_sources_and_remove(self, manager, source_tree, capsys):
        _run(manager, "index", str(source_tree))
        capsys.readouterr()

        _run(manager, "sources")
        assert len(capsys.readouterr().out.splitlines()) == 4

        _run(manager, "remove", str(source_tree / "pkg"))
        assert "Removed 2 documents" in capsys.readouterr().out

    def test_clear(self, manager, capsys):
        _run(manager, "add", "config fact", "--source", "notes")
        _run(manager, "clear")
        assert manager.knowledge_base_count() == 0

    def test_add_requires_source(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["add", "text"])


class TestMain:
    def test_error_exit_code(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RETRIEVAL_STORAGE", "memory")
        assert main(["--storage", "memory", "index", str(tmp_path / "missing")]) == 1
