#!/usr/bin/env python3
"""
Retrieval CLI - index directories, add snippets and query the knowledge base

Prerequisites:
    1. Ollama is running: ollama serve
    2. Model is pulled:   ollama pull nomic-embed-text

Usage:
    python -m retrieval.main index ./src
    python -m retrieval.main add "Deploys run on Fridays." --source notes
    python -m retrieval.main query "When do deploys run?"
    python -m retrieval.main sources
    python -m retrieval.main remove ./src/legacy
    python -m retrieval.main count
    python -m retrieval.main clear
    python -m retrieval.main serve --port 8000

Storage is selected with --storage/--storage-path/--storage-url or the
RETRIEVAL_STORAGE* environment variables; a .env file in the working
directory is loaded first.
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional

from dotenv import load_dotenv

from vector_store.exceptions import RetrievalError
from vector_store.models import StorageMode

from .config import RetrievalConfig
from .logging_config import setup_logging
from .manager import RetrievalManager

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Retrieval engine - ingest text and query it by similarity",
    )
    parser.add_argument(
        "--storage",
        choices=["memory", "embedded", "remote"],
        default=None,
        help="Storage backend (default: from RETRIEVAL_STORAGE, else embedded)",
    )
    parser.add_argument("--storage-path", default=None, help="Directory for embedded storage")
    parser.add_argument("--storage-url", default=None, help="URL of a remote Chroma server")
    parser.add_argument("--collection", default=None, help="Collection name")
    parser.add_argument("--top-k", type=int, default=None, help="Number of results per query")
    parser.add_argument("--timeout", type=float, default=None, help="Per-call timeout in seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    index = commands.add_parser("index", help="Index every source/text file under a directory")
    index.add_argument("path")

    add = commands.add_parser("add", help="Add a single text snippet")
    add.add_argument("content")
    add.add_argument("--source", required=True, help="Label stored as the snippet's source")

    query = commands.add_parser("query", help="Print the context block for a query")
    query.add_argument("query")

    commands.add_parser("sources", help="List indexed sources")

    remove = commands.add_parser("remove", help="Remove a source (file or directory prefix)")
    remove.add_argument("source")

    commands.add_parser("count", help="Print the number of stored documents")
    commands.add_parser("clear", help="Remove every stored document")

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def config_from_args(args: argparse.Namespace) -> RetrievalConfig:
    """Environment config with command-line overrides applied."""
    config = RetrievalConfig.from_env()
    overrides = {}

    if args.storage == "memory":
        overrides["storage"] = StorageMode.memory()
    elif args.storage == "embedded" or (args.storage is None and args.storage_path):
        overrides["storage"] = StorageMode.embedded(args.storage_path or "data/retrieval/chroma")
    elif args.storage == "remote" or (args.storage is None and args.storage_url):
        overrides["storage"] = StorageMode.remote(args.storage_url or "http://localhost:8000")

    if args.collection:
        overrides["collection_name"] = args.collection
    if args.top_k is not None:
        overrides["top_k"] = args.top_k
    if args.timeout is not None:
        overrides["timeout_seconds"] = args.timeout

    return replace(config, **overrides)


def run(args: argparse.Namespace, manager: RetrievalManager) -> None:
    if args.command == "index":
        stats = manager.index_directory_with_stats(args.path)
        print(f"Indexed {stats.files_indexed} files ({stats.chunks_stored} chunks) in {stats.total_time_seconds}s")
        print(f"Total documents: {manager.knowledge_base_count()}")
    elif args.command == "add":
        document = manager.add_knowledge(args.content, args.source)
        print(f"Stored {document.id}")
    elif args.command == "query":
        context = manager.retrieve_context(args.query)
        print(context if context else "No relevant context found.")
    elif args.command == "sources":
        for path in manager.get_indexed_paths():
            print(path)
    elif args.command == "remove":
        print(f"Removed {manager.remove_source(args.source)} documents")
    elif args.command == "count":
        print(manager.knowledge_base_count())
    elif args.command == "clear":
        manager.clear()
        print("Knowledge base cleared.")
    elif args.command == "serve":
        import uvicorn

        from .app import create_app

        uvicorn.run(create_app(manager=manager), host=args.host, port=args.port)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv()
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = config_from_args(args)
        with RetrievalManager(config) as manager:
            run(args, manager)
    except RetrievalError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
