#!/usr/bin/env python3
"""
Vector Store Inspector - health check and contents of a collection

Prerequisites:
    1. Ollama is running: ollama serve
    2. Model is pulled:   ollama pull nomic-embed-text

Usage:
    python -m vector_store.main                                  # embedded store in ./data/retrieval/chroma
    python -m vector_store.main --path ./chroma_db               # another embedded store
    python -m vector_store.main --url http://localhost:8000      # remote Chroma server
    python -m vector_store.main --query "config loading"         # search the collection
"""

import argparse
import logging
import sys

from dotenv import load_dotenv

from vector_store import OllamaEmbedder, StorageMode, create_vector_store
from vector_store.base import VectorStore
from vector_store.exceptions import RetrievalError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def check_health(embedder: OllamaEmbedder) -> bool:
    """Check that Ollama is reachable and the model is pulled."""
    print("\n=== Health Check ===")
    health = embedder.health_check()

    for key, value in health.items():
        status = "OK" if value is True else ("FAILED" if value is False else value)
        print(f"  {key}: {status}")

    if not health.get("healthy", False):
        print("\nOllama is not reachable or the model is missing.")
        print("  1. Start Ollama: ollama serve")
        print(f"  2. Pull model:   ollama pull {embedder.model}")
        return False

    return True


def show_store_info(store: VectorStore) -> None:
    """Print document count and indexed sources."""
    print("\n=== Store Status ===")
    print(f"  Documents:  {store.count()}")

    paths = sorted(store.get_indexed_paths())
    print(f"  Sources:    {len(paths)}")
    for path in paths:
        print(f"    - {path}")


def search_demo(store: VectorStore, embedder: OllamaEmbedder, query: str, top_k: int) -> None:
    """Run a similarity search and print the hits."""
    print(f"\n=== Search: \"{query}\" (Top {top_k}) ===")

    results = store.search(embedder.embed(query), top_k)

    if not results:
        print("  No results.")
        return

    for i, r in enumerate(results, 1):
        print(f"\n  --- Hit {i} (Similarity: {r.score:.4f}) ---")
        print(f"  Id:     {r.document.id}")
        print(f"  Source: {r.document.source}")
        text_preview = r.document.content[:150].replace("\n", " ")
        print(f"  Text:   {text_preview}...")


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(
        description="Vector Store Inspector - check health and browse a collection",
    )
    location = parser.add_mutually_exclusive_group()
    location.add_argument(
        "--path",
        default="./data/retrieval/chroma",
        help="Embedded storage directory (Default: ./data/retrieval/chroma)",
    )
    location.add_argument(
        "--url",
        default=None,
        help="Remote Chroma server URL",
    )
    parser.add_argument("--collection", default="knowledge_base", help="Collection name")
    parser.add_argument("--vector-size", type=int, default=768, help="Embedding dimensionality")
    parser.add_argument("--model", default="nomic-embed-text", help="Ollama embedding model")
    parser.add_argument("--query", "-q", default=None, help="Search query")
    parser.add_argument("--top-k", "-k", type=int, default=5, help="Number of results (Default: 5)")
    args = parser.parse_args()

    mode = StorageMode.remote(args.url) if args.url else StorageMode.embedded(args.path)
    embedder = OllamaEmbedder(model=args.model)

    try:
        store = create_vector_store(mode, args.collection, args.vector_size)
    except RetrievalError as e:
        print(f"\nERROR: {e}")
        sys.exit(1)

    show_store_info(store)

    if args.query:
        if not check_health(embedder):
            sys.exit(1)
        search_demo(store, embedder, args.query, args.top_k)


if __name__ == "__main__":
    main()
