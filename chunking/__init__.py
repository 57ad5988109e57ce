"""
Chunking Module - Fixed-size sliding window chunking for retrieval

Splits raw text into overlapping character windows and collects the
files of a directory tree that are worth indexing.

Quick Start:
    from chunking import chunk_text, collect_files

    chunks = chunk_text(text, chunk_size=1000, overlap=200)
    for file in collect_files("./src"):
        print(file.path, len(file.content))
"""

__version__ = "1.0.0"

from .files import INDEXABLE_EXTENSIONS, collect_files, is_indexable, iter_files
from .models import FileChunk, IndexedFile
from .splitter import chunk_file, chunk_text, validate_chunking

__all__ = [
    "__version__",
    "chunk_text",
    "chunk_file",
    "validate_chunking",
    "collect_files",
    "iter_files",
    "is_indexable",
    "INDEXABLE_EXTENSIONS",
    "IndexedFile",
    "FileChunk",
]
