"""
Directory collection for ingestion.

Walks a directory tree with an explicit work-list and yields the files
whose extension is on the allow-list. Directories are visited in sorted
order, so the traversal order is the same on every run and platform.
Unreadable files and subdirectories are skipped; only an unreadable root
is an error.
"""

import logging
from collections import deque
from pathlib import Path
from typing import Iterator, Union

from vector_store.exceptions import IngestionIOError

from .models import IndexedFile

logger = logging.getLogger(__name__)

# Case-sensitive, compared without the leading dot
INDEXABLE_EXTENSIONS = frozenset({"rs", "go", "py", "js", "ts", "tsx", "jsx", "md", "txt"})


def is_indexable(path: Union[str, Path]) -> bool:
    """True if the file's extension is on the allow-list."""
    suffix = Path(path).suffix
    return bool(suffix) and suffix[1:] in INDEXABLE_EXTENSIONS


def iter_files(dir_path: Union[str, Path]) -> Iterator[IndexedFile]:
    """
    Yield indexable files under ``dir_path`` in traversal order.

    Files are read lazily, one at a time, as the caller consumes them.

    Raises:
        IngestionIOError: If ``dir_path`` itself cannot be listed.
    """
    root = Path(dir_path)
    try:
        root_entries = sorted(root.iterdir())
    except OSError as e:
        raise IngestionIOError(str(root), details=str(e)) from e

    pending: deque[list[Path]] = deque([root_entries])
    while pending:
        for entry in pending.popleft():
            if entry.is_dir() and not entry.is_symlink():
                try:
                    pending.append(sorted(entry.iterdir()))
                except OSError as e:
                    logger.debug(f"Skipping unreadable directory {entry}: {e}")
                continue

            if not is_indexable(entry):
                continue

            try:
                content = entry.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.debug(f"Skipping unreadable file {entry}: {e}")
                continue

            yield IndexedFile(path=str(entry), content=content)


def collect_files(dir_path: Union[str, Path]) -> list[IndexedFile]:
    """Collect every indexable file under ``dir_path``."""
    return list(iter_files(dir_path))
