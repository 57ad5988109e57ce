"""
Fixed-size sliding window splitter.

Splits text into windows of ``chunk_size`` characters; each window starts
``chunk_size - overlap`` characters after the previous one, and the last
window ends exactly at the end of the text.
"""

from vector_store.exceptions import ConfigurationError

from .models import FileChunk, IndexedFile


def validate_chunking(chunk_size: int, overlap: int) -> None:
    """
    Reject window parameters that would never advance.

    Raises:
        ConfigurationError: If chunk_size <= 0, overlap < 0 or overlap >= chunk_size.
    """
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ConfigurationError(f"overlap must not be negative, got {overlap}")
    if overlap >= chunk_size:
        raise ConfigurationError(
            f"overlap ({overlap}) must be less than chunk_size ({chunk_size})"
        )


def chunk_text(text: str, chunk_size: int, overlap: int) -> list[str]:
    """
    Split text into overlapping windows, left to right.

    Args:
        text: Text to split.
        chunk_size: Window length in characters.
        overlap: Characters shared by consecutive windows.

    Returns:
        ``[text]`` if the text fits in one window, otherwise the windows
        in scan order.

    Raises:
        ConfigurationError: If the parameters are invalid.
    """
    validate_chunking(chunk_size, overlap)

    if len(text) <= chunk_size:
        return [text]

    step = chunk_size - overlap
    chunks: list[str] = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        chunks.append(text[start:end])
        if end == len(text):
            break
        start += step

    return chunks


def chunk_file(file: IndexedFile, chunk_size: int, overlap: int) -> list[FileChunk]:
    """Split a file into chunks numbered by their position in that file."""
    return [
        FileChunk(source=file.path, chunk_index=i, text=text)
        for i, text in enumerate(chunk_text(file.content, chunk_size, overlap))
    ]
